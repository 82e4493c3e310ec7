"""Declarative predicates for querying a parsed tree.

A ``Filter`` is an immutable value. Every builder method returns a new filter
and leaves the receiver untouched, so filters can be shared and extended
freely::

    links = Filter().tag_name("a")
    external = links.attribute_value("rel", "external")
    buttons = Filter().tag_name("button").attribute_name("disabled")
    mentions = Filter().text_contains("Alice")

All constraints must hold for a node to match. A filter without constraints
matches every node.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .node import Tag


@dataclass(frozen=True, slots=True)
class Filter:
    # Wanted tag name, compared exactly.
    name: str | None = None
    # (attribute name, wanted value); a value of None only requires presence.
    attributes: tuple[tuple[str, str | None], ...] = ()
    # Substring wanted in the text content.
    contains: str | None = None

    # Node kinds kept inside returned sub-trees, and reportable on their own.
    keep_text: bool = True
    keep_comments: bool = True
    keep_doctype: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.attributes, tuple):
            object.__setattr__(self, "attributes", tuple((name, value) for name, value in self.attributes))

    # ---------------------
    # Builder methods
    # ---------------------

    def tag_name(self, name: str) -> Filter:
        """Only match tags called ``name`` (replaces any previous tag name)."""
        return replace(self, name=name)

    def attribute_name(self, name: str) -> Filter:
        """Only match tags carrying attribute ``name``, whatever its value."""
        return self._with_attribute(name, None)

    def attribute_value(self, name: str, value: str) -> Filter:
        """Only match tags whose attribute ``name`` equals ``value`` exactly."""
        return self._with_attribute(name, value)

    def text_contains(self, substring: str) -> Filter:
        """Only match nodes whose text content contains ``substring`` (replaces any previous one)."""
        return replace(self, contains=substring)

    def text(self, keep: bool) -> Filter:
        return replace(self, keep_text=bool(keep))

    def comments(self, keep: bool) -> Filter:
        return replace(self, keep_comments=bool(keep))

    def doctype(self, keep: bool) -> Filter:
        return replace(self, keep_doctype=bool(keep))

    def _with_attribute(self, name: str, value: str | None) -> Filter:
        constraint = (name, value)
        if constraint in self.attributes:
            return self
        return replace(self, attributes=(*self.attributes, constraint))

    # ---------------------
    # Predicates
    # ---------------------

    @property
    def is_empty(self) -> bool:
        """True when no tag, attribute or text constraint is set."""
        return self.name is None and not self.attributes and self.contains is None

    @property
    def has_tag_constraints(self) -> bool:
        return self.name is not None or bool(self.attributes)

    def accepts_tag(self, tag: Tag) -> bool:
        """Check the tag-name and attribute constraints against ``tag``."""
        if self.name is not None and tag.name != self.name:
            return False
        attrs = tag.attrs
        for name, value in self.attributes:
            if name not in attrs:
                return False
            if value is not None and attrs[name] != value:
                return False
        return True

    def accepts_text(self, text: str) -> bool:
        return self.contains is None or self.contains in text

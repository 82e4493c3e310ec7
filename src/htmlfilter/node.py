"""Immutable HTML tree.

A parsed document is a ``Document`` holding top-level nodes. Every other
node is one of ``TagNode``, ``Text``, ``Comment``, ``Doctype``,
``Collection`` (an ordered sibling group) or the ``EMPTY`` placeholder.

A ``TagNode`` owns exactly one child: ``EMPTY`` when the tag has no content,
the node itself when it has one, and a ``Collection`` when it has several.
Nodes are frozen and hold their children in tuples, so a tree never changes
after construction and sub-trees can be handed out without copying.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .constants import VOID_ELEMENTS

if TYPE_CHECKING:
    from .filter import Filter


class Attributes(Mapping):
    """Ordered, read-only mapping of attribute name to value (``None`` when valueless)."""

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, str | None] | Iterable[tuple[str, str | None]] | None = None) -> None:
        data: dict[str, str | None] = {}
        if items is not None:
            pairs = items.items() if isinstance(items, Mapping) else items
            for name, value in pairs:
                data[name] = value
        self._items = data

    def __getitem__(self, name: str) -> str | None:
        return self._items[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        # Order matters: attributes are kept as written.
        if isinstance(other, Mapping):
            return list(self._items.items()) == list(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._items.items()))

    def __repr__(self) -> str:
        return f"Attributes({self._items!r})"


@dataclass(frozen=True, slots=True)
class Tag:
    """Tag name, attributes and whether the tag closes itself."""

    name: str
    attrs: Attributes = field(default_factory=Attributes)
    self_closing: bool = False

    def __post_init__(self) -> None:
        if not self.name or any(ch.isspace() for ch in self.name):
            msg = f"Invalid tag name {self.name!r}: must be non-empty and contain no whitespace"
            raise ValueError(msg)
        if not isinstance(self.attrs, Attributes):
            object.__setattr__(self, "attrs", Attributes(self.attrs))

    @property
    def is_void(self) -> bool:
        return self.name.lower() in VOID_ELEMENTS

    def has_attr(self, name: str) -> bool:
        return name in self.attrs

    def find_attr_value(self, name: str) -> str | None:
        """Return the value of attribute ``name``.

        ``None`` is returned both when the attribute is absent and when it was
        written without a value (``<input disabled>``); use ``has_attr`` to
        tell the two apart.
        """
        return self.attrs.get(name)


class Node:
    """Behaviour shared by every node variant."""

    __slots__ = ()

    @property
    def children(self) -> tuple[Node, ...]:
        """Direct children, without the ``Collection``/``EMPTY`` wrapping."""
        return ()

    def walk(self) -> Iterator[Node]:
        """Yield this node and all its descendants in document order."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, TagNode):
                stack.append(node.child)
            elif isinstance(node, (Collection, Document)):
                stack.extend(reversed(node.children))

    @property
    def text(self) -> str:
        """Concatenated data of every descendant ``Text`` node."""
        return "".join(node.data for node in self.walk() if isinstance(node, Text))

    def filter(self, predicate: Filter) -> Collection:
        from .query import filter_html

        return filter_html(self, predicate)

    def find(self, predicate: Filter) -> Node | None:
        from .query import find_html

        return find_html(self, predicate)

    def to_html(self, pretty: bool = False, indent_size: int = 2) -> str:
        from .serialize import to_html

        return to_html(self, pretty=pretty, indent_size=indent_size)

    def __str__(self) -> str:
        return self.to_html()


@dataclass(frozen=True, slots=True)
class Empty(Node):
    """No value: the child of a tag without content."""

    def __bool__(self) -> bool:
        return False


EMPTY = Empty()


@dataclass(frozen=True, slots=True)
class Text(Node):
    data: str


@dataclass(frozen=True, slots=True)
class Comment(Node):
    data: str


@dataclass(frozen=True, slots=True)
class Doctype(Node):
    """Declaration such as ``<!DOCTYPE html>``; ``raw`` is ``DOCTYPE html``."""

    raw: str

    @property
    def name(self) -> str:
        parts = self.raw.split(None, 1)
        return parts[0] if parts else ""

    @property
    def value(self) -> str | None:
        parts = self.raw.split(None, 1)
        if len(parts) < 2:
            return None
        return parts[1].strip() or None


def _flatten(nodes: Iterable[Node]) -> tuple[Node, ...]:
    flat: list[Node] = []
    for node in nodes:
        if isinstance(node, Collection):
            flat.extend(node.children)
        else:
            flat.append(node)
    return tuple(flat)


@dataclass(frozen=True, slots=True)
class Collection(Node):
    """Ordered group of sibling nodes; nested collections are flattened."""

    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _flatten(self.children))

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def __getitem__(self, index: int) -> Node:
        return self.children[index]


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Top-level parse result."""

    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _flatten(self.children))

    @property
    def doctype(self) -> Doctype | None:
        for child in self.children:
            if isinstance(child, Doctype):
                return child
        return None


@dataclass(frozen=True, slots=True)
class TagNode(Node):
    tag: Tag
    child: Node = EMPTY

    @property
    def name(self) -> str:
        return self.tag.name

    @property
    def attrs(self) -> Attributes:
        return self.tag.attrs

    @property
    def children(self) -> tuple[Node, ...]:
        child = self.child
        if isinstance(child, Collection):
            return child.children
        if isinstance(child, Empty):
            return ()
        return (child,)


def group(nodes: Iterable[Node]) -> Node:
    """Wrap sibling nodes as a single child: ``EMPTY``, the node, or a ``Collection``."""
    items = _flatten(nodes)
    if not items:
        return EMPTY
    if len(items) == 1:
        return items[0]
    return Collection(items)


def make_tag(name: str, attrs: Any = None, *children: Node, self_closing: bool = False) -> TagNode:
    """Build a ``TagNode`` from plain values; handy for constructing expected trees."""
    tag = Tag(name, Attributes(attrs), self_closing or name.lower() in VOID_ELEMENTS)
    return TagNode(tag, group(children))

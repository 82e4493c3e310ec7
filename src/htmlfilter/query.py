"""Tree queries driven by a ``Filter``.

Both queries walk the tree depth-first in document order. A matching node is
reported whole and the walk does not descend into it, so results never
overlap; the walk then continues with the node's following siblings.

``filter_html`` collects every match into a ``Collection``. ``find_html``
stops at the first match and returns it, or ``None`` when nothing matches.
"""

from __future__ import annotations

from collections.abc import Iterator

from .filter import Filter
from .node import EMPTY, Collection, Comment, Doctype, Document, Node, TagNode, Text, group


def matches(node: Node, predicate: Filter) -> bool:
    """Check ``node`` itself against ``predicate``, ignoring its position.

    Tag-name and attribute constraints only ever match tags. A ``Text`` node
    can match a filter without such constraints; comments and doctypes only
    match a filter without any constraint. Containers never match.
    """
    if isinstance(node, TagNode):
        if not predicate.accepts_tag(node.tag):
            return False
        return predicate.contains is None or predicate.accepts_text(node.text)
    if isinstance(node, Text):
        return predicate.keep_text and not predicate.has_tag_constraints and predicate.accepts_text(node.data)
    if isinstance(node, Comment):
        return predicate.keep_comments and predicate.is_empty
    if isinstance(node, Doctype):
        return predicate.keep_doctype and predicate.is_empty
    return False


def iter_matches(tree: Node, predicate: Filter) -> Iterator[Node]:
    """Lazily yield the outermost matching nodes of ``tree`` in document order."""
    stack: list[Node] = [tree]
    while stack:
        node = stack.pop()
        if matches(node, predicate):
            yield node
            continue
        if isinstance(node, TagNode):
            stack.append(node.child)
        elif isinstance(node, (Collection, Document)):
            stack.extend(reversed(node.children))


def filter_html(tree: Node, predicate: Filter) -> Collection:
    return Collection(tuple(_strip(node, predicate) for node in iter_matches(tree, predicate)))


def find_html(tree: Node, predicate: Filter) -> Node | None:
    for node in iter_matches(tree, predicate):
        return _strip(node, predicate)
    return None


def _is_kept(node: Node, predicate: Filter) -> bool:
    if isinstance(node, Text):
        return predicate.keep_text
    if isinstance(node, Comment):
        return predicate.keep_comments
    if isinstance(node, Doctype):
        return predicate.keep_doctype
    return True


def _strip(root: Node, predicate: Filter) -> Node:
    """Return ``root`` without the node kinds the filter drops."""
    if predicate.keep_text and predicate.keep_comments and predicate.keep_doctype:
        return root

    # Post-order rebuild with an explicit stack; dropped leaves become None.
    results: list[Node | None] = []
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, TagNode):
            if expanded:
                child = results.pop()
                results.append(TagNode(node.tag, EMPTY if child is None else child))
            else:
                stack.append((node, True))
                stack.append((node.child, False))
        elif isinstance(node, (Collection, Document)):
            if expanded:
                start = len(results) - len(node.children)
                kept = [child for child in results[start:] if child is not None]
                del results[start:]
                if isinstance(node, Document):
                    results.append(Document(tuple(kept)))
                else:
                    results.append(group(kept))
            else:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(node.children))
        else:
            results.append(node if _is_kept(node, predicate) else None)
    result = results.pop()
    return EMPTY if result is None else result

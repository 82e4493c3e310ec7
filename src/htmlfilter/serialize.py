"""HTML serialization utilities for htmlfilter trees."""

from __future__ import annotations

from .node import Collection, Comment, Doctype, Document, Empty, Node, TagNode, Text


def _choose_attr_quote(value: str) -> str | None:
    """Pick the quote for ``value``; ``None`` means write it unquoted."""
    if '"' not in value:
        return '"'
    if "'" not in value:
        return "'"
    if value[0] not in "\"'" and ">" not in value and not any(ch.isspace() for ch in value):
        return None
    return '"'


def serialize_attrs(attrs) -> str:
    parts = []
    for name, value in attrs.items():
        if value is None:
            parts.append(f" {name}")
            continue
        quote = _choose_attr_quote(value)
        if quote is None:
            parts.append(f" {name}={value}")
            continue
        if quote == '"':
            # Both quote kinds plus whitespace or ">": no form reads back unchanged.
            value = value.replace('"', "&quot;")
        parts.append(f" {name}={quote}{value}{quote}")
    return "".join(parts)


def serialize_start_tag(tag) -> str:
    attr_str = serialize_attrs(tag.attrs)
    if tag.self_closing and not tag.is_void:
        return f"<{tag.name}{attr_str} />"
    return f"<{tag.name}{attr_str}>"


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def to_html(node: Node, indent: int = 0, indent_size: int = 2, *, pretty: bool = False) -> str:
    """Convert ``node`` to an HTML string.

    The compact form keeps text verbatim, so parsing its output gives back
    the same tree. The pretty form puts each element on its own line, indents
    nested elements and drops whitespace-only text.
    """
    if pretty:
        return _node_to_pretty_html(node, indent, indent_size)
    parts: list[str] = []
    _write_compact(node, parts)
    return "".join(parts)


def _write_compact(node: Node, parts: list[str]) -> None:
    # Explicit stack: strings are emitted as-is, nodes are expanded.
    stack: list[Node | str] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Text):
            parts.append(item.data)
        elif isinstance(item, Comment):
            parts.append(f"<!--{item.data}-->")
        elif isinstance(item, Doctype):
            parts.append(f"<!{item.raw}>")
        elif isinstance(item, (Document, Collection)):
            stack.extend(reversed(item.children))
        elif isinstance(item, TagNode):
            parts.append(serialize_start_tag(item.tag))
            if item.tag.self_closing and isinstance(item.child, Empty):
                continue
            stack.append(serialize_end_tag(item.tag.name))
            stack.append(item.child)


def _node_to_pretty_html(node: Node, indent: int, indent_size: int) -> str:
    prefix = " " * (indent * indent_size)

    if isinstance(node, Text):
        text = node.data.strip()
        if text:
            return f"{prefix}{text}"
        return ""

    if isinstance(node, Comment):
        return f"{prefix}<!--{node.data}-->"

    if isinstance(node, Doctype):
        return f"{prefix}<!{node.raw}>"

    if isinstance(node, Empty):
        return ""

    if isinstance(node, (Document, Collection)):
        parts = []
        for child in node.children:
            child_html = _node_to_pretty_html(child, indent, indent_size)
            if child_html:
                parts.append(child_html)
        return "\n".join(parts)

    start = serialize_start_tag(node.tag)
    if node.tag.self_closing and isinstance(node.child, Empty):
        return f"{prefix}{start}"

    name = node.tag.name
    children = node.children
    if not children:
        return f"{prefix}{start}{serialize_end_tag(name)}"

    # Text-only children render inline.
    if all(isinstance(child, Text) for child in children):
        text = "".join(child.data for child in children).strip()
        return f"{prefix}{start}{text}{serialize_end_tag(name)}"

    parts = [f"{prefix}{start}"]
    for child in children:
        child_html = _node_to_pretty_html(child, indent + 1, indent_size)
        if child_html:
            parts.append(child_html)
    parts.append(f"{prefix}{serialize_end_tag(name)}")
    return "\n".join(parts)


def to_test_format(node: Node, indent: int = 0) -> str:
    """Dump a tree in the html5lib test format (``| `` prefixed lines)."""
    if isinstance(node, (Document, Collection)):
        return "\n".join(line for line in (to_test_format(child, indent) for child in node.children) if line)
    if isinstance(node, Empty):
        return ""
    if isinstance(node, Text):
        return f'| {" " * indent}"{node.data}"'
    if isinstance(node, Comment):
        return f"| {' ' * indent}<!-- {node.data} -->"
    if isinstance(node, Doctype):
        return f"| {' ' * indent}<!{node.raw}>"

    result = f"| {' ' * indent}<{node.tag.name}>"
    # Attributes on their own lines, in source order.
    for key, value in node.tag.attrs.items():
        if value is None:
            result += f"\n| {' ' * (indent + 2)}{key}"
        else:
            result += f'\n| {" " * (indent + 2)}{key}="{value}"'

    child_output = to_test_format(node.child, indent + 2)
    if child_output:
        return f"{result}\n{child_output}"
    return result

"""HTML constants shared by the tokenizer, tree builder and serializer.

Usage:
    from htmlfilter.constants import VOID_ELEMENTS

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
"""

# Elements that never have content or a closing tag. Compared against the
# lowercased tag name.
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "basefont",
        "bgsound",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

DOCTYPE_KEYWORD = "doctype"

from .filter import Filter
from .node import EMPTY, Attributes, Collection, Comment, Doctype, Document, Empty, Node, Tag, TagNode, Text
from .parser import HtmlFilter, parse
from .query import filter_html, find_html, matches
from .serialize import to_html, to_test_format
from .tokenizer import Tokenizer, TokenizerOpts
from .tokens import (
    InvalidHtml,
    ParseError,
    StrictModeError,
    UnterminatedComment,
    UnterminatedDoctype,
    UnterminatedTag,
)

__all__ = [
    "EMPTY",
    "Attributes",
    "Collection",
    "Comment",
    "Doctype",
    "Document",
    "Empty",
    "Filter",
    "HtmlFilter",
    "InvalidHtml",
    "Node",
    "ParseError",
    "StrictModeError",
    "Tag",
    "TagNode",
    "Text",
    "Tokenizer",
    "TokenizerOpts",
    "UnterminatedComment",
    "UnterminatedDoctype",
    "UnterminatedTag",
    "filter_html",
    "find_html",
    "matches",
    "parse",
    "to_html",
    "to_test_format",
]

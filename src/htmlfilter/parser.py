"""htmlfilter parser entry point."""

from .query import filter_html, find_html
from .serialize import to_html
from .tokenizer import Tokenizer, TokenizerOpts
from .tokens import StrictModeError
from .treebuilder import TreeBuilder


class HtmlFilter:
    """Parse ``html`` into ``root`` (a ``Document``) and query it.

    ``collect_errors`` records every tolerated irregularity in ``errors`` as
    ``ParseError`` objects. ``strict`` raises ``StrictModeError`` on the first
    of them instead. Truncated markup (``<div``, ``<!-- ...``) always raises an
    ``InvalidHtml`` subclass.
    """

    __slots__ = ("errors", "root", "strict")

    def __init__(self, html, *, collect_errors=False, strict=False, tokenizer_opts=None):
        self.strict = bool(strict)
        collect_errors = bool(collect_errors) or self.strict
        opts = tokenizer_opts or TokenizerOpts()
        if collect_errors and not opts.collect_errors:
            opts = TokenizerOpts(collect_errors=True, discard_bom=opts.discard_bom)

        tokenizer = Tokenizer(html, opts)
        tree_builder = TreeBuilder(collect_errors=collect_errors, strict=self.strict, locate=tokenizer.location)
        for token in tokenizer:
            if self.strict and tokenizer.errors:
                raise StrictModeError(tokenizer.errors[0])
            tree_builder.process_token(token)
        self.root = tree_builder.finish()
        self.errors = self._merge_errors(tokenizer.errors, tree_builder.errors) if collect_errors else []

    @staticmethod
    def _merge_errors(*sources):
        errors = [error for source in sources for error in source]
        # Report in source order; errors without a position go last.
        errors.sort(key=lambda e: (e.line is None, e.line or 0, e.column or 0))
        return errors

    def filter(self, predicate):
        return filter_html(self.root, predicate)

    def find(self, predicate):
        return find_html(self.root, predicate)

    def to_html(self, pretty=False, indent_size=2):
        return to_html(self.root, indent_size=indent_size, pretty=pretty)


def parse(html, *, collect_errors=False, strict=False):
    """Parse ``html`` and return its ``Document``.

    Raises ``InvalidHtml`` (``UnterminatedTag``, ``UnterminatedComment``,
    ``UnterminatedDoctype``) for truncated markup, and ``StrictModeError`` in
    strict mode.
    """
    return HtmlFilter(html, collect_errors=collect_errors, strict=strict).root

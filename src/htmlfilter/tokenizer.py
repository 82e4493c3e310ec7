import re
from bisect import bisect_right

from .constants import DOCTYPE_KEYWORD, VOID_ELEMENTS
from .tokens import (
    CharacterTokens,
    CommentToken,
    DoctypeToken,
    EOFToken,
    ParseError,
    TagToken,
    UnterminatedComment,
    UnterminatedDoctype,
    UnterminatedTag,
)

# Whitespace is anything str.isspace() accepts, matching the Tag name check.
_TAG_NAME_TERMINATOR_PATTERN = re.compile(r"[\s/>]")
_ATTR_NAME_TERMINATOR_PATTERN = re.compile(r"[\s/>=]")
_ATTR_VALUE_UNQUOTED_PATTERN = re.compile(r"[\s>]")


class TokenizerOpts:
    __slots__ = ("collect_errors", "discard_bom")

    def __init__(self, collect_errors=False, discard_bom=True):
        self.collect_errors = bool(collect_errors)
        self.discard_bom = bool(discard_bom)


class Tokenizer:
    """Lazy, single-pass scanner turning HTML source into tokens.

    Iterating a tokenizer yields ``TagToken``, ``CharacterTokens``,
    ``CommentToken`` and ``DoctypeToken`` instances in source order and ends
    with one ``EOFToken``. A tokenizer can be iterated only once.

    Truncated constructs raise ``UnterminatedTag``, ``UnterminatedComment`` or
    ``UnterminatedDoctype`` at the point the scan reaches end-of-input. Other
    irregularities are tolerated and, when ``opts.collect_errors`` is set,
    recorded in ``errors``.
    """

    DATA = 0
    TAG_OPEN = 1
    END_TAG_OPEN = 2
    TAG_NAME = 3
    BEFORE_ATTRIBUTE_NAME = 4
    ATTRIBUTE_NAME = 5
    AFTER_ATTRIBUTE_NAME = 6
    BEFORE_ATTRIBUTE_VALUE = 7
    ATTRIBUTE_VALUE_DOUBLE = 8
    ATTRIBUTE_VALUE_SINGLE = 9
    ATTRIBUTE_VALUE_UNQUOTED = 10
    SELF_CLOSING_START_TAG = 11
    MARKUP_DECLARATION_OPEN = 12
    COMMENT = 13
    BOGUS_COMMENT = 14
    DOCTYPE = 15

    __slots__ = (
        "buffer",
        "comment_start",
        "current_attr_name",
        "current_tag_attrs",
        "current_tag_kind",
        "current_tag_name",
        "current_tag_self_closing",
        "errors",
        "length",
        "line_starts",
        "mark",
        "opts",
        "pending",
        "pos",
        "started",
        "state",
        "text_buffer",
        "text_start",
        "token_start",
    )

    def __init__(self, html, opts=None):
        self.opts = opts or TokenizerOpts()
        html = html or ""
        if html and html[0] == "\ufeff" and self.opts.discard_bom:
            html = html[1:]

        self.buffer = html
        self.length = len(html)
        # Offsets where each line begins, built on the first location() call.
        self.line_starts = None
        self.pos = 0
        self.state = self.DATA
        self.started = False
        self.errors = []

        # Tokens produced by the last state step, handed out by __iter__.
        self.pending = []
        self.text_buffer = []
        self.text_start = 0
        # Offset of the "<" that opened the construct being scanned.
        self.token_start = 0
        # Start offset of the name, value or comment payload being scanned.
        self.mark = 0
        self.comment_start = 0

        self.current_tag_kind = TagToken.START
        self.current_tag_name = ""
        self.current_tag_attrs = {}
        self.current_tag_self_closing = False
        self.current_attr_name = None

    def __iter__(self):
        if self.started:
            msg = "Tokenizer instances can only be iterated once"
            raise RuntimeError(msg)
        self.started = True
        return self._run()

    def _run(self):
        while True:
            state = self.state
            if state == self.DATA:
                done = self._state_data()
            elif state == self.TAG_OPEN:
                done = self._state_tag_open()
            elif state == self.END_TAG_OPEN:
                done = self._state_end_tag_open()
            elif state == self.TAG_NAME:
                done = self._state_tag_name()
            elif state == self.BEFORE_ATTRIBUTE_NAME:
                done = self._state_before_attribute_name()
            elif state == self.ATTRIBUTE_NAME:
                done = self._state_attribute_name()
            elif state == self.AFTER_ATTRIBUTE_NAME:
                done = self._state_after_attribute_name()
            elif state == self.BEFORE_ATTRIBUTE_VALUE:
                done = self._state_before_attribute_value()
            elif state == self.ATTRIBUTE_VALUE_DOUBLE:
                done = self._state_attribute_value_quoted('"')
            elif state == self.ATTRIBUTE_VALUE_SINGLE:
                done = self._state_attribute_value_quoted("'")
            elif state == self.ATTRIBUTE_VALUE_UNQUOTED:
                done = self._state_attribute_value_unquoted()
            elif state == self.SELF_CLOSING_START_TAG:
                done = self._state_self_closing_start_tag()
            elif state == self.MARKUP_DECLARATION_OPEN:
                done = self._state_markup_declaration_open()
            elif state == self.COMMENT:
                done = self._state_comment()
            elif state == self.BOGUS_COMMENT:
                done = self._state_bogus_comment()
            elif state == self.DOCTYPE:
                done = self._state_doctype()
            else:
                # Unknown state fallback to data.
                self.state = self.DATA
                done = False

            if self.pending:
                tokens = self.pending
                self.pending = []
                yield from tokens
            if done:
                return

    def location(self, pos):
        """Return the 1-based (line, column) of a source offset."""
        starts = self.line_starts
        if starts is None:
            starts = [0]
            buffer = self.buffer
            index = buffer.find("\n")
            while index != -1:
                starts.append(index + 1)
                index = buffer.find("\n", index + 1)
            self.line_starts = starts
        line = bisect_right(starts, pos)
        return line, pos - starts[line - 1] + 1

    # ---------------------
    # Helper methods
    # ---------------------

    def _get_char(self):
        if self.pos >= self.length:
            return None
        c = self.buffer[self.pos]
        self.pos += 1
        return c

    def _skip_whitespace(self):
        buffer = self.buffer
        pos = self.pos
        while pos < self.length and buffer[pos].isspace():
            pos += 1
        self.pos = pos

    def _reconsume_current(self):
        self.pos -= 1

    def _append_text(self, chunk, start):
        if not self.text_buffer:
            self.text_start = start
        self.text_buffer.append(chunk)

    def _flush_text(self):
        if not self.text_buffer:
            return
        data = "".join(self.text_buffer)
        self.text_buffer.clear()
        if data:
            self.pending.append(CharacterTokens(data, self.text_start))

    def _emit_token(self, token):
        self._flush_text()
        self.pending.append(token)

    def _emit_error(self, code, message=None, pos=None):
        if not self.opts.collect_errors:
            return
        line, column = self.location(self.token_start if pos is None else pos)
        self.errors.append(ParseError(code, line=line, column=column, message=message))

    def _raise(self, exc_class, message):
        line, column = self.location(self.token_start)
        raise exc_class(ParseError(exc_class.default_code, line=line, column=column, message=message))

    def _start_tag(self, kind):
        self.current_tag_kind = kind
        self.current_tag_name = ""
        self.current_tag_attrs = {}
        self.current_tag_self_closing = False
        self.current_attr_name = None
        # The tag name starts at the letter just consumed.
        self.mark = self.pos - 1

    def _start_attribute(self):
        self.current_attr_name = None
        self.mark = self.pos - 1

    def _finish_attribute(self, value=None):
        name = self.current_attr_name
        if name is None:
            return
        self.current_attr_name = None
        attrs = self.current_tag_attrs
        if name in attrs:
            self._emit_error("duplicate-attribute", f"Attribute '{name}' given twice; keeping the last value")
        attrs[name] = value

    def _emit_current_tag(self):
        self._finish_attribute()
        name = self.current_tag_name
        attrs = self.current_tag_attrs
        self.current_tag_attrs = {}
        if self.current_tag_kind == TagToken.END:
            if attrs:
                self._emit_error("end-tag-with-attributes", f"Attributes on closing tag '{name}' are ignored")
            if self.current_tag_self_closing:
                self._emit_error("end-tag-with-trailing-solidus")
            token = TagToken(TagToken.END, name, pos=self.token_start)
        else:
            self_closing = self.current_tag_self_closing or name.lower() in VOID_ELEMENTS
            token = TagToken(TagToken.START, name, attrs, self_closing, pos=self.token_start)
        self._emit_token(token)
        self.state = self.DATA
        return False

    # ---------------------
    # State handlers
    # ---------------------

    def _state_data(self):
        start = self.pos
        index = self.buffer.find("<", start)
        if index == -1:
            if start < self.length:
                self._append_text(self.buffer[start:], start)
            self.pos = self.length
            self._emit_token(EOFToken(self.length))
            return True
        if index > start:
            self._append_text(self.buffer[start:index], start)
        self.token_start = index
        self.pos = index + 1
        self.state = self.TAG_OPEN
        return False

    def _state_tag_open(self):
        c = self._get_char()
        if c is None:
            self._raise(UnterminatedTag, "EOF after '<'")
        if c == "!":
            self.state = self.MARKUP_DECLARATION_OPEN
            return False
        if c == "/":
            self.state = self.END_TAG_OPEN
            return False
        if c == "?":
            self._emit_error("incorrectly-opened-comment", "Processing instruction treated as a comment")
            self.comment_start = self.pos - 1
            self.state = self.BOGUS_COMMENT
            return False
        if c.isascii() and c.isalpha():
            self._start_tag(TagToken.START)
            self.state = self.TAG_NAME
            return False

        self._emit_error("invalid-first-character-of-tag-name", "'<' kept as text")
        self._append_text("<", self.token_start)
        self._reconsume_current()
        self.state = self.DATA
        return False

    def _state_end_tag_open(self):
        c = self._get_char()
        if c is None:
            self._raise(UnterminatedTag, "EOF after '</'")
        if c.isascii() and c.isalpha():
            self._start_tag(TagToken.END)
            self.state = self.TAG_NAME
            return False
        if c == ">":
            self._emit_error("empty-end-tag", "'</>' ignored")
            self.state = self.DATA
            return False

        self._emit_error("invalid-first-character-of-tag-name", "Closing tag treated as a comment")
        self.comment_start = self.pos - 1
        self.state = self.BOGUS_COMMENT
        return False

    def _state_tag_name(self):
        match = _TAG_NAME_TERMINATOR_PATTERN.search(self.buffer, self.pos)
        if match is None:
            self._raise(UnterminatedTag, "EOF in tag name")
        end = match.start()
        self.current_tag_name = self.buffer[self.mark : end]
        self.pos = end + 1
        c = self.buffer[end]
        if c == "/":
            self.state = self.SELF_CLOSING_START_TAG
            return False
        if c == ">":
            return self._emit_current_tag()
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_before_attribute_name(self):
        self._skip_whitespace()
        c = self._get_char()
        if c is None:
            self._raise(UnterminatedTag, "EOF before attribute name")
        if c == "/":
            self.state = self.SELF_CLOSING_START_TAG
            return False
        if c == ">":
            return self._emit_current_tag()
        if c == "=":
            self._emit_error("unexpected-equals-sign-before-attribute-name", pos=self.pos - 1)
        self._start_attribute()
        self.state = self.ATTRIBUTE_NAME
        return False

    def _state_attribute_name(self):
        match = _ATTR_NAME_TERMINATOR_PATTERN.search(self.buffer, self.pos)
        if match is None:
            self._raise(UnterminatedTag, "EOF in attribute name")
        end = match.start()
        self.current_attr_name = self.buffer[self.mark : end]
        self.pos = end + 1
        c = self.buffer[end]
        if c == "=":
            self.state = self.BEFORE_ATTRIBUTE_VALUE
            return False
        if c == "/":
            self._finish_attribute()
            self.state = self.SELF_CLOSING_START_TAG
            return False
        if c == ">":
            return self._emit_current_tag()
        self.state = self.AFTER_ATTRIBUTE_NAME
        return False

    def _state_after_attribute_name(self):
        self._skip_whitespace()
        c = self._get_char()
        if c is None:
            self._raise(UnterminatedTag, "EOF after attribute name")
        if c == "=":
            self.state = self.BEFORE_ATTRIBUTE_VALUE
            return False
        self._finish_attribute()
        if c == "/":
            self.state = self.SELF_CLOSING_START_TAG
            return False
        if c == ">":
            return self._emit_current_tag()
        self._start_attribute()
        self.state = self.ATTRIBUTE_NAME
        return False

    def _state_before_attribute_value(self):
        self._skip_whitespace()
        c = self._get_char()
        if c is None:
            self._raise(UnterminatedTag, "EOF before attribute value")
        if c == '"':
            self.mark = self.pos
            self.state = self.ATTRIBUTE_VALUE_DOUBLE
            return False
        if c == "'":
            self.mark = self.pos
            self.state = self.ATTRIBUTE_VALUE_SINGLE
            return False
        if c == ">":
            self._emit_error("missing-attribute-value", pos=self.pos - 1)
            self._finish_attribute("")
            return self._emit_current_tag()
        self.mark = self.pos - 1
        self.state = self.ATTRIBUTE_VALUE_UNQUOTED
        return False

    def _state_attribute_value_quoted(self, quote):
        end = self.buffer.find(quote, self.pos)
        if end == -1:
            self._raise(UnterminatedTag, "EOF in attribute value")
        self._finish_attribute(self.buffer[self.mark : end])
        self.pos = end + 1
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_attribute_value_unquoted(self):
        match = _ATTR_VALUE_UNQUOTED_PATTERN.search(self.buffer, self.pos)
        if match is None:
            self._raise(UnterminatedTag, "EOF in attribute value")
        end = match.start()
        self._finish_attribute(self.buffer[self.mark : end])
        self.pos = end + 1
        if self.buffer[end] == ">":
            return self._emit_current_tag()
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_self_closing_start_tag(self):
        c = self._get_char()
        if c is None:
            self._raise(UnterminatedTag, "EOF in tag")
        if c == ">":
            self.current_tag_self_closing = True
            return self._emit_current_tag()
        self._emit_error("unexpected-solidus-in-tag", pos=self.pos - 2)
        self._reconsume_current()
        self.state = self.BEFORE_ATTRIBUTE_NAME
        return False

    def _state_markup_declaration_open(self):
        buffer = self.buffer
        pos = self.pos
        if buffer.startswith("--", pos):
            self.pos = pos + 2
            self.comment_start = self.pos
            self.state = self.COMMENT
            return False
        if buffer[pos : pos + len(DOCTYPE_KEYWORD)].lower() == DOCTYPE_KEYWORD:
            self.pos = pos + len(DOCTYPE_KEYWORD)
            self.state = self.DOCTYPE
            return False

        self._emit_error("incorrectly-opened-comment", "Markup declaration treated as a comment")
        self.comment_start = pos
        self.state = self.BOGUS_COMMENT
        return False

    def _state_comment(self):
        end = self.buffer.find("-->", self.pos)
        if end == -1:
            self._raise(UnterminatedComment, "EOF in comment: missing '-->'")
        self._emit_token(CommentToken(self.buffer[self.comment_start : end], self.token_start))
        self.pos = end + 3
        self.state = self.DATA
        return False

    def _state_bogus_comment(self):
        end = self.buffer.find(">", self.pos)
        if end == -1:
            self._raise(UnterminatedTag, "EOF: missing closing '>'")
        self._emit_token(CommentToken(self.buffer[self.comment_start : end], self.token_start))
        self.pos = end + 1
        self.state = self.DATA
        return False

    def _state_doctype(self):
        end = self.buffer.find(">", self.pos)
        if end == -1:
            self._raise(UnterminatedDoctype, "EOF in doctype: missing '>'")
        # Everything between "<!" and ">", keyword included.
        self._emit_token(DoctypeToken(self.buffer[self.token_start + 2 : end], self.token_start))
        self.pos = end + 1
        self.state = self.DATA
        return False

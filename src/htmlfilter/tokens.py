class TagToken:
    __slots__ = ("attrs", "kind", "name", "pos", "self_closing")

    START = 0
    END = 1

    def __init__(self, kind, name, attrs=None, self_closing=False, pos=0):
        self.kind = kind
        self.name = name
        self.attrs = attrs if attrs is not None else {}
        self.self_closing = bool(self_closing)
        self.pos = pos

    def __repr__(self):
        attrs = " ".join(f"{name}={value!r}" for name, value in self.attrs.items())
        closing = " /" if self.self_closing else ""
        kind_str = "start" if self.kind == self.START else "end"
        return f"<{kind_str}:{self.name}{closing} {attrs}>"


class CharacterTokens:
    __slots__ = ("data", "pos")

    def __init__(self, data, pos=0):
        self.data = data
        self.pos = pos

    def __repr__(self):
        return f"CharacterTokens({self.data!r})"


class CommentToken:
    __slots__ = ("data", "pos")

    def __init__(self, data, pos=0):
        self.data = data
        self.pos = pos

    def __repr__(self):
        return f"CommentToken({self.data!r})"


class DoctypeToken:
    __slots__ = ("pos", "raw")

    def __init__(self, raw, pos=0):
        self.raw = raw
        self.pos = pos

    def __repr__(self):
        return f"DoctypeToken({self.raw!r})"


class EOFToken:
    __slots__ = ("pos",)

    def __init__(self, pos=0):
        self.pos = pos

    def __repr__(self):
        return "EOFToken()"


class ParseError:
    """Represents a parse error with location information."""

    __slots__ = ("code", "column", "line", "message")

    def __init__(self, code, line=None, column=None, message=None):
        self.code = code
        self.line = line
        self.column = column
        self.message = message or code

    def __repr__(self):
        if self.line is not None and self.column is not None:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        return f"ParseError({self.code!r})"

    def __str__(self):
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"({self.line},{self.column}): {self.code} - {self.message}"
            return f"({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.code == other.code and self.line == other.line and self.column == other.column

    __hash__ = None  # Unhashable since we define __eq__


class InvalidHtml(Exception):
    """Raised by ``parse`` when the input cannot be turned into a tree.

    The underlying ``ParseError`` is available as ``error``.
    """

    default_code = "invalid-html"

    def __init__(self, error):
        self.error = error
        super().__init__(str(error))

    @property
    def code(self):
        return self.error.code

    @property
    def reason(self):
        return self.error.message

    @property
    def line(self):
        return self.error.line

    @property
    def column(self):
        return self.error.column


class UnterminatedTag(InvalidHtml):
    default_code = "eof-in-tag"


class UnterminatedComment(InvalidHtml):
    default_code = "eof-in-comment"


class UnterminatedDoctype(InvalidHtml):
    default_code = "eof-in-doctype"


class StrictModeError(InvalidHtml):
    """Raised in strict mode on the first recoverable parse error."""

    default_code = "strict-mode"

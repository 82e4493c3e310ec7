from .node import EMPTY, Comment, Document, Doctype, Tag, TagNode, Text, group
from .tokens import CharacterTokens, CommentToken, DoctypeToken, EOFToken, ParseError, StrictModeError, TagToken


class OpenFrame:
    """A start tag waiting for its closing tag, with the children read so far."""

    __slots__ = ("children", "pos", "tag")

    def __init__(self, tag, pos=0):
        self.tag = tag
        self.children = []
        self.pos = pos

    def close(self):
        return TagNode(self.tag, group(self.children))

    def __repr__(self):
        return f"OpenFrame(<{self.tag.name}>, children={len(self.children)})"


class TreeBuilder:
    """Assemble tokens into a ``Document`` with a stack of open frames.

    Recovery rules; none of them raises unless ``strict`` is set:

    - A closing tag matching an open frame closes every frame opened after it
      (``end-tag-implies-close`` for each of those) and then that frame.
    - A closing tag whose name is not open anywhere is ignored
      (``unexpected-end-tag``); no frame is closed.
    - A doctype read inside an element is placed at document level at the
      point it was read (``doctype-in-element``).
    - Frames still open at end-of-input are closed innermost first
      (``eof-in-element``).
    """

    __slots__ = ("collect_errors", "document_children", "errors", "finished", "locate", "open_frames", "strict")

    def __init__(self, collect_errors=False, strict=False, locate=None):
        self.strict = bool(strict)
        self.collect_errors = bool(collect_errors) or self.strict
        # Maps a source offset to (line, column) for error reports.
        self.locate = locate
        self.errors = []
        self.open_frames = []
        self.document_children = []
        self.finished = False

    @property
    def current_children(self):
        if self.open_frames:
            return self.open_frames[-1].children
        return self.document_children

    def process_token(self, token):
        if isinstance(token, CharacterTokens):
            self._append_text(token.data)
        elif isinstance(token, TagToken):
            if token.kind == TagToken.START:
                self._process_start_tag(token)
            else:
                self._process_end_tag(token)
        elif isinstance(token, CommentToken):
            self.current_children.append(Comment(token.data))
        elif isinstance(token, DoctypeToken):
            if self.open_frames:
                self._parse_error(
                    "doctype-in-element",
                    token.pos,
                    f"Doctype inside <{self.open_frames[-1].tag.name}> moved to document level",
                )
            self.document_children.append(Doctype(token.raw))
        elif isinstance(token, EOFToken):
            self._process_eof()

    def finish(self):
        if not self.finished:
            self._process_eof()
        return Document(tuple(self.document_children))

    def _append_text(self, data):
        children = self.current_children
        if children and isinstance(children[-1], Text):
            children[-1] = Text(children[-1].data + data)
        else:
            children.append(Text(data))

    def _process_start_tag(self, token):
        tag = Tag(token.name, token.attrs, token.self_closing)
        if tag.self_closing:
            self.current_children.append(TagNode(tag, EMPTY))
            return
        self.open_frames.append(OpenFrame(tag, token.pos))

    def _process_end_tag(self, token):
        name = token.name
        frames = self.open_frames
        index = len(frames) - 1
        while index >= 0 and frames[index].tag.name != name:
            index -= 1
        if index < 0:
            self._parse_error("unexpected-end-tag", token.pos, f"Closing tag '{name}' has no open element; ignored")
            return
        while len(frames) > index + 1:
            frame = frames[-1]
            self._parse_error(
                "end-tag-implies-close",
                token.pos,
                f"Closing tag '{name}' also closes unclosed <{frame.tag.name}>",
            )
            self._close_current_frame()
        self._close_current_frame()

    def _process_eof(self):
        while self.open_frames:
            frame = self.open_frames[-1]
            self._parse_error("eof-in-element", frame.pos, f"<{frame.tag.name}> closed at end of input")
            self._close_current_frame()
        self.finished = True

    def _close_current_frame(self):
        frame = self.open_frames.pop()
        self.current_children.append(frame.close())

    def _parse_error(self, code, pos, message=None):
        if not self.collect_errors:
            return
        line = column = None
        if self.locate is not None:
            line, column = self.locate(pos)
        error = ParseError(code, line=line, column=column, message=message)
        self.errors.append(error)
        if self.strict:
            raise StrictModeError(error)

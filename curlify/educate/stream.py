from __future__ import annotations

import bisect
import contextlib
import dataclasses
from dataclasses import dataclass, field

from .. import t
from . import preds
from .errors import DecodeError, EndOfInput, ParserBug

if t.TYPE_CHECKING:
    import argparse

    from .parser import Trigger

# What Sink.lastWritten() reports before anything has been written.
BOF = ""


@dataclass
class ParseConfig:
    markdownEscapes: bool = True
    frontMatter: bool = True
    codeSpans: bool = True
    html: bool = True
    # Word endings that, right before a ' inside single quotes,
    # mean it's an apostrophe rather than the closing quote.
    # Known to be incomplete.
    contractionStems: tuple[str, ...] = ("can", "you", "don")
    context: str | None = None

    @staticmethod
    def fromOptions(options: argparse.Namespace, context: str | None = None) -> ParseConfig:
        stems = ParseConfig.contractionStems
        if options.contractionStems is not None:
            stems = tuple(x.strip() for x in options.contractionStems.split(",") if x.strip())
        return ParseConfig(
            markdownEscapes=not options.noEscapes,
            frontMatter=not options.noFrontMatter,
            codeSpans=not options.noCode,
            html=not options.noHtml,
            contractionStems=stems,
            context=context,
        )

    def withContext(self, context: str | None) -> ParseConfig:
        return dataclasses.replace(self, context=context)


DEFAULT_PARSE_CONFIG = ParseConfig()


class Stream:
    """
    Forward-only cursor over the entire input.

    The whole text is held in memory,
    since peekEquals() and the "first character of the document" check
    both need random access.
    """

    def __init__(self, chars: str, config: ParseConfig, startLine: int = 1) -> None:
        self._chars = chars
        self._len = len(chars)
        self._lineBreaks: list[int] = []
        self.startLine = startLine
        self.config = config
        self.i = 0
        for i, char in enumerate(chars):
            if char == "\n":
                self._lineBreaks.append(i)

    def __getitem__(self, key: int) -> str:
        if key < 0 or key >= self._len:
            return ""
        return self._chars[key]

    def __len__(self) -> int:
        return self._len

    def slice(self, start: int, stop: int) -> str:
        return self._chars[start:stop]

    @property
    def offset(self) -> int:
        return self.i

    def eof(self, index: int | None = None) -> bool:
        if index is None:
            index = self.i
        return index >= self._len

    def peek(self) -> str:
        # "" at end of input
        return self[self.i]

    def peekEquals(self, text: str) -> bool:
        # The next read() would return the first character of `text`.
        return self._chars.startswith(text, self.i)

    def read(self) -> str:
        if self.i >= self._len:
            raise EndOfInput
        ch = self._chars[self.i]
        if preds.isSurrogate(ch):
            msg = f"Input isn't valid Unicode; found {ch!r} (U+{ord(ch):04X})."
            raise DecodeError(msg, loc=self.loc(self.i))
        self.i += 1
        return ch

    def line(self, index: int) -> int:
        # Zero-based line index
        lineIndex = bisect.bisect_left(self._lineBreaks, index)
        return lineIndex + self.startLine

    def col(self, index: int) -> int:
        lineIndex = bisect.bisect_left(self._lineBreaks, index)
        if lineIndex == 0:
            return index + 1
        startOfCol = self._lineBreaks[lineIndex - 1]
        return index - startOfCol

    def loc(self, index: int) -> str:
        rc = f"{self.line(index)}:{self.col(index)}"
        if self.config.context is None:
            return rc
        return f"{rc} of {self.config.context}"


class Sink:
    # Append-only output. Lookbehind always looks here, at what was
    # actually emitted, never at the input.

    def __init__(self) -> None:
        self._chars: list[str] = []

    def __len__(self) -> int:
        return len(self._chars)

    def write(self, ch: str) -> None:
        self._chars.append(ch)

    def lastWritten(self) -> str:
        if not self._chars:
            return BOF
        return self._chars[-1]

    def endsWith(self, text: str) -> bool:
        n = len(text)
        if n == 0:
            return True
        if n > len(self._chars):
            return False
        return "".join(self._chars[-n:]) == text

    def finish(self) -> str:
        return "".join(self._chars)


@dataclass
class OpenSpan:
    name: str
    start: int


@dataclass
class Context:
    """
    Everything one curling pass needs, threaded through every parse function.
    Never shared between passes.
    """

    s: Stream
    out: Sink
    config: ParseConfig
    codeDepth: int = 0
    openSpans: list[OpenSpan] = field(default_factory=list)
    # Trigger character -> kind, fixed for the whole pass.
    triggers: dict[str, Trigger] = field(default_factory=dict)

    @staticmethod
    def fromText(text: str, config: ParseConfig | None = None) -> Context:
        if config is None:
            config = DEFAULT_PARSE_CONFIG
        return Context(s=Stream(text, config), out=Sink(), config=config)

    @contextlib.contextmanager
    def span(self, name: str, start: int) -> t.Generator[None, None, None]:
        # Not a try/finally: if the body raises, the span stays on the stack
        # so the driver can say which one was left open.
        self.openSpans.append(OpenSpan(name, start))
        yield
        self.openSpans.pop()

    def expect(self, condition: bool, msg: str) -> None:
        if not condition:
            raise ParserBug(f"Postcondition failed: {msg}", loc=self.s.loc(self.s.offset))

    def pump(self) -> str:
        # Read one character and write it unchanged.
        ch = self.s.read()
        self.out.write(ch)
        return ch

    def advanceBy(self, n: int) -> None:
        for _ in range(n):
            self.pump()

    def advanceUntil(self, pred: t.CharPredicateT) -> None:
        # Copies characters until the next one satisfies `pred`;
        # that one is left unread.
        while True:
            if self.s.eof():
                raise EndOfInput
            if pred(self.s.peek()):
                return
            self.pump()

    def advanceWhile(self, pred: t.CharPredicateT) -> None:
        self.advanceUntil(lambda ch: not pred(ch))

    def advanceThrough(self, text: str) -> None:
        # Copies characters up to and including the next occurrence of `text`.
        while not self.s.peekEquals(text):
            self.pump()
        self.advanceBy(len(text))

    def advanceThroughFence(self, fence: str) -> None:
        # Copies through the next line consisting of exactly `fence`,
        # including its newline. A fence on the last line needs no newline.
        closing = "\n" + fence
        while True:
            if self.s.peekEquals(closing + "\n"):
                self.advanceBy(len(closing) + 1)
                return
            if self.s.peekEquals(closing) and self.s.eof(self.s.offset + len(closing)):
                self.advanceBy(len(closing))
                return
            self.pump()

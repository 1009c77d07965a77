from __future__ import annotations

from .. import t
from .errors import EducateError, EndOfInput, NestingTooDeep, ParserBug, UnterminatedSpan
from .parser import newContext, parseDocument
from .stream import ParseConfig


def educate(text: str, config: ParseConfig | None = None) -> str:
    """
    Curls the quote marks in `text`, returning the new text.

    Raises an EducateError subclass if the pass can't finish;
    its `partial` attribute holds the output produced up to that point.
    """
    ctx = newContext(text, config)
    try:
        parseDocument(ctx)
    except EndOfInput:
        partial = ctx.out.finish()
        if not ctx.openSpans:
            msg = "Ran out of input outside of any span."
            raise ParserBug(msg, partial=partial) from None
        span = ctx.openSpans[-1]
        loc = ctx.s.loc(span.start)
        msg = f"Hit the end of the input inside {span.name}."
        raise UnterminatedSpan(msg, spanName=span.name, loc=loc, partial=partial) from None
    except RecursionError:
        partial = ctx.out.finish()
        depth = len(ctx.openSpans)
        if not ctx.openSpans:
            raise
        span = ctx.openSpans[-1]
        loc = ctx.s.loc(span.start)
        msg = f"Spans are nested too deeply to follow ({depth} open); the innermost is {span.name}."
        raise NestingTooDeep(msg, spanName=span.name, loc=loc, partial=partial) from None
    except EducateError as e:
        e.partial = ctx.out.finish()
        raise
    return ctx.out.finish()


def educateStream(
    source: t.IO[str] | t.IO[bytes],
    dest: t.IO[str],
    config: ParseConfig | None = None,
) -> int:
    """
    Reads all of `source`, curls it, and writes the result to `dest`.
    Returns the number of characters written.

    Bytes are decoded as UTF-8; anything undecodable
    makes the pass fail with a DecodeError once it's reached.
    On failure nothing is written to `dest`.
    """
    data = source.read()
    if isinstance(data, bytes):
        text = data.decode("utf-8", errors="surrogateescape")
    else:
        text = data
    result = educate(text, config)
    dest.write(result)
    return len(result)

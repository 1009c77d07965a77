from __future__ import annotations

from enum import Enum

from .. import constants, t
from .. import messages as m
from . import preds
from .errors import EndOfInput
from .stream import BOF, Context, ParseConfig

# Conventions for the parse functions below:
#
# * Functions named after a trigger (parseEscape, parseDoubleQuote, ...)
#   are entered with that trigger character as the next unread character,
#   and read it themselves.
# * Functions that handle the inside of something
#   (parseDoubleQuotedText, parseCodeSpan, parseAttributeList, ...)
#   are entered with the first character *inside* it unread.
# * Each one states what the next unread character is when it returns.
#
# None of them catch anything. Running out of input surfaces as EndOfInput,
# which educate() turns into an error naming the innermost open span.
# Nested spans recurse, so very deep nesting surfaces as RecursionError,
# which educate() turns into NestingTooDeep the same way.


class Trigger(Enum):
    Backslash = "backslash"
    DoubleQuote = "double quote"
    SingleQuote = "single quote"
    Hyphen = "hyphen"
    Backtick = "backtick"
    LessThan = "less-than"


TRIGGER_CHARS: dict[str, Trigger] = {
    "\\": Trigger.Backslash,
    constants.straightDouble: Trigger.DoubleQuote,
    constants.openDouble: Trigger.DoubleQuote,
    constants.straightSingle: Trigger.SingleQuote,
    constants.openSingle: Trigger.SingleQuote,
    "-": Trigger.Hyphen,
    "`": Trigger.Backtick,
    "<": Trigger.LessThan,
}

DOUBLE_CLOSERS = (constants.straightDouble, constants.closeDouble)
SINGLE_CLOSERS = (constants.straightSingle, constants.closeSingle)


def triggerTable(config: ParseConfig) -> dict[str, Trigger]:
    # The quote triggers are always on; the rest can be switched off.
    disabled = set()
    if not config.markdownEscapes:
        disabled.add(Trigger.Backslash)
    if not config.frontMatter:
        disabled.add(Trigger.Hyphen)
    if not config.codeSpans:
        disabled.add(Trigger.Backtick)
    if not config.html:
        disabled.add(Trigger.LessThan)
    return {ch: trigger for ch, trigger in TRIGGER_CHARS.items() if trigger not in disabled}


def newContext(text: str, config: ParseConfig | None = None) -> Context:
    ctx = Context.fromText(text, config)
    ctx.triggers = triggerTable(ctx.config)
    return ctx


def parseDocument(ctx: Context) -> None:
    # Consumes the stream until eof.
    while not ctx.s.eof():
        parseOne(ctx)


def triggerFor(ctx: Context, ch: str) -> Trigger | None:
    return ctx.triggers.get(ch)


def parseOne(ctx: Context) -> None:
    # Handles whatever starts at the next character:
    # hands a trigger off to its parse function,
    # or copies anything else straight through.
    trigger = triggerFor(ctx, ctx.s.peek())
    if trigger is None:
        ctx.pump()
    else:
        dispatch(ctx, trigger)


def dispatch(ctx: Context, trigger: Trigger) -> None:
    if trigger is Trigger.Backslash:
        parseEscape(ctx)
    elif trigger is Trigger.DoubleQuote:
        parseDoubleQuote(ctx)
    elif trigger is Trigger.SingleQuote:
        parseSingleQuote(ctx)
    elif trigger is Trigger.Hyphen:
        parseHyphen(ctx)
    elif trigger is Trigger.Backtick:
        parseBacktick(ctx)
    elif trigger is Trigger.LessThan:
        parseAngleStart(ctx)
    else:
        t.assert_never(trigger)


def readExpected(ctx: Context, allowed: t.Sequence[str], what: str) -> str:
    ch = ctx.s.read()
    ctx.expect(ch in allowed, f"expected {what}, got {ch!r}")
    return ch


def parseEscape(ctx: Context) -> None:
    """
    Copies a backslash and the character after it,
    with no further interpretation.
    Returns with the character after the escaped one next.
    """
    readExpected(ctx, ["\\"], "a backslash")
    ctx.out.write("\\")
    if ctx.s.eof():
        # A trailing backslash escapes nothing.
        return
    ctx.pump()


def parseDoubleQuote(ctx: Context) -> None:
    start = ctx.s.offset
    readExpected(ctx, [constants.straightDouble, constants.openDouble], "a double quote")
    ctx.out.write(constants.openDouble)
    with ctx.span("double quotes", start):
        parseDoubleQuotedText(ctx)


def parseDoubleQuotedText(ctx: Context) -> None:
    """
    Copies text inside double quotes, still handling nested triggers,
    until a " or ” closes it; either one comes out as ”.
    Returns with the character after the closing quote next.
    """
    while True:
        if ctx.s.eof():
            raise EndOfInput
        if ctx.s.peek() in DOUBLE_CLOSERS:
            ctx.s.read()
            ctx.out.write(constants.closeDouble)
            return
        parseOne(ctx)


def parseSingleQuote(ctx: Context) -> None:
    """
    Decides whether a ' or ‘ opens a quotation or is an apostrophe:

    1. Right after a letter, it's an apostrophe (it's, don't): ’.
    2. A straight ' right after > or ) can't be decided
       (<a>Mark Twain</a>'s, or a quote ending after markup),
       so it's left alone, with a warning.
    3. Otherwise it opens a quotation: ‘.
    """
    start = ctx.s.offset
    ch = readExpected(ctx, [constants.straightSingle, constants.openSingle], "a single quote")
    prev = ctx.out.lastWritten()

    if preds.isLetter(prev):
        ctx.out.write(constants.closeSingle)
        return

    if ch == constants.straightSingle and prev in (">", ")"):
        m.warn(
            f"Found the string «{prev}'»; can't tell whether this is a quote mark or an apostrophe, so it's been left unchanged. Check the quote marks that follow it by hand.",
            lineNum=ctx.s.loc(start),
        )
        ctx.out.write(ch)
        return

    ctx.out.write(constants.openSingle)
    with ctx.span("single quotes", start):
        parseSingleQuotedText(ctx)


def parseSingleQuotedText(ctx: Context) -> None:
    """
    Copies text inside single quotes, still handling nested triggers,
    until a ' or ’ closes it; either one comes out as ’.

    A mark right after one of the configured contraction stems
    ("can", "you", "don" by default) is taken as an apostrophe instead,
    and the quotation carries on.
    That's a heuristic, and misses any contraction not in the list.

    Returns with the character after the closing quote next.
    """
    while True:
        if ctx.s.eof():
            raise EndOfInput
        if ctx.s.peek() in SINGLE_CLOSERS:
            i = ctx.s.offset
            ctx.s.read()
            stem = contractionStemBefore(ctx)
            ctx.out.write(constants.closeSingle)
            if stem is None:
                return
            m.warn(
                f"The string «{stem}» came right before an apostrophe inside single quotes, so the apostrophe was assumed to be part of a contraction. Double-check the output.",
                lineNum=ctx.s.loc(i),
            )
            continue
        parseOne(ctx)


def contractionStemBefore(ctx: Context) -> str | None:
    for stem in ctx.config.contractionStems:
        if ctx.out.endsWith(stem):
            return stem
    return None


def parseHyphen(ctx: Context) -> None:
    # Only a hyphen starting the document can open front matter;
    # horizontal rules further down are just text.
    start = ctx.s.offset
    readExpected(ctx, ["-"], "a hyphen")
    ctx.out.write("-")
    if start == 0 and ctx.s.peekEquals("--\n"):
        with ctx.span("the YAML front matter", start):
            parseFrontMatter(ctx)


def parseFrontMatter(ctx: Context) -> None:
    # Returns with the first character of the line after the closing --- next.
    ctx.advanceThroughFence(constants.frontMatterFence)


def parseBacktick(ctx: Context) -> None:
    start = ctx.s.offset
    prev = ctx.out.lastWritten()
    readExpected(ctx, ["`"], "a backtick")
    ctx.out.write("`")
    if ctx.s.peekEquals("``") and prev in ("\n", BOF):
        with ctx.span("a fenced code block", start):
            parseFencedCodeBlock(ctx)
    else:
        with ctx.span("a code span", start):
            parseCodeSpan(ctx)


def parseCodeSpan(ctx: Context) -> None:
    # Returns with the character after the closing backtick next.
    parseSpanEndingWithUnescaped(ctx, "`")


def parseFencedCodeBlock(ctx: Context) -> None:
    # Returns with the first character of the line after the closing ``` next.
    ctx.advanceThroughFence(constants.codeFence)


def parseSpanEndingWithUnescaped(ctx: Context, sentinel: str) -> None:
    """
    Copies characters verbatim through the first `sentinel`
    that isn't directly preceded by a backslash.
    Returns with the character after the sentinel next.
    """
    while True:
        prev = ctx.out.lastWritten()
        ch = ctx.pump()
        if ch == sentinel and prev != "\\":
            break
    ctx.expect(ctx.out.lastWritten() == sentinel, f"expected the span to end with {sentinel!r}")


def isTagNamed(ctx: Context, name: str) -> bool:
    # Is `name` the entire tag name starting at the next character?
    if not ctx.s.peekEquals(name):
        return False
    after = ctx.s[ctx.s.offset + len(name)]
    return preds.isWhitespace(after) or after in (">", "/")


def parseAngleStart(ctx: Context) -> None:
    """
    A < followed by a letter starts a start tag, followed by / an end tag.
    Anything else leaves it a plain less-than sign,
    and the next character gets handled normally.
    """
    start = ctx.s.offset
    readExpected(ctx, ["<"], "a less-than sign")
    ctx.out.write("<")
    p = ctx.s.peek()
    if preds.isLetter(p):
        with ctx.span("a start tag", start):
            parseStartTag(ctx, start)
    elif p == "/":
        with ctx.span("an end tag", start):
            parseEndTag(ctx)


def parseStartTag(ctx: Context, start: int) -> None:
    """
    Copies a start tag's name and attributes.

    When it returns, the next character is
    whatever ended the attribute list (usually >),
    or, if this was a <code> start tag,
    the character after the matching end tag.
    """
    # <code> elements are special: no curling inside them.
    codeDepthAtStart = ctx.codeDepth
    if isTagNamed(ctx, "code"):
        ctx.codeDepth += 1

    ctx.advanceUntil(lambda ch: preds.isWhitespace(ch) or ch == ">")
    p = ctx.s.peek()
    ctx.expect(p == ">" or preds.isWhitespace(p), f"expected > or whitespace after a tag name, got {p!r}")

    ctx.advanceWhile(preds.isWhitespace)
    parseAttributeList(ctx)

    if ctx.codeDepth > codeDepthAtStart:
        # A trailing slash doesn't end a <code> element; its body still follows.
        with ctx.span("a <code> element", start):
            parseCodeElementContents(ctx)
        ctx.codeDepth = codeDepthAtStart


def parseAttributeList(ctx: Context) -> None:
    # Returns with the first character that can't start an attribute next.
    while preds.isLetter(ctx.s.peek()):
        parseAttribute(ctx)
        ctx.advanceWhile(preds.isWhitespace)


def parseAttribute(ctx: Context) -> None:
    """
    Copies one attribute: its name and, if there's an =, its value.
    Values are always copied verbatim, whatever quotes they use.
    """
    nameStart = ctx.s.offset
    ctx.advanceWhile(preds.isAttrNameChar)
    attrName = ctx.s.slice(nameStart, ctx.s.offset)

    ctx.advanceWhile(preds.isWhitespace)
    if ctx.s.peek() != "=":
        # Valueless, like <p hidden>
        return
    ctx.pump()
    ctx.advanceWhile(preds.isWhitespace)

    p = ctx.s.peek()
    if p in ('"', "'"):
        valueStart = ctx.s.offset
        ctx.pump()
        with ctx.span("an attribute value", valueStart):
            parseQuotedAttrValue(ctx, p)
    elif preds.isUnquotedAttrValueChar(p):
        parseUnquotedAttrValue(ctx)
    else:
        m.warn(f"Missing a value after {attrName}=.", lineNum=ctx.s.loc(ctx.s.offset))


def parseQuotedAttrValue(ctx: Context, quote: str) -> None:
    # Returns with the character after the closing quote next.
    parseSpanEndingWithUnescaped(ctx, quote)


def parseUnquotedAttrValue(ctx: Context) -> None:
    # Returns with the first character that can't be in an unquoted value next.
    ctx.advanceWhile(preds.isUnquotedAttrValueChar)


def parseEndTag(ctx: Context) -> None:
    # Returns with the character after the end tag's > next.
    readExpected(ctx, ["/"], "a slash")
    ctx.out.write("/")
    if isTagNamed(ctx, "code") and ctx.codeDepth > 0:
        ctx.codeDepth -= 1
    ctx.advanceThrough(">")


def parseCodeElementContents(ctx: Context) -> None:
    """
    Copies everything up to and including the </code> end tag verbatim.
    Entered with the start tag's > (or trailing junk) next;
    returns with the character after the end tag's > next.
    """
    ctx.advanceThrough("</code")
    ctx.advanceWhile(preds.isWhitespace)
    ctx.advanceThrough(">")

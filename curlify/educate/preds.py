from __future__ import annotations

# All of these take a single character, or "" at end of input,
# and are false for "".


def isWhitespace(ch: str) -> bool:
    # HTML's "ASCII whitespace": tab, LF, FF, CR, space
    return ch in ("\t", "\n", "\f", "\r", " ")


def isLetter(ch: str) -> bool:
    # Any Unicode letter, not just ASCII ones.
    return len(ch) == 1 and ch.isalpha()


def isControl(ch: str) -> bool:
    if ch == "":
        return False
    cp = ord(ch)
    return cp <= 0x1F or 0x7F <= cp <= 0x9F


def isNoncharacter(ch: str) -> bool:
    # https://infra.spec.whatwg.org/#noncharacter
    if ch == "":
        return False
    cp = ord(ch)
    if 0xFDD0 <= cp <= 0xFDEF:
        return True
    # The last two code points of every plane.
    return (cp & 0xFFFE) == 0xFFFE


def isAttrNameChar(ch: str) -> bool:
    # https://html.spec.whatwg.org/multipage/syntax.html#syntax-attributes
    if ch == "" or isControl(ch):
        return False
    if ch in " \"'>/=":
        return False
    return not isNoncharacter(ch)


def isUnquotedAttrValueChar(ch: str) -> bool:
    if ch == "" or isWhitespace(ch):
        return False
    # Anything else goes, since char refs aren't interpreted here.
    return ch not in "\"'=<>`"


def isSurrogate(ch: str) -> bool:
    # Lone surrogates are how undecodable bytes show up
    # after a surrogateescape decode.
    return ch != "" and 0xD800 <= ord(ch) <= 0xDFFF

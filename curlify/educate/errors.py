from __future__ import annotations


class EndOfInput(Exception):
    """
    Raised by the cursor when asked to read past the last character.

    Never escapes educate(): at the top level it's normal completion,
    anywhere else it becomes an UnterminatedSpan.
    """


class EducateError(Exception):
    """
    Something stopped a curling pass partway through.

    `partial` holds whatever output was produced before the failure;
    `loc` is a "line:col" string pointing at the problem, when known.
    """

    def __init__(self, msg: str, loc: str | None = None, partial: str = "") -> None:
        super().__init__(msg)
        self.msg = msg
        self.loc = loc
        self.partial = partial

    def __str__(self) -> str:
        if self.loc is None:
            return self.msg
        return f"{self.msg} (at {self.loc})"


class DecodeError(EducateError):
    # The input held something that isn't a Unicode scalar value.
    pass


class UnterminatedSpan(EducateError):
    # Input ran out inside a quote, code span, tag, etc.
    def __init__(self, msg: str, spanName: str, loc: str | None = None, partial: str = "") -> None:
        super().__init__(msg, loc=loc, partial=partial)
        self.spanName = spanName


class ParserBug(EducateError):
    # An internal postcondition failed. This is a defect in curlify, not in the input.
    pass


class NestingTooDeep(EducateError):
    # Spans nested deeper than the interpreter's stack allows,
    # usually from a run of opening quote marks that never close.
    def __init__(self, msg: str, spanName: str, loc: str | None = None, partial: str = "") -> None:
        super().__init__(msg, loc=loc, partial=partial)
        self.spanName = spanName

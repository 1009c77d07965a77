from __future__ import annotations

import contextlib
import dataclasses
import io
import sys
from collections import Counter

from . import t

# Ordered from least to most severe.
# "nothing" is never reported; it's the level that nothing reaches.
MESSAGE_LEVELS = {
    "warning": 0,
    "fatal": 1,
    "nothing": 2,
}

DEATH_TIMING = [
    "early",  # die as soon as the first disallowed error occurs
    "late",  # die at the end of processing
]

PRINT_MODES = [
    "plain",
    "console",
]

# category: (heading, color)
HEADINGS = {
    "warning": ("WARNING", "light cyan"),
    "fatal": ("FATAL ERROR", "red"),
}

# category: (mark, ascii mark, color)
FINAL_MARKS = {
    "success": (" ✔ ", "YAY", "green"),
    "failure": (" ✘ ", "ERR", "red"),
}

ANSI_COLORS = {
    "red": 31,
    "green": 32,
    "light cyan": 96,
    "white": 97,
}

ANSI_STYLES = {
    "bold": 1,
    "invert": 7,
}


@dataclasses.dataclass()
class MessagesState:
    # Lowest category that makes curlify refuse to write output
    dieOn: str = "fatal"
    # Whether that happens at the first such message, or after the whole input
    dieWhen: str = "late"
    # Lowest category that gets printed
    printOn: str = "warning"
    # Suppresses every category, and the final success/failure line too
    silent: bool = False
    printMode: str = "console"
    asciiOnly: bool = False
    # stdout carries the curled document, so messages go to stderr.
    fh: t.TextIO = dataclasses.field(default_factory=lambda: sys.stderr)
    seenMessages: set[str] = dataclasses.field(default_factory=set)
    categoryCounts: Counter[str] = dataclasses.field(default_factory=Counter)

    def record(self, category: str, message: str) -> None:
        self.categoryCounts[category] += 1
        self.seenMessages.add(message)

    def replace(self, **kwargs: t.Any) -> MessagesState:
        return dataclasses.replace(self, seenMessages=set(), categoryCounts=Counter(), **kwargs)

    def shouldDie(self, category: str, timing: str = "early") -> bool:
        if self.dieWhen == "late" and timing == "early":
            return False
        return MESSAGE_LEVELS[category] >= MESSAGE_LEVELS[self.dieOn]

    def shouldPrint(self, category: str) -> bool:
        if self.silent:
            return False
        if category in FINAL_MARKS:
            return True
        return MESSAGE_LEVELS[category] >= MESSAGE_LEVELS[self.printOn]

    @staticmethod
    def categoryName(categoryNum: int) -> str:
        # Maps a -q count onto the lowest category still printed.
        assert categoryNum >= 0
        names = list(MESSAGE_LEVELS)
        return names[min(categoryNum, len(names) - 1)]


state = MessagesState()


def p(msg: str) -> None:
    if state.asciiOnly:
        msg = msg.encode("ascii", "replace").decode()
    try:
        print(msg, file=state.fh)
    except UnicodeEncodeError:
        print(msg.encode("ascii", "xmlcharrefreplace").decode(), file=state.fh)


def report(category: str, msg: str, lineNum: str | None = None) -> None:
    formattedMsg = formatMessage(category, msg, lineNum=lineNum)
    if formattedMsg not in state.seenMessages:
        state.record(category, formattedMsg)
        if state.shouldPrint(category):
            p(formattedMsg)
    if state.shouldDie(category):
        errorAndExit()


def die(msg: str, lineNum: str | None = None) -> None:
    report("fatal", msg, lineNum=lineNum)


def warn(msg: str, lineNum: str | None = None) -> None:
    report("warning", msg, lineNum=lineNum)


def success(msg: str) -> None:
    if state.shouldPrint("success"):
        p(formatFinal("success", msg))


def failure(msg: str) -> None:
    if state.shouldPrint("failure"):
        p(formatFinal("failure", msg))


def retroactivelyCheckErrorLevel(timing: str = "early") -> None:
    for category, count in state.categoryCounts.items():
        if count > 0 and state.shouldDie(category, timing):
            errorAndExit()


def printColor(text: str, color: str = "white", *styles: str) -> str:
    if state.printMode != "console":
        return text
    colorNum = ANSI_COLORS[color]
    styleNum = ";".join(str(ANSI_STYLES[style]) for style in styles)
    return f"\033[{styleNum};{colorNum}m{text}\033[0m"


def formatMessage(category: str, text: str, lineNum: str | None = None) -> str:
    heading, color = HEADINGS[category]
    if lineNum is not None:
        heading = f"LINE {lineNum}"
    return printColor(heading + ":", color, "bold") + " " + text


def formatFinal(category: str, text: str) -> str:
    mark, asciiMark, color = FINAL_MARKS[category]
    if state.asciiOnly:
        mark = asciiMark
    return printColor(mark, color, "invert") + " " + text


def errorAndExit() -> None:
    failure("Did not curl, due to errors exceeding the allowed error level.")
    sys.exit(2)


@contextlib.contextmanager
def withMessageState(fh: str | t.TextIO, **kwargs: t.Any) -> t.Generator[t.TextIO, None, None]:
    # A string is a filename, opened for the duration and closed after.
    if isinstance(fh, str):
        ownedFh: t.TextIO | None = open(fh, "w", encoding="utf-8")
        fh = ownedFh
    else:
        ownedFh = None
    global state
    oldState = state
    state = oldState.replace(fh=fh, **kwargs)
    try:
        yield fh
    finally:
        state = oldState
        if ownedFh is not None:
            ownedFh.close()


def messagesSilent() -> t.ContextManager[t.TextIO]:
    return withMessageState(io.StringIO(), silent=True)

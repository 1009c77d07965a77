from __future__ import annotations

import sys
from abc import abstractmethod

import attr


@attr.s(auto_attribs=True)
class InputContent:
    # Undecodable bytes survive as lone surrogates (surrogateescape),
    # so the curler can report exactly where they are.
    content: str


def inputFromName(sourceName: str | None) -> InputSource:
    if sourceName is None or sourceName == "-":
        return StdinInputSource()
    return FileInputSource(sourceName)


class InputSource:
    """Represents a thing that can produce text to be curled.

    Input can be read from stdin ("-") or a file.
    Only files can be written back in place.
    """

    @abstractmethod
    def __str__(self) -> str:
        pass

    def __repr__(self) -> str:
        return "{}({!r})".format(self.__class__.__name__, str(self))

    @abstractmethod
    def read(self) -> InputContent:
        """Fully reads the source."""

    def isFile(self) -> bool:
        return False


class StdinInputSource(InputSource):
    def __str__(self) -> str:
        return "-"

    def read(self) -> InputContent:
        data = sys.stdin.buffer.read()
        return InputContent(data.decode("utf-8", errors="surrogateescape"))


class FileInputSource(InputSource):
    def __init__(self, sourceName: str) -> None:
        self.sourceName = sourceName

    def __str__(self) -> str:
        return self.sourceName

    def read(self) -> InputContent:
        # newline="" keeps \r\n and friends exactly as they were.
        with open(self.sourceName, encoding="utf-8", errors="surrogateescape", newline="") as f:
            return InputContent(f.read())

    def isFile(self) -> bool:
        return True

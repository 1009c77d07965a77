from __future__ import annotations

import os
import sys

from . import InputSource, constants
from . import messages as m
from .educate import EducateError, ParseConfig, ParserBug, educate


class Document:
    """
    One input, curled once.

    Reads its source up front, runs the curler over it with process(),
    and writes the result out with finish().
    """

    def __init__(
        self,
        inputFilename: str | None = None,
        config: ParseConfig | None = None,
        context: str | None = None,
    ) -> None:
        self.inputSource = InputSource.inputFromName(inputFilename)
        if config is None:
            config = ParseConfig()
        if context is None and self.inputSource.isFile():
            context = str(self.inputSource)
        self.config = config.withContext(context)
        self.text: str | None = None
        self.output: str | None = None
        self.valid = self.initializeState()

    def initializeState(self) -> bool:
        try:
            self.text = self.inputSource.read().content
        except FileNotFoundError:
            m.die(f"Couldn't find the input file at the specified location '{self.inputSource}'.")
            return False
        except OSError as e:
            m.die(f"Couldn't read the input file '{self.inputSource}':\n{e}")
            return False
        return True

    def process(self) -> Document:
        assert self.text is not None
        try:
            self.output = educate(self.text, self.config)
        except ParserBug as e:
            self.output = e.partial
            m.die(
                f"curlify hit an internal error; this is a bug in curlify, not in your document.\n{e.msg}\n{len(e.partial)} characters were produced before it happened.",
                lineNum=e.loc,
            )
        except EducateError as e:
            self.output = e.partial
            m.die(f"{e.msg}\n{len(e.partial)} characters were produced before the error.", lineNum=e.loc)
        return self

    def finish(self, outputFilename: str | None = None, inPlace: bool = False) -> None:
        # Check the errors one more time.
        m.retroactivelyCheckErrorLevel(timing="late")
        self.printResultMessage()
        if inPlace:
            assert self.inputSource.isFile()
            outputFilename = str(self.inputSource)
        if outputFilename is None:
            outputFilename = "-"
        if self.output is None or constants.dryRun:
            return
        try:
            if outputFilename == "-":
                sys.stdout.write(self.output)
                sys.stdout.flush()
            else:
                with open(outputFilename, "w", encoding="utf-8", newline="") as f:
                    f.write(self.output)
                    f.flush()
                    os.fsync(f.fileno())
        except Exception as e:
            m.die(f"Something prevented me from saving the output document to {outputFilename}:\n{e}")

    def printResultMessage(self) -> None:
        # If I reach this point, I've succeeded, but maybe with reservations.
        fatals = m.state.categoryCounts["fatal"]
        warnings = m.state.categoryCounts["warning"]
        if fatals:
            m.success("Curled, but fatal errors were suppressed; the output may be incomplete.")
            return
        if warnings:
            m.success("Successfully curled, with warnings")
            return


from __future__ import annotations

import dataclasses
import difflib
import io
import os

from alive_progress import alive_it

from . import config, t
from . import messages as m
from .Document import Document

if t.TYPE_CHECKING:
    import argparse

# A golden file is an input (NAME.md) next to the curled output it should
# produce (NAME.expected) and the plain-mode messages it should print
# (NAME.console.txt).
TEST_DIR = os.path.abspath(config.scriptPath("..", "tests"))
INPUT_EXTENSION = ".md"
OUTPUT_EXTENSION = ".expected"
CONSOLE_EXTENSION = ".console.txt"


@dataclasses.dataclass
class GoldenFilter:
    # Folder names that must appear in the path
    folders: list[str] | None = None
    # Substrings, one of which must appear in the filename
    files: list[str] | None = None

    @staticmethod
    def fromOptions(options: argparse.Namespace) -> GoldenFilter:
        return GoldenFilter(folders=options.folders, files=options.files or None)

    def allows(self, name: str) -> bool:
        segs = name.split(os.sep)
        if self.folders and not any(folder in segs[:-1] for folder in self.folders):
            return False
        if self.files and not any(sub in segs[-1] for sub in self.files):
            return False
        return True


@dataclasses.dataclass(frozen=True)
class GoldenFile:
    path: str

    @property
    def name(self) -> str:
        # Relative to the tests directory, so messages and
        # expectations don't depend on where the repo lives.
        return os.path.relpath(self.path, TEST_DIR)

    @property
    def expectedPath(self) -> str:
        return replaceExtension(self.path, OUTPUT_EXTENSION)

    @property
    def consolePath(self) -> str:
        return replaceExtension(self.path, CONSOLE_EXTENSION)

    def curl(self) -> tuple[str, str]:
        """
        Curls the input with messages captured in plain mode.
        Returns the output (or the partial output, on failure)
        and the captured messages.
        """
        consoleFh = io.StringIO()
        with m.withMessageState(consoleFh, printMode="plain"):
            doc = Document(inputFilename=self.path, context=self.name).process()
        return doc.output or "", consoleFh.getvalue()

    def expectations(self) -> tuple[str, str]:
        with open(self.expectedPath, encoding="utf-8", newline="") as fh:
            output = fh.read()
        with open(self.consolePath, encoding="utf-8") as fh:
            console = fh.read()
        return output, console

    def passes(self) -> bool:
        output, console = self.curl()
        expectedOutput, expectedConsole = self.expectations()
        # Both comparisons run, so a failure shows every diff.
        outputOk = compare(output, expectedOutput, self.expectedPath)
        consoleOk = compare(console, expectedConsole, self.consolePath)
        return outputOk and consoleOk

    def rebase(self) -> None:
        output, console = self.curl()
        with open(self.expectedPath, "w", encoding="utf-8", newline="") as fh:
            fh.write(output)
        with open(self.consolePath, "w", encoding="utf-8") as fh:
            fh.write(console)


def findGoldenFiles(filters: GoldenFilter) -> list[GoldenFile]:
    found = []
    for root, _, filenames in os.walk(TEST_DIR):
        for filename in filenames:
            if not filename.endswith(INPUT_EXTENSION):
                continue
            golden = GoldenFile(os.path.join(root, filename))
            if filters.allows(golden.name):
                found.append(golden)
    return sorted(found, key=lambda g: g.name)


def progress(goldens: list[GoldenFile]) -> t.Generator[GoldenFile, None, None]:
    bar = alive_it(goldens, dual_line=True, length=20)
    for golden in bar:
        bar.text(golden.name)
        yield golden


def run(filters: GoldenFilter) -> bool:
    goldens = findGoldenFiles(filters)
    if not goldens:
        m.p("No tests were found.")
        return True
    fails = [golden.name for golden in progress(goldens) if not golden.passes()]
    if not fails:
        m.p(m.printColor("✔ All tests passed.", "green"))
        return True
    m.p(m.printColor(f"✘ {len(goldens) - len(fails)}/{len(goldens)} tests passed.", "red"))
    m.p(m.printColor("Failed tests:", "red"))
    for name in fails:
        m.p("* " + name)
    return False


def rebase(filters: GoldenFilter) -> None:
    goldens = findGoldenFiles(filters)
    if not goldens:
        m.p("No tests were found.")
        return
    for golden in progress(goldens):
        golden.rebase()


def compare(suspect: str, golden: str, path: str) -> bool:
    if suspect == golden:
        return True
    m.p(f"FILE: {path}")
    for line in difflib.unified_diff(golden.split("\n"), suspect.split("\n"), fromfile="golden", tofile="suspect"):
        if line.startswith("-"):
            m.p(m.printColor(line, "red"))
        elif line.startswith("+"):
            m.p(m.printColor(line, "green"))
        else:
            m.p(line)
    m.p("")
    return False


def replaceExtension(path: str, newExt: str) -> str:
    assert newExt.startswith(".")
    trunk = os.path.splitext(path)[0]
    return f"{trunk}{newExt}"

from __future__ import annotations

import argparse
import os
import sys

from . import config, constants, t
from . import messages as m

SUBCOMMANDS = ("curl", "test")

# Global options that take a value as the next argument.
VALUED_GLOBALS = ("--print", "--die-on", "--die-when")
FLAG_GLOBALS = ("--quiet", "--silent", "--force", "--dry-run", "--ascii-only")


def main(args: list[str] | None = None) -> None:
    if args is None:
        args = sys.argv[1:]
    args = insertDefaultSubcommand(args)

    semver = config.semver()
    if semver is None:
        semver = "???"
        semverText = ""
    else:
        semverText = f"curlify v{semver}: "

    argparser = argparse.ArgumentParser(
        prog="curlify",
        description=f"{semverText}Converts straight quote marks in Markdown (with embedded HTML) into curly ones.",
    )
    argparser.add_argument("--version", action="version", version=semver)
    argparser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="count",
        default=0,
        help="Silences one level of message, least-important first: -q hides warnings, -qq hides fatal errors too.",
    )
    argparser.add_argument(
        "-s",
        "--silent",
        dest="silent",
        action="store_true",
        help="Shorthand for 'as many -q as you need to shut it up'",
    )
    argparser.add_argument(
        "-f",
        "--force",
        dest="errorLevel",
        action="store_const",
        const="nothing",
        help="Write the output even when fatal errors happen; after an error the output is whatever was produced up to that point.",
    )
    argparser.add_argument(
        "-d",
        "--dry-run",
        dest="dryRun",
        action="store_true",
        help="Does all the work, but doesn't write the output anywhere.",
    )
    argparser.add_argument(
        "-a",
        "--ascii-only",
        dest="asciiOnly",
        action="store_true",
        help="Force all curlify messages to be ASCII-only.",
    )
    argparser.add_argument(
        "--print",
        dest="printMode",
        choices=m.PRINT_MODES,
        default=None,
        help="How curlify formats its message output. Options are 'plain' (just text) and 'console' (text with console color codes). Defaults to 'console', or 'plain' when NO_COLOR is set or TERM is 'dumb'.",
    )
    argparser.add_argument(
        "--die-on",
        dest="errorLevel",
        choices=list(m.MESSAGE_LEVELS.keys()),
        help="Determines what sorts of errors cause curlify to die (refuse to write any output). Default is 'fatal'; the -f flag is a shorthand for 'nothing'",
    )
    argparser.add_argument(
        "--die-when",
        dest="errorTiming",
        choices=m.DEATH_TIMING,
        default="late",
        help="When a disallowed error should force curlify to stop. 'early' causes it to stop immediately; 'late' makes it process the entire input first so you can see all the errors.",
    )

    subparsers = argparser.add_subparsers(title="Subcommands", dest="subparserName")

    curlParser = subparsers.add_parser(
        "curl",
        help="Curl the quote marks in a file. This is the default when no subcommand is named.",
    )
    curlParser.add_argument(
        "infile",
        nargs="?",
        default=None,
        help='Path to the source file, or stdin ("-", the default).',
    )
    curlParser.add_argument(
        "outfile",
        nargs="?",
        default=None,
        help='Path to the output file, or stdout ("-", the default).',
    )
    curlParser.add_argument(
        "-w",
        "--in-place",
        dest="inPlace",
        action="store_true",
        help="Rewrite the source file with the result. Needs a real file, and no outfile.",
    )
    curlParser.add_argument(
        "--no-escapes",
        dest="noEscapes",
        action="store_true",
        help="Don't treat backslashes as Markdown escapes.",
    )
    curlParser.add_argument(
        "--no-front-matter",
        dest="noFrontMatter",
        action="store_true",
        help="Don't skip over YAML front matter at the start of the file.",
    )
    curlParser.add_argument(
        "--no-code",
        dest="noCode",
        action="store_true",
        help="Curl quote marks inside code spans and fenced code blocks too.",
    )
    curlParser.add_argument(
        "--no-html",
        dest="noHtml",
        action="store_true",
        help="Treat HTML tags as plain text, curling quote marks in attributes and <code> elements.",
    )
    curlParser.add_argument(
        "--contraction-stems",
        dest="contractionStems",
        default=None,
        metavar="STEMS",
        help="Comma-separated word endings that, inside single quotes, mark a following ' as an apostrophe. Defaults to 'can,you,don'.",
    )

    testParser = subparsers.add_parser("test", help="Tools for running curlify's testsuite.")
    testParser.add_argument(
        "files",
        nargs="*",
        help="Only run tests whose filenames contain any of these strings as substrings.",
    )
    testParser.add_argument(
        "--rebase",
        default=False,
        action="store_true",
        help="Rebase the specified files.",
    )
    testParser.add_argument(
        "--folder",
        dest="folders",
        default=None,
        nargs="+",
        help="Only run tests whose paths contain any of these folder names.",
    )

    options = argparser.parse_args(args)

    if options.silent:
        m.state.printOn = "nothing"
        m.state.silent = True
    else:
        m.state.printOn = m.MessagesState.categoryName(options.quiet)
    if options.errorLevel is not None:
        m.state.dieOn = options.errorLevel
    m.state.dieWhen = options.errorTiming
    m.state.asciiOnly = options.asciiOnly
    if options.printMode is None:
        if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
            m.state.printMode = "plain"
        else:
            m.state.printMode = "console"
    else:
        m.state.printMode = options.printMode
    constants.dryRun = options.dryRun

    if options.subparserName == "curl":
        handleCurl(options)
    elif options.subparserName == "test":
        handleTest(options)


def insertDefaultSubcommand(args: t.Sequence[str]) -> list[str]:
    # argparse has no optional subparsers,
    # so put "curl" in front of the first thing that isn't a global option.
    args = list(args)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in SUBCOMMANDS or arg in ("-h", "--help", "--version"):
            return args
        if arg in VALUED_GLOBALS:
            i += 2
            continue
        if arg in FLAG_GLOBALS or any(arg.startswith(x + "=") for x in VALUED_GLOBALS):
            i += 1
            continue
        if len(arg) > 1 and arg[0] == "-" and arg[1] != "-" and all(c in "qsfda" for c in arg[1:]):
            # bundled short flags, like -qq or -fd
            i += 1
            continue
        break
    return args[:i] + ["curl"] + args[i:]


def handleCurl(options: argparse.Namespace) -> None:
    from .Document import Document
    from .educate import ParseConfig

    if options.inPlace:
        if options.infile in (None, "-"):
            m.die("--in-place needs an input file to rewrite; it can't be used with stdin.")
            m.retroactivelyCheckErrorLevel(timing="late")
            return
        if options.outfile is not None:
            m.die("--in-place rewrites the input file, so it can't be given an output file too.")
            m.retroactivelyCheckErrorLevel(timing="late")
            return

    doc = Document(inputFilename=options.infile, config=ParseConfig.fromOptions(options))
    if not doc.valid:
        m.retroactivelyCheckErrorLevel(timing="late")
        return
    doc.process()
    doc.finish(outputFilename=options.outfile, inPlace=options.inPlace)


def handleTest(options: argparse.Namespace) -> None:
    from . import test

    m.state.dieOn = "nothing"
    filters = test.GoldenFilter.fromOptions(options)
    if options.rebase:
        test.rebase(filters)
    else:
        result = test.run(filters)
        sys.exit(0 if result else 1)

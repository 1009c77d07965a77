import io
import os
import tempfile
import unittest

from curlify import cli, constants
from curlify import messages as m


class TestDefaultSubcommand(unittest.TestCase):
    def test_nothing(self):
        assert cli.insertDefaultSubcommand([]) == ["curl"]

    def test_files(self):
        assert cli.insertDefaultSubcommand(["in.md", "out.md"]) == ["curl", "in.md", "out.md"]

    def test_after_global_options(self):
        args = ["-qf", "--print", "plain", "--die-on=warning", "in.md"]
        assert cli.insertDefaultSubcommand(args) == ["-qf", "--print", "plain", "--die-on=warning", "curl", "in.md"]

    def test_before_curl_options(self):
        assert cli.insertDefaultSubcommand(["-d", "-w", "in.md"]) == ["-d", "curl", "-w", "in.md"]

    def test_named_subcommand(self):
        assert cli.insertDefaultSubcommand(["-s", "test", "--rebase"]) == ["-s", "test", "--rebase"]
        assert cli.insertDefaultSubcommand(["curl", "-"]) == ["curl", "-"]

    def test_help(self):
        assert cli.insertDefaultSubcommand(["--version"]) == ["--version"]


class TestCurlCommand(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.console = io.StringIO()

    def tearDown(self):
        constants.dryRun = False
        self.tmp.cleanup()

    def path(self, name):
        return os.path.join(self.tmp.name, name)

    def write(self, name, text):
        with open(self.path(name), "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
        return self.path(name)

    def read(self, name):
        with open(self.path(name), encoding="utf-8", newline="") as fh:
            return fh.read()

    def run_cli(self, *args):
        with m.withMessageState(self.console):
            cli.main(["--print", "plain", *args])

    def test_infile_to_outfile(self):
        infile = self.write("in.md", "It's \"fine\".\r\n")
        self.run_cli(infile, self.path("out.md"))
        assert self.read("out.md") == "It’s “fine”.\r\n"
        assert self.read("in.md") == "It's \"fine\".\r\n"

    def test_in_place(self):
        infile = self.write("in.md", "<code>it's</code> it's\n")
        self.run_cli("-w", infile)
        assert self.read("in.md") == "<code>it's</code> it’s\n"

    def test_explicit_subcommand_and_flags(self):
        infile = self.write("in.md", "<b title='x'>hi</b>")
        self.run_cli("curl", "--no-html", infile, self.path("out.md"))
        assert self.read("out.md") == "<b title=‘x’>hi</b>"

    def test_contraction_stems_option(self):
        infile = self.write("in.md", "'I won't go,' he said.")
        self.run_cli("--contraction-stems", "won", infile, self.path("out.md"))
        assert self.read("out.md") == "‘I won’t go,’ he said."
        assert "Successfully curled, with warnings" in self.console.getvalue()

    def test_error_writes_nothing(self):
        infile = self.write("in.md", 'It\'s "open')
        with self.assertRaises(SystemExit) as cm:
            self.run_cli(infile, self.path("out.md"))
        assert cm.exception.code == 2
        assert not os.path.exists(self.path("out.md"))
        console = self.console.getvalue()
        assert "Hit the end of the input inside double quotes." in console
        assert f"LINE 1:6 of {infile}:" in console

    def test_force_writes_partial_output(self):
        infile = self.write("in.md", 'It\'s "open')
        self.run_cli("-f", infile, self.path("out.md"))
        assert self.read("out.md") == "It’s “open"
        assert "10 characters were produced before the error." in self.console.getvalue()

    def test_in_place_needs_a_file(self):
        with self.assertRaises(SystemExit):
            self.run_cli("-w", "-")
        assert "--in-place" in self.console.getvalue()

    def test_in_place_refuses_outfile(self):
        infile = self.write("in.md", "x")
        with self.assertRaises(SystemExit):
            self.run_cli("-w", infile, self.path("out.md"))
        assert not os.path.exists(self.path("out.md"))

    def test_dry_run(self):
        infile = self.write("in.md", "it's")
        self.run_cli("-d", infile, self.path("out.md"))
        assert not os.path.exists(self.path("out.md"))

    def test_missing_input(self):
        with self.assertRaises(SystemExit) as cm:
            self.run_cli(self.path("nope.md"))
        assert cm.exception.code == 2
        assert "Couldn't find the input file" in self.console.getvalue()

    def test_nesting_too_deep(self):
        infile = self.write("in.md", "“" * 5000)
        with self.assertRaises(SystemExit) as cm:
            self.run_cli(infile, self.path("out.md"))
        assert cm.exception.code == 2
        assert not os.path.exists(self.path("out.md"))
        assert "nested too deeply" in self.console.getvalue()

    def test_quiet_hides_warnings(self):
        infile = self.write("in.md", "<a>Twain</a>'s")
        self.run_cli("-q", infile, self.path("out.md"))
        assert "WARNING" not in self.console.getvalue()
        assert "LINE" not in self.console.getvalue()
        assert "Successfully curled, with warnings" in self.console.getvalue()

    def test_very_quiet_hides_fatal_errors(self):
        infile = self.write("in.md", '"open')
        with self.assertRaises(SystemExit):
            self.run_cli("-qq", infile, self.path("out.md"))
        console = self.console.getvalue()
        assert "Hit the end of the input" not in console
        assert "Did not curl" in console

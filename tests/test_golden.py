import io
import os
import unittest

from curlify import messages as m
from curlify import test


class TestGoldenFiles(unittest.TestCase):
    def test_golden_files_are_found(self):
        names = [g.name for g in test.findGoldenFiles(test.GoldenFilter())]
        assert os.path.join("golden", "basics.md") in names
        assert all(name.endswith(".md") for name in names)
        assert names == sorted(names)

    def test_filters(self):
        only = test.findGoldenFiles(test.GoldenFilter(files=["html"]))
        assert [os.path.basename(g.path) for g in only] == ["html.md"]
        assert test.findGoldenFiles(test.GoldenFilter(folders=["golden"]))
        assert test.findGoldenFiles(test.GoldenFilter(folders=["nowhere"])) == []

    def test_golden_files(self):
        for golden in test.findGoldenFiles(test.GoldenFilter()):
            with self.subTest(golden.name):
                assert golden.curl() == golden.expectations()

    def test_runner_reports_success(self):
        fh = io.StringIO()
        with m.withMessageState(fh, printMode="plain"):
            assert test.run(test.GoldenFilter())
        assert "All tests passed." in fh.getvalue()

    def test_runner_with_nothing_to_run(self):
        fh = io.StringIO()
        with m.withMessageState(fh, printMode="plain"):
            assert test.run(test.GoldenFilter(files=["no such test"]))
        assert fh.getvalue() == "No tests were found.\n"


class TestGoldenFile(unittest.TestCase):
    def test_paths(self):
        golden = test.GoldenFile(os.path.join(test.TEST_DIR, "golden", "html.md"))
        assert golden.name == os.path.join("golden", "html.md")
        assert golden.expectedPath.endswith(os.path.join("golden", "html.expected"))
        assert golden.consolePath.endswith(os.path.join("golden", "html.console.txt"))

    def test_messages_name_the_golden_file(self):
        golden = test.GoldenFile(os.path.join(test.TEST_DIR, "golden", "warnings.md"))
        _, console = golden.curl()
        assert os.path.join("golden", "warnings.md") in console
        assert test.TEST_DIR not in console

    def test_filter_allows(self):
        name = os.path.join("golden", "html.md")
        assert test.GoldenFilter().allows(name)
        assert test.GoldenFilter(files=["htm"]).allows(name)
        assert not test.GoldenFilter(files=["basics"]).allows(name)
        # Folder filters match whole folder names, never the filename.
        assert not test.GoldenFilter(folders=["html.md"]).allows(name)

    def test_compare_prints_a_diff(self):
        fh = io.StringIO()
        with m.withMessageState(fh, printMode="plain"):
            assert test.compare("same", "same", "x.expected")
            assert not test.compare("it’s\n", "it's\n", "x.expected")
        out = fh.getvalue()
        assert "FILE: x.expected" in out
        assert "-it's" in out
        assert "+it’s" in out

    def test_replace_extension(self):
        assert test.replaceExtension("golden/html.md", ".console.txt") == "golden/html.console.txt"

"""Tests for a whole listing run: roots, classifier lifetime and fatal conditions."""

import io
import os
from pathlib import Path

import pytest

from lsct.config.settings import ListingConfig
from lsct.core.session import ListingSession
from lsct.exceptions import ClassificationError, NothingToListError, RootInaccessibleError

from conftest import RecordingClassifier, create_tree


def run_session(config, classifier):
    out = io.BytesIO()
    session = ListingSession(config, classifier=classifier, stream=out)
    session.run()
    return out.getvalue(), session


class TestRun:
    def test_mime_format_example(self, example_tree: Path, classifier):
        config = ListingConfig(roots=[os.fsencode(example_tree)], mime_format=True)
        output, _ = run_session(config, classifier)

        root = os.fsencode(example_tree)
        assert output == (
            b"symlink: " + os.path.join(root, b"link") + b"\n"
            + b"text/plain: " + os.path.join(root, b"a.txt") + b"\n"
        )

    def test_default_root_reports_relative_paths(self, example_tree: Path, classifier, monkeypatch):
        monkeypatch.chdir(example_tree)
        output, _ = run_session(ListingConfig(), classifier)

        assert output == b"link\na.txt\n"

    def test_explicit_dot_root_keeps_prefix(self, example_tree: Path, classifier, monkeypatch):
        monkeypatch.chdir(example_tree)
        output, _ = run_session(ListingConfig(roots=[b"."]), classifier)

        assert output == b"./link\n./a.txt\n"

    def test_roots_share_buckets_in_root_order(self, tmp_path: Path):
        create_tree(tmp_path, {"one/x.txt": "x", "two/y.txt": "y", "two/z.bin": "z"})
        classifier = RecordingClassifier(labels={b"z.bin": "application/octet-stream"}, default="text/plain")
        config = ListingConfig(roots=[os.fsencode(tmp_path / "two"), os.fsencode(tmp_path / "one")])
        output, session = run_session(config, classifier)

        assert output.splitlines() == [
            os.fsencode(tmp_path / "two" / "z.bin"),
            os.fsencode(tmp_path / "two" / "y.txt"),
            os.fsencode(tmp_path / "one" / "x.txt"),
        ]
        assert session.label_counts == {"application/octet-stream": 1, "text/plain": 2}

    def test_null_terminator(self, example_tree: Path, classifier):
        config = ListingConfig(roots=[os.fsencode(example_tree)], null_terminator=True)
        output, _ = run_session(config, classifier)

        assert output.count(b"\0") == 2
        assert output.endswith(b"\0")

    def test_every_regular_file_and_symlink_listed_once(self, tmp_path: Path):
        create_tree(tmp_path, {"a/b/c.py": "print(1)\n", "a/d.md": "# d\n", "e.cfg": "", ".skip/f": "f"})
        os.symlink("a/d.md", tmp_path / "d-link")
        os.symlink("nowhere", tmp_path / "a" / "broken")
        output, _ = run_session(ListingConfig(roots=[os.fsencode(tmp_path)]), RecordingClassifier())

        listed = sorted(output.splitlines())
        expected = sorted(os.fsencode(tmp_path / p) for p in ["a/b/c.py", "a/d.md", "e.cfg", "d-link", "a/broken"])
        assert listed == expected


class TestClassifierLifetime:
    def test_opened_and_closed_once(self, example_tree: Path, classifier):
        run_session(ListingConfig(roots=[os.fsencode(example_tree)]), classifier)
        assert (classifier.opened, classifier.closed) == (1, 1)

    def test_closed_when_run_aborts(self, tmp_path: Path):
        (tmp_path / "bad").write_text("unclassifiable")
        classifier = RecordingClassifier(fail_on={b"bad"})
        out = io.BytesIO()
        session = ListingSession(ListingConfig(roots=[os.fsencode(tmp_path)]), classifier=classifier, stream=out)

        with pytest.raises(ClassificationError):
            session.run()
        assert classifier.closed == 1
        assert out.getvalue() == b""


class TestFatalConditions:
    def test_missing_root_is_fatal_with_no_output(self, example_tree: Path, classifier):
        out = io.BytesIO()
        config = ListingConfig(roots=[os.fsencode(example_tree), os.fsencode(example_tree / "missing")])
        session = ListingSession(config, classifier=classifier, stream=out)

        with pytest.raises(RootInaccessibleError):
            session.run()
        assert out.getvalue() == b""

    def test_missing_root_skipped_when_ignored(self, example_tree: Path, classifier):
        config = ListingConfig(
            roots=[os.fsencode(example_tree / "missing"), os.fsencode(example_tree)],
            ignore_inaccessible_roots=True,
        )
        output, session = run_session(config, classifier)

        assert len(output.splitlines()) == 2
        assert session.walker.warnings == 1

    def test_empty_directory_is_nothing_to_list(self, tmp_path: Path, classifier):
        with pytest.raises(NothingToListError):
            run_session(ListingConfig(roots=[os.fsencode(tmp_path)]), classifier)

    def test_only_hidden_entries_is_nothing_to_list(self, tmp_path: Path, classifier):
        create_tree(tmp_path, {".a": "a", ".dir/b": "b"})
        with pytest.raises(NothingToListError):
            run_session(ListingConfig(roots=[os.fsencode(tmp_path)]), classifier)

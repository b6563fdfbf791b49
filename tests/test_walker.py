"""Tests for directory traversal."""

import os
import sys
from pathlib import Path

import pytest

from archiver.indexer.walker import TreeWalker, UnsupportedEntryError, VisitState


class RecordingHandler:
    """Records callbacks; skips directories named in skip."""

    def __init__(self, skip: set[str] | None = None) -> None:
        self.skip = skip or set()
        self.events: list[tuple[str, str]] = []

    def on_directory(self, directory: Path) -> VisitState:
        self.events.append(("enter", directory.name))
        if directory.name in self.skip:
            return VisitState.SKIP_SUBTREE
        return VisitState.CONTINUE

    def on_directory_exit(self, directory: Path) -> None:
        self.events.append(("exit", directory.name))

    def on_file(self, file: Path) -> None:
        self.events.append(("file", file.name))


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    root = tmp_path / "root"
    (root / "a" / "b").mkdir(parents=True)
    (root / "skipped").mkdir()
    (root / "top.txt").write_text("top")
    (root / "a" / "one.txt").write_text("one")
    (root / "a" / "b" / "two.txt").write_text("two")
    (root / "skipped" / "hidden.txt").write_text("hidden")
    return root


class TestTreeWalker:
    """Tests for TreeWalker."""

    def test_returns_handler(self, tree: Path):
        """Test visit returns the handler."""
        handler = RecordingHandler()
        assert TreeWalker(tree, handler).visit() is handler

    def test_visits_every_file(self, tree: Path):
        """Test every file is visited."""
        handler = TreeWalker(tree, RecordingHandler()).visit()

        files = {name for kind, name in handler.events if kind == "file"}
        assert files == {"top.txt", "one.txt", "two.txt", "hidden.txt"}

    def test_root_entered_first_and_exited_last(self, tree: Path):
        """Test the root is entered first and exited last."""
        handler = TreeWalker(tree, RecordingHandler()).visit()

        assert handler.events[0] == ("enter", "root")
        assert handler.events[-1] == ("exit", "root")

    def test_directory_entered_before_its_files_and_exited_after(self, tree: Path):
        """Test directories wrap their files."""
        events = TreeWalker(tree, RecordingHandler()).visit().events

        assert events.index(("enter", "a")) < events.index(("file", "one.txt"))
        assert events.index(("enter", "b")) < events.index(("file", "two.txt"))
        assert events.index(("file", "two.txt")) < events.index(("exit", "b"))
        assert events.index(("exit", "b")) < events.index(("exit", "a"))

    def test_each_directory_exited_once(self, tree: Path):
        """Test each directory is exited once."""
        events = TreeWalker(tree, RecordingHandler()).visit().events

        exits = [name for kind, name in events if kind == "exit"]
        assert sorted(exits) == ["a", "b", "root", "skipped"]

    def test_skip_subtree(self, tree: Path):
        """Test skipping a subtree."""
        events = TreeWalker(tree, RecordingHandler(skip={"skipped"})).visit().events

        assert ("enter", "skipped") in events
        assert ("file", "hidden.txt") not in events
        # No exit for a skipped directory
        assert ("exit", "skipped") not in events

    def test_skip_root(self, tree: Path):
        """Test skipping the root."""
        events = TreeWalker(tree, RecordingHandler(skip={"root"})).visit().events
        assert events == [("enter", "root")]

    def test_missing_root_is_noop(self, tmp_path: Path):
        """Test a missing root is a no-op."""
        handler = TreeWalker(tmp_path / "missing", RecordingHandler()).visit()
        assert handler.events == []

    def test_follows_native_order(self, tree: Path):
        """Test children follow native order."""
        events = TreeWalker(tree, RecordingHandler()).visit().events

        native = [entry.name for entry in os.scandir(tree)]
        top_level = [
            name
            for kind, name in events
            if (kind == "enter" and name in native) or (kind == "file" and name == "top.txt")
        ]
        assert top_level == native

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_unsupported_entry(self, tree: Path):
        """Test an unsupported entry raises."""
        (tree / "dangling").symlink_to(tree / "nowhere")

        with pytest.raises(UnsupportedEntryError, match="dangling"):
            TreeWalker(tree, RecordingHandler()).visit()

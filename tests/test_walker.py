"""
Unit tests for TreeWalkerImpl.
Verifies traversal order, special file handling, symlink policy and
that deep trees are walked without recursion.
"""
import os
import sys
from pathlib import Path

import pytest

from deldup.core.diagnostics import Diagnostics, DiagnosticKind
from deldup.core.walker import NodeKind, TreeWalkerImpl


def walk(root, **kwargs):
    diagnostics = Diagnostics()
    walker = TreeWalkerImpl(root, diagnostics=diagnostics, **kwargs)
    return list(walker.walk()), diagnostics


def warnings_for(diagnostics, path):
    return [e for e in diagnostics.warnings if e.path == str(path)]


class TestTraversalOrder:

    def test_directory_before_children_depth_first(self, temp_dir):
        (temp_dir / "a.txt").write_bytes(b"a")
        (temp_dir / "b").mkdir()
        (temp_dir / "b" / "c.txt").write_bytes(b"c")
        (temp_dir / "d.txt").write_bytes(b"d")

        paths, diagnostics = walk(temp_dir)

        assert paths == [
            temp_dir,
            temp_dir / "a.txt",
            temp_dir / "b",
            temp_dir / "b" / "c.txt",
            temp_dir / "d.txt",
        ]
        assert diagnostics.counts[DiagnosticKind.VISITED_DIRECTORY] == 2
        assert diagnostics.warnings == []

    def test_walk_is_lazy(self, temp_dir):
        (temp_dir / "x.txt").write_bytes(b"x")
        walker = TreeWalkerImpl(temp_dir)

        iterator = iter(walker)
        assert next(iterator) == temp_dir
        assert next(iterator) == temp_dir / "x.txt"
        with pytest.raises(StopIteration):
            next(iterator)

    def test_single_file_root(self, temp_dir):
        path = temp_dir / "only.txt"
        path.write_bytes(b"1")
        paths, _ = walk(path)
        assert paths == [path]

    def test_missing_root_yields_nothing(self, temp_dir):
        paths, diagnostics = walk(temp_dir / "nope")
        assert paths == []
        assert len(diagnostics.warnings) == 1


class TestSpecialFiles:

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes not supported")
    def test_fifo_is_skipped(self, temp_dir):
        fifo = temp_dir / "pipe"
        os.mkfifo(fifo)
        (temp_dir / "file.txt").write_bytes(b"f")

        paths, diagnostics = walk(temp_dir)

        assert fifo not in paths
        assert temp_dir / "file.txt" in paths
        assert diagnostics.counts[DiagnosticKind.SKIP] == 1

    def test_broken_symlink_is_skipped(self, temp_dir):
        link = temp_dir / "dangling"
        try:
            link.symlink_to(temp_dir / "does_not_exist")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        paths, diagnostics = walk(temp_dir)
        assert paths == [temp_dir]
        assert diagnostics.counts[DiagnosticKind.SKIP] == 1


class TestSymlinks:

    @pytest.fixture
    def linked_tree(self, temp_dir):
        target = temp_dir / "target"
        target.mkdir()
        (target / "inside.txt").write_bytes(b"inside")
        root = temp_dir / "root"
        root.mkdir()
        link = root / "link"
        try:
            link.symlink_to(target, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        return root, link

    def test_symlinked_directory_not_followed_by_default(self, linked_tree):
        root, link = linked_tree
        paths, diagnostics = walk(root)

        assert paths == [root, link]
        assert len(warnings_for(diagnostics, link)) == 1
        assert "Not following" in warnings_for(diagnostics, link)[0].message

    def test_symlinked_directory_followed_on_request(self, linked_tree):
        root, link = linked_tree
        paths, diagnostics = walk(root, follow_symlinks=True)

        assert paths == [root, link, link / "inside.txt"]
        assert diagnostics.warnings == []

    def test_symlink_cycle_terminates(self, temp_dir):
        sub = temp_dir / "sub"
        sub.mkdir()
        loop = sub / "loop"
        try:
            loop.symlink_to(temp_dir, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        paths, diagnostics = walk(temp_dir, follow_symlinks=True)

        assert paths == [temp_dir, sub, loop]
        assert "already visited" in warnings_for(diagnostics, loop)[0].message


class TestUnreadableDirectories:

    def test_listing_failure_is_reported_and_siblings_continue(self, temp_dir, monkeypatch):
        (temp_dir / "locked").mkdir()
        (temp_dir / "locked" / "hidden.txt").write_bytes(b"h")
        (temp_dir / "open").mkdir()
        (temp_dir / "open" / "visible.txt").write_bytes(b"v")

        original = TreeWalkerImpl._list_dir

        def failing_list_dir(path):
            if path.name == "locked":
                raise PermissionError(13, "Permission denied")
            return original(path)

        monkeypatch.setattr(TreeWalkerImpl, "_list_dir", staticmethod(failing_list_dir))

        paths, diagnostics = walk(temp_dir)

        assert temp_dir / "locked" in paths
        assert temp_dir / "locked" / "hidden.txt" not in paths
        assert temp_dir / "open" / "visible.txt" in paths
        assert len(warnings_for(diagnostics, temp_dir / "locked")) == 1

    def test_inaccessible_directory_is_not_entered(self, temp_dir, monkeypatch):
        """Permission bits are ignored for root, so access() is simulated."""
        locked = temp_dir / "locked"
        locked.mkdir()
        (locked / "secret.txt").write_bytes(b"s")

        real_access = os.access
        monkeypatch.setattr(
            "deldup.core.walker.os.access",
            lambda p, mode: False if Path(p) == locked else real_access(p, mode))

        paths, diagnostics = walk(temp_dir)

        assert paths == [temp_dir, locked]
        assert "Could not read directory" in warnings_for(diagnostics, locked)[0].message


class ChainWalker(TreeWalkerImpl):
    """Simulates a chain of single-child directories; nodes are their depth."""

    def __init__(self, depth):
        super().__init__(Path("."))
        self.root = 0
        self.depth = depth

    def _node_kind(self, node):
        return NodeKind.DIRECTORY if node < self.depth else NodeKind.FILE

    def _children(self, node):
        return [node + 1]


class TestDeepTrees:

    def test_hundred_thousand_levels_without_recursion(self):
        depth = 100_000
        assert depth > sys.getrecursionlimit()

        count = 0
        last = None
        for node in ChainWalker(depth).walk():
            count += 1
            last = node

        assert count == depth + 1
        assert last == depth

    def test_real_deep_tree(self, temp_dir):
        current = temp_dir
        for _ in range(200):
            current = current / "d"
        current.mkdir(parents=True)
        (current / "leaf.txt").write_bytes(b"leaf")

        paths, _ = walk(temp_dir)
        assert paths[-1] == current / "leaf.txt"
        assert len(paths) == 202

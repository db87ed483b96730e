"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/walker.py
Iterative directory tree traversal.
Features:
- Uses an explicit stack of per-directory cursors instead of recursion, so the
  depth of the tree is bounded by memory, not by the interpreter call stack
- Yields each directory before its children, siblings in name order
- Skips special files (devices, pipes, sockets, broken symlinks)
- Optionally follows symbolic links, refusing to enter a directory twice
- Unreadable directories are reported and skipped, never fatal
"""

import logging
import os
import stat
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple

from deldup.core.diagnostics import Diagnostics
from deldup.core.errors import TraversalWarning
from deldup.core.interfaces import DiagnosticsSink, TreeWalker

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"
    SPECIAL = "special"
    MISSING = "missing"


class TreeWalkerImpl(TreeWalker):
    """
    Walks a directory tree depth-first without recursion.

    Attributes:
        root: Root of the walk (a directory, or a single file)
        follow_symlinks: Descend into directories reached through symbolic links
        diagnostics: Sink for visited-directory, warning and skip events
    """

    def __init__(
        self,
        root,
        follow_symlinks: bool = False,
        diagnostics: Optional[DiagnosticsSink] = None
    ):
        self.root = Path(root)
        self.follow_symlinks = follow_symlinks
        self.diagnostics = diagnostics or Diagnostics()
        self._entered: Set[Tuple[int, int]] = set()

    def __iter__(self) -> Iterator[Path]:
        return self.walk()

    def walk(self) -> Iterator[Path]:
        logger.debug(f"Walking {self.root} (follow symlinks: {self.follow_symlinks})")
        cursor: Iterator[Path] = iter([self.root])
        stack: List[Iterator[Path]] = []

        while True:
            path = next(cursor, None)
            if path is None:
                if not stack:
                    return
                cursor = stack.pop()
                continue

            kind = self._node_kind(path)
            if kind is NodeKind.DIRECTORY:
                self.diagnostics.visited_directory(path)
                children = self._children(path)
                yield path
                if children is not None:
                    stack.append(cursor)
                    cursor = iter(children)
            elif kind is NodeKind.FILE:
                yield path
            elif kind is NodeKind.MISSING:
                self.diagnostics.warning(
                    path, "Could not access", TraversalWarning("Could not access", str(path)))
            else:
                self.diagnostics.skip(path, "Skipping special file")

    @staticmethod
    def _node_kind(path: Path) -> NodeKind:
        """Classify a path, resolving symbolic links."""
        try:
            st = path.lstat()
        except OSError:
            return NodeKind.MISSING

        if stat.S_ISLNK(st.st_mode):
            try:
                st = path.stat()
            except OSError:
                return NodeKind.SPECIAL  # broken or looping link

        if stat.S_ISDIR(st.st_mode):
            return NodeKind.DIRECTORY
        if stat.S_ISREG(st.st_mode):
            return NodeKind.FILE
        return NodeKind.SPECIAL

    def _children(self, path: Path) -> Optional[List[Path]]:
        """
        Return the entries of a directory to descend into,
        or None if the directory must not be entered.
        """
        if not os.access(path, os.R_OK | os.X_OK):
            self._warn(path, "Could not read directory")
            return None

        if path.is_symlink() and not self.follow_symlinks:
            self._warn(path, "Not following symbolic link")
            return None

        if self.follow_symlinks:
            try:
                st = path.stat()
            except OSError as e:
                self._warn(path, f"Could not read directory ({e})")
                return None
            identity = (st.st_dev, st.st_ino)
            if identity in self._entered:
                self._warn(path, "Directory already visited (symbolic link cycle)")
                return None
            self._entered.add(identity)

        try:
            return self._list_dir(path)
        except OSError as e:
            self._warn(path, f"Could not list files in directory ({e.strerror or e})")
            return None

    @staticmethod
    def _list_dir(path: Path) -> List[Path]:
        with os.scandir(path) as it:
            names = sorted(entry.name for entry in it)
        return [path / name for name in names]

    def _warn(self, path: Path, message: str) -> None:
        self.diagnostics.warning(path, message, TraversalWarning(message, str(path)))

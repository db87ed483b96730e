"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the indexing system.
These protocols enforce structural typing using Python's `typing.Protocol` so that
walkers, indexers and matchers can be swapped (e.g. in tests) without subclassing.

Key Components:
---------------
- DiagnosticsSink: receives visited-directory, warning and skip events.
- TreeWalker: lazily yields the files and directories of a subtree.
- Indexer: turns a subtree into a ContentIndex.
- DuplicateMatcher: checks new entries against an official ContentIndex.
"""

from pathlib import Path
from typing import Iterable, Iterator, Optional, Protocol

from deldup.core.diagnostics import DiagnosticEvent
from deldup.core.index import ContentIndex
from deldup.core.models import DuplicateDecision, FileIdentity, IndexStats


class DiagnosticsSink(Protocol):
    """Interface for consumers of non-fatal core events."""
    def emit(self, event: DiagnosticEvent) -> None: ...
    def visited_directory(self, path) -> None: ...
    def warning(self, path, message: str, error: Optional[BaseException] = None) -> None: ...
    def skip(self, path, message: str) -> None: ...


class TreeWalker(Protocol):
    """
    Interface for directory tree traversal.

    Methods:
        walk: Yields every regular file and directory under the root, each
              directory before its children. Single pass, not restartable.
    """
    def walk(self) -> Iterator[Path]:
        ...


class Indexer(Protocol):
    """
    Interface for building a ContentIndex from a directory tree.
    """
    stats: IndexStats

    def build(self, root) -> ContentIndex:
        """
        Index every readable regular file under `root`.

        Args:
            root: Directory to index.

        Returns:
            A fully populated ContentIndex.
        """
        ...


class DuplicateMatcher(Protocol):
    """
    Interface for confirming duplicates against an official index.
    """
    def match(self, entry: FileIdentity) -> DuplicateDecision:
        """Decide whether one new entry duplicates anything in the official index."""
        ...

    def iter_decisions(
        self,
        entries: Iterable[FileIdentity],
        include_unique: bool = False
    ) -> Iterator[DuplicateDecision]:
        """
        Lazily match a sequence of new entries.

        Args:
            entries: New entries, typically ContentIndex.entries() of the new tree.
            include_unique: Also yield decisions for entries with no fast-key hit.
        """
        ...

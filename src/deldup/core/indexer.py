"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/indexer.py
Builds a ContentIndex from a directory tree.

Every readable regular file becomes a plain FileIdentity. With archive indexing
enabled, the members of every .zip file are indexed as well, as if they were
loose files, in addition to the .zip file itself.
"""
import logging
import os
import stat
import time
import zipfile
from pathlib import Path
from typing import Callable, Optional

from deldup.core.diagnostics import Diagnostics
from deldup.core.errors import ArchiveError, ReadError
from deldup.core.index import ContentIndex
from deldup.core.interfaces import DiagnosticsSink, Indexer, TreeWalker
from deldup.core.models import ArchiveEntry, FileIdentity, IndexStats
from deldup.core.walker import TreeWalkerImpl

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSION = ".zip"


class IndexerImpl(Indexer):
    """
    Drives a TreeWalker and inserts every accepted entry into a new ContentIndex.

    Attributes:
        follow_symlinks: Descend into linked directories; linked files are never indexed
        enter_archives: Index the members of .zip files too
        diagnostics: Sink for non-fatal events
        stats: Counters of the last build
    """

    def __init__(
        self,
        follow_symlinks: bool = False,
        enter_archives: bool = False,
        diagnostics: Optional[DiagnosticsSink] = None,
        walker_factory: Optional[Callable[..., TreeWalker]] = None
    ):
        self.follow_symlinks = follow_symlinks
        self.enter_archives = enter_archives
        self.diagnostics = diagnostics or Diagnostics()
        self.walker_factory = walker_factory or TreeWalkerImpl
        self.stats = IndexStats()

    def build(self, root) -> ContentIndex:
        self.stats = IndexStats(root=str(root))
        index = ContentIndex()
        start_time = time.time()

        walker = self.walker_factory(
            root, follow_symlinks=self.follow_symlinks, diagnostics=self.diagnostics)

        for path in walker.walk():
            if not self._accepts(path):
                continue

            if self._insert(index, FileIdentity.for_file(path)):
                self.stats.files_indexed += 1

            if self.enter_archives and path.name.lower().endswith(ARCHIVE_EXTENSION):
                try:
                    self._index_archive(index, path)
                except ArchiveError as e:
                    self.diagnostics.warning(path, "Could not read archive", e)

        self.stats.total_time = time.time() - start_time
        logger.debug(f"Indexed {self.stats.entries_indexed} entries under {root} "
                     f"into {len(index)} keys in {self.stats.total_time:.2f}s")
        return index

    def _accepts(self, path: Path) -> bool:
        """
        Readable regular files only; devices, pipes, sockets and symbolic links
        are rejected. Following links only lets the walker into linked directories.
        """
        try:
            st = path.lstat()
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return False

        if stat.S_ISDIR(st.st_mode):
            return False
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Not a regular file: {path}")
            return False
        if not os.access(path, os.R_OK):
            logger.debug(f"Not readable: {path}")
            return False
        return True

    def _insert(self, index: ContentIndex, entry: FileIdentity) -> bool:
        try:
            index.insert(entry)
            return True
        except ReadError as e:
            self.stats.entries_skipped += 1
            self.diagnostics.warning(entry.display_name, "Could not read", e)
            return False

    def _index_archive(self, index: ContentIndex, path: Path) -> None:
        """
        Index the non-directory members of a ZIP file.
        Member keys are computed while the archive is open.

        Raises:
            ArchiveError: If the archive cannot be opened or its directory read.
        """
        try:
            archive = zipfile.ZipFile(path)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise ArchiveError(f"Cannot open archive {path}: {e}", str(path)) from e

        with archive:
            self.stats.archives_opened += 1
            try:
                members = archive.infolist()
            except (OSError, zipfile.BadZipFile) as e:
                raise ArchiveError(f"Cannot read archive {path}: {e}", str(path)) from e

            for info in members:
                if info.is_dir():
                    continue
                entry = FileIdentity.for_archive_entry(
                    path, ArchiveEntry.from_zipinfo(info), archive=archive)
                if self._insert(index, entry):
                    self.stats.archive_entries_indexed += 1

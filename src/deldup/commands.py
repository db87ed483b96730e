"""
Unified command orchestrator for duplicate detection.
This is the SINGLE source of truth for the workflow, the CLI only presents it.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, Optional, Tuple

from deldup.core.diagnostics import Diagnostics
from deldup.core.index import ContentIndex
from deldup.core.indexer import IndexerImpl
from deldup.core.matcher import DuplicateMatcherImpl
from deldup.core.models import DuplicateDecision, IndexStats, ScanParams

logger = logging.getLogger(__name__)


class DuplicateScanCommand:
    """
    Orchestrates the whole workflow:
    1. Index the official directory (entering .zip files if requested)
    2. Index the directory with new files (never entering archives: its files are
       the deletion targets)
    3. Match every new entry against the official index

    Usage:
        params = ScanParams(official_dir="/photos", new_dir="/card", enter_archives=True)
        command = DuplicateScanCommand()
        official, new = command.execute(params)
        for decision in command.find_duplicates(official, new):
            ...
    """

    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self.diagnostics = diagnostics or Diagnostics()
        self.official_stats: Optional[IndexStats] = None
        self.new_stats: Optional[IndexStats] = None

    def build_index(
            self,
            root: str,
            enter_archives: bool = False,
            follow_symlinks: bool = False
    ) -> Tuple[ContentIndex, IndexStats]:
        """Index one directory tree."""
        logger.info(f"Reading files under {root}")
        indexer = IndexerImpl(
            follow_symlinks=follow_symlinks,
            enter_archives=enter_archives,
            diagnostics=self.diagnostics,
        )
        index = indexer.build(root)
        return index, indexer.stats

    def build_official_index(self, params: ScanParams) -> ContentIndex:
        index, self.official_stats = self.build_index(
            params.official_dir,
            enter_archives=params.enter_archives,
            follow_symlinks=params.follow_symlinks,
        )
        return index

    def build_new_index(self, params: ScanParams) -> ContentIndex:
        index, self.new_stats = self.build_index(
            params.new_dir,
            enter_archives=False,
            follow_symlinks=params.follow_symlinks,
        )
        return index

    def execute(self, params: ScanParams) -> Tuple[ContentIndex, Optional[ContentIndex]]:
        """
        Build the indexes required by `params`.

        Returns:
            Tuple of (official_index, new_index); new_index is None in dump mode.
        """
        if params.dump_only:
            return self.build_official_index(params), None

        if not params.parallel:
            official = self.build_official_index(params)
            return official, self.build_new_index(params)

        # The two trees are independent; each index has exactly one writer.
        with ThreadPoolExecutor(max_workers=2) as ex:
            official_future = ex.submit(self.build_official_index, params)
            new_future = ex.submit(self.build_new_index, params)
            return official_future.result(), new_future.result()

    def find_duplicates(
            self,
            official: ContentIndex,
            new: ContentIndex,
            include_unique: bool = False
    ) -> Iterator[DuplicateDecision]:
        """Lazily yield a decision for every new entry that hit the official index."""
        logger.info("Finding duplicated files")
        matcher = DuplicateMatcherImpl(official, diagnostics=self.diagnostics)
        return matcher.iter_decisions(new.entries(), include_unique=include_unique)

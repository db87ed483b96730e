"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/matcher.py
Confirms duplicates of new entries against the official index.

The composite key only nominates candidates. A new entry is a duplicate only
if its full CRC-32 equals the full CRC-32 of at least one candidate; a key hit
with no full match is reported as a false positive, not silently dropped.
"""
import logging
import os
from typing import Iterable, Iterator, Optional

from deldup.core.diagnostics import Diagnostics
from deldup.core.errors import ReadError
from deldup.core.index import ContentIndex
from deldup.core.interfaces import DiagnosticsSink, DuplicateMatcher
from deldup.core.models import DuplicateDecision, FileIdentity, MatchVerdict

logger = logging.getLogger(__name__)


class DuplicateMatcherImpl(DuplicateMatcher):
    """
    Matches new entries against an official ContentIndex. Performs no deletion.
    """

    def __init__(self, official: ContentIndex, diagnostics: Optional[DiagnosticsSink] = None):
        self.official = official
        self.diagnostics = diagnostics or Diagnostics()

    def match(self, entry: FileIdentity) -> DuplicateDecision:
        try:
            candidates = list(self.official.lookup(entry))
        except ReadError as e:
            self.diagnostics.warning(entry.display_name, "Could not read", e)
            return DuplicateDecision(candidate=entry, verdict=MatchVerdict.UNKNOWN)

        # A file reachable from both trees is not a copy of itself
        candidates = [other for other in candidates if not self._same_file(entry, other)]
        if not candidates:
            return DuplicateDecision(candidate=entry, verdict=MatchVerdict.UNIQUE)

        try:
            fingerprint = entry.full_fingerprint()
        except ReadError as e:
            self.diagnostics.warning(entry.display_name, "Could not read", e)
            return DuplicateDecision(
                candidate=entry, verdict=MatchVerdict.UNKNOWN, candidates=candidates)

        matches = []
        unreadable = []
        for other in candidates:
            try:
                if other.full_fingerprint() == fingerprint:
                    matches.append(other)
            except ReadError as e:
                self.diagnostics.warning(other.display_name, "Could not read", e)
                unreadable.append(other)

        if matches:
            verdict = MatchVerdict.DUPLICATE
        elif len(unreadable) == len(candidates):
            verdict = MatchVerdict.UNKNOWN
        else:
            verdict = MatchVerdict.FALSE_POSITIVE
            logger.warning(f"Fast key matched but content differs: {entry.display_name}")

        return DuplicateDecision(
            candidate=entry,
            verdict=verdict,
            matches=matches,
            candidates=candidates,
            unreadable=unreadable,
        )

    @staticmethod
    def _same_file(entry: FileIdentity, other: FileIdentity) -> bool:
        if entry.is_archive_entry or other.is_archive_entry:
            return False
        try:
            return os.path.samefile(entry.path, other.path)
        except OSError:
            return False

    def iter_decisions(
        self,
        entries: Iterable[FileIdentity],
        include_unique: bool = False
    ) -> Iterator[DuplicateDecision]:
        for entry in entries:
            decision = self.match(entry)
            if decision.verdict is MatchVerdict.UNIQUE and not include_unique:
                continue
            yield decision

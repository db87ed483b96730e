"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for content identification and duplicate matching.
"""

import logging
import os
import threading
import time
import zipfile
import zlib
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Iterator, List, Optional

from deldup.core.errors import ReadError
from deldup.core.hasher import crc32_of_prefix, crc32_of_stream

logger = logging.getLogger(__name__)

# Everything that opening/reading a plain file or a ZIP member can raise.
# RuntimeError: encrypted member; NotImplementedError: unsupported compression.
_READ_ERRORS = (
    OSError, EOFError, KeyError, zipfile.BadZipFile, zlib.error,
    RuntimeError, NotImplementedError,
)


# =============================
# Enums
# =============================

class EntryKind(Enum):
    """Which representation a FileIdentity wraps."""
    FILE = "file"
    ARCHIVE_ENTRY = "archive-entry"


class MatchVerdict(Enum):
    """
    Outcome of matching one new entry against the official index.
    """
    DUPLICATE = "duplicate"
    FALSE_POSITIVE = "false-positive"  # fast key hit, no full fingerprint matched
    UNKNOWN = "unknown"  # the new entry could not be read
    UNIQUE = "unique"  # fast key not present in the official index

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            MatchVerdict.DUPLICATE: "Duplicate",
            MatchVerdict.FALSE_POSITIVE: "False positive on fast key",
            MatchVerdict.UNKNOWN: "Unreadable",
            MatchVerdict.UNIQUE: "Unique",
        }
        return mapping.get(self, self.value)


# ======================
#  Core Data Models
# ======================

def _zip_timestamp(date_time) -> float:
    """ZIP stores local wall-clock time without a zone."""
    try:
        return time.mktime(tuple(date_time) + (0, 0, -1))
    except (OverflowError, ValueError):
        return 0.0


@dataclass(frozen=True)
class ArchiveEntry:
    """
    Descriptor of one member of a ZIP container, taken from its central directory.
    `info` addresses the member by its header offset, so members sharing a
    name stay distinct.
    """
    name: str
    size: int
    crc: int
    modified_time: float
    info: Optional[zipfile.ZipInfo] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_zipinfo(cls, info: zipfile.ZipInfo) -> "ArchiveEntry":
        return cls(
            name=info.filename,
            size=info.file_size,
            crc=info.CRC,
            modified_time=_zip_timestamp(info.date_time),
            info=info,
        )


@dataclass(eq=False)
class FileIdentity:
    """
    One addressable unit of content: a plain file, or a member of a ZIP archive.

    `path` is always the file on disk (the container itself for archive members).
    Size and fingerprints are computed on first access and cached for the
    lifetime of the object; a failed computation is not cached, so the next call
    retries. For archive members the size and full CRC-32 come straight from the
    archive directory and the member is only decompressed for the partial
    fingerprint.

    Equality between identities is content-based (composite key + full
    fingerprint) and is decided by the matcher, never by path.
    """
    path: str
    archive_entry: Optional[ArchiveEntry] = None
    archive: Optional[zipfile.ZipFile] = field(default=None, repr=False)

    _full: Optional[int] = field(default=None, init=False, repr=False)
    _partial: Optional[int] = field(default=None, init=False, repr=False)
    _size: Optional[int] = field(default=None, init=False, repr=False)
    _key: Optional[str] = field(default=None, init=False, repr=False)
    _mtime: Optional[float] = field(default=None, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def __post_init__(self):
        self.path = os.fspath(self.path)

    @classmethod
    def for_file(cls, path) -> "FileIdentity":
        return cls(path=path)

    @classmethod
    def for_archive_entry(
            cls,
            archive_path,
            entry: ArchiveEntry,
            archive: Optional[zipfile.ZipFile] = None
    ) -> "FileIdentity":
        """
        Wraps an archive member. `archive` is an optional open handle reused for
        reads while it stays open; once closed the container is reopened by path.
        """
        return cls(path=archive_path, archive_entry=entry, archive=archive)

    @property
    def kind(self) -> EntryKind:
        return EntryKind.FILE if self.archive_entry is None else EntryKind.ARCHIVE_ENTRY

    @property
    def is_archive_entry(self) -> bool:
        return self.archive_entry is not None

    @property
    def display_name(self) -> str:
        if self.archive_entry is None:
            return self.path
        return f"{self.path}|{self.archive_entry.name}"

    @property
    def deletion_target(self) -> Optional[str]:
        """Path that removing this content would delete; archive members have none."""
        return self.path if self.archive_entry is None else None

    # --- lazily computed values ---

    def partial_fingerprint(self) -> int:
        """CRC-32 of at most the first 64 KiB of content; 0 for empty content."""
        with self._lock:
            if self._partial is None:
                self._partial = self._calc_partial_fingerprint()
            return self._partial

    def full_fingerprint(self) -> int:
        """CRC-32 of the whole content. Archive members use the stored CRC."""
        with self._lock:
            if self._full is None:
                self._full = self._calc_full_fingerprint()
            return self._full

    def size(self) -> int:
        """
        Content size in bytes. Resolved through the cheaper fingerprint:
        the partial one for plain files, the stored metadata for archive members.
        """
        with self._lock:
            if self._size is None:
                if self.archive_entry is None:
                    self.partial_fingerprint()
                else:
                    self.full_fingerprint()
            return self._size

    def composite_key(self) -> str:
        """Fast lookup key: 'partial_fingerprint:size'."""
        with self._lock:
            if self._key is None:
                partial = self.partial_fingerprint()
                self._key = f"{partial}:{self.size()}"
            return self._key

    def modified_time(self) -> float:
        """Modification time as a Unix timestamp."""
        with self._lock:
            if self._mtime is None:
                if self.archive_entry is not None:
                    self._mtime = self.archive_entry.modified_time
                else:
                    try:
                        self._mtime = os.stat(self.path).st_mtime
                    except OSError as e:
                        raise ReadError(f"Cannot stat {self.path}: {e}", self.path) from e
            return self._mtime

    # --- computation ---

    def _calc_partial_fingerprint(self) -> int:
        entry = self.archive_entry
        if entry is not None:
            if self._size is None:
                self._size = entry.size
            if entry.size == 0:
                return 0

        try:
            with self._open() as stream:
                if entry is None:
                    size = os.fstat(stream.fileno()).st_size
                    if self._size is None:
                        self._size = size
                    if size == 0:
                        return 0
                crc, _ = crc32_of_prefix(stream)
                return crc
        except _READ_ERRORS as e:
            logger.debug(f"Partial fingerprint failed for {self.display_name}: {e}")
            raise ReadError(f"Cannot read {self.display_name}: {e}", self.path) from e

    def _calc_full_fingerprint(self) -> int:
        entry = self.archive_entry
        if entry is not None:
            if self._size is None:
                self._size = entry.size
            return entry.crc

        try:
            with open(self.path, "rb") as stream:
                crc, total = crc32_of_stream(stream)
        except OSError as e:
            logger.warning(f"Error calculating CRC32 for {self.path}: {e}")
            raise ReadError(f"Cannot read {self.path}: {e}", self.path) from e

        if self._size is None:
            self._size = total
        return crc

    @contextmanager
    def _open(self) -> Iterator[BinaryIO]:
        entry = self.archive_entry
        if entry is None:
            with open(self.path, "rb") as stream:
                yield stream
            return

        member = entry.info if entry.info is not None else entry.name
        if self.archive is not None and self.archive.fp is not None:
            with self.archive.open(member) as stream:
                yield stream
        else:
            with zipfile.ZipFile(self.path) as archive, archive.open(member) as stream:
                yield stream

    def __str__(self):
        return self.display_name

    def __repr__(self):
        return f"<FileIdentity {self.kind.value} {self.display_name}>"


@dataclass
class DuplicateDecision:
    """
    Result of checking one new entry against the official index.
    Handed to the deletion policy; carries no side effects itself.
    """
    candidate: FileIdentity
    verdict: MatchVerdict
    matches: List[FileIdentity] = field(default_factory=list)
    candidates: List[FileIdentity] = field(default_factory=list)
    unreadable: List[FileIdentity] = field(default_factory=list)

    @property
    def is_duplicate(self) -> bool:
        return self.verdict is MatchVerdict.DUPLICATE

    @property
    def anomalous(self) -> bool:
        """Fast key matched but no candidate's full fingerprint did."""
        return self.verdict is MatchVerdict.FALSE_POSITIVE

    def __repr__(self):
        return (f"<DuplicateDecision {self.verdict.value} {self.candidate.display_name}, "
                f"matches={len(self.matches)}/{len(self.candidates)}>")


@dataclass
class IndexStats:
    """
    Counters collected while building one ContentIndex.
    """
    root: str = ""
    files_indexed: int = 0
    archives_opened: int = 0
    archive_entries_indexed: int = 0
    entries_skipped: int = 0
    total_time: float = 0.0

    @property
    def entries_indexed(self) -> int:
        return self.files_indexed + self.archive_entries_indexed

    def print_summary(self) -> str:
        lines = [
            f"Index of {self.root}:",
            f"  Files indexed: {self.files_indexed}",
        ]
        if self.archives_opened:
            lines.append(f"  Archives opened: {self.archives_opened} "
                         f"({self.archive_entries_indexed} entries)")
        if self.entries_skipped:
            lines.append(f"  Skipped (unreadable): {self.entries_skipped}")
        lines.append(f"  Time: {self.total_time:.3f}s")
        return "\n".join(lines)


"""
DTO for scan parameters with built-in validation.
"""

@dataclass
class ScanParams:
    """Parameters of one deldup run."""
    official_dir: str
    new_dir: Optional[str] = None
    enter_archives: bool = False
    follow_symlinks: bool = False
    dump_only: bool = False
    delete_all: bool = False
    permanent: bool = False
    parallel: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.official_dir:
            raise ValueError("Official directory cannot be empty")

        if self.dump_only and self.new_dir:
            raise ValueError("Dump mode takes only the official directory")

        if not self.dump_only and not self.new_dir:
            raise ValueError("Directory with new files cannot be empty")

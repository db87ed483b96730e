"""
Core indexing engine: walker, fingerprints, content index, indexer and matcher.

This package contains the performance-critical foundation of deldup:
- TreeWalkerImpl: iterative (stack-based) directory traversal
- FileIdentity: plain file or ZIP member with lazily computed CRC-32 fingerprints
- ContentIndex: composite key → collision bucket of entries
- IndexerImpl: builds a ContentIndex from a tree, optionally entering .zip files
- DuplicateMatcherImpl: confirms duplicates with full CRC-32 comparison

All components are pure Python with no console dependencies.
"""

from .errors import DelDupError, ReadError, ArchiveError, TraversalWarning
from .models import (
    ArchiveEntry, EntryKind, FileIdentity, MatchVerdict, DuplicateDecision,
    IndexStats, ScanParams)
from .diagnostics import Diagnostics, DiagnosticEvent, DiagnosticKind
from .index import ContentIndex
from .walker import TreeWalkerImpl, NodeKind
from .indexer import IndexerImpl
from .matcher import DuplicateMatcherImpl

__all__ = [
    "DelDupError",
    "ReadError",
    "ArchiveError",
    "TraversalWarning",
    "ArchiveEntry",
    "EntryKind",
    "FileIdentity",
    "MatchVerdict",
    "DuplicateDecision",
    "IndexStats",
    "ScanParams",
    "Diagnostics",
    "DiagnosticEvent",
    "DiagnosticKind",
    "ContentIndex",
    "TreeWalkerImpl",
    "NodeKind",
    "IndexerImpl",
    "DuplicateMatcherImpl",
]

"""
deldup: delete files from a "new" tree that already exist in an official tree.

Core features:
- Lazy matching: CRC-32 of the first 64 KiB + size as a fast key, full CRC-32 to confirm
- ZIP members indexed as virtual files using the CRC-32 stored in the archive
- Iterative tree walk, safe on arbitrarily deep trees
- Safe deletion to system trash (via send2trash)
- CLI interface with interactive or automatic deletion and CSV export
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("deldup")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from deldup.commands import DuplicateScanCommand
from deldup.core import (
    ScanParams, FileIdentity, ContentIndex, DuplicateDecision, MatchVerdict,
    IndexerImpl, DuplicateMatcherImpl, TreeWalkerImpl, Diagnostics)
from deldup.utils.convert_utils import ConvertUtils
from deldup.services import DeletionPolicy, ExportService, FileService

__all__ = [
    "DuplicateScanCommand",
    "ScanParams",
    "FileIdentity",
    "ContentIndex",
    "DuplicateDecision",
    "MatchVerdict",
    "IndexerImpl",
    "DuplicateMatcherImpl",
    "TreeWalkerImpl",
    "Diagnostics",
    "ConvertUtils",
    "DeletionPolicy",
    "ExportService",
    "FileService",
    "__version__",
]

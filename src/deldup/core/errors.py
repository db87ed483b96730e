"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Error taxonomy of the indexing core. None of these is fatal to a run:
the affected file, archive or directory is reported and left out.
"""
from typing import Optional


class DelDupError(Exception):
    """Base class for all deldup errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ReadError(DelDupError):
    """A file or archive entry could not be opened or read."""


class ArchiveError(DelDupError):
    """An archive container could not be opened or its directory is corrupt."""


class TraversalWarning(DelDupError):
    """
    A directory was not descended into (unreadable, unfollowed symlink, cycle).
    Only used as the payload of warning diagnostics, never raised to callers.
    """

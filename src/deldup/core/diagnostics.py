"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/diagnostics.py
Side channel for non-fatal events raised while walking and indexing a tree.

The core never prints and never exits; it emits events here. The default sink
logs them, counts them per kind and forwards them to registered listeners.
"""
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    VISITED_DIRECTORY = "visited-directory"
    WARNING = "warning"
    SKIP = "skip"


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: DiagnosticKind
    path: str
    message: str = ""
    error: Optional[BaseException] = None

    def __str__(self):
        if self.message:
            return f"{self.message}: {self.path}"
        return self.path


_LOG_LEVELS = {
    DiagnosticKind.VISITED_DIRECTORY: logging.DEBUG,
    DiagnosticKind.SKIP: logging.INFO,
    DiagnosticKind.WARNING: logging.WARNING,
}


class Diagnostics:
    """
    Default diagnostics sink. Safe to share between threads.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger
        self._lock = threading.Lock()
        self.counts: Dict[DiagnosticKind, int] = {kind: 0 for kind in DiagnosticKind}
        self.warnings: List[DiagnosticEvent] = []
        self._listeners: List[Callable[[DiagnosticEvent], None]] = []

    def add_listener(self, listener: Callable[[DiagnosticEvent], None]) -> None:
        """Adds a listener called with every emitted event."""
        with self._lock:
            self._listeners.append(listener)

    def emit(self, event: DiagnosticEvent) -> None:
        with self._lock:
            self.counts[event.kind] += 1
            if event.kind is DiagnosticKind.WARNING:
                self.warnings.append(event)
            listeners = list(self._listeners)

        self._log.log(_LOG_LEVELS[event.kind], str(event))

        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                self._log.error(f"Error in diagnostics listener: {e}")

    def visited_directory(self, path) -> None:
        self.emit(DiagnosticEvent(DiagnosticKind.VISITED_DIRECTORY, str(path)))

    def warning(self, path, message: str, error: Optional[BaseException] = None) -> None:
        self.emit(DiagnosticEvent(DiagnosticKind.WARNING, str(path), message, error))

    def skip(self, path, message: str) -> None:
        self.emit(DiagnosticEvent(DiagnosticKind.SKIP, str(path), message))

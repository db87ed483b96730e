"""
Deletion policy: decides, per confirmed duplicate, whether the new file goes.

Automatic mode removes every confirmed duplicate. Interactive mode asks:
    y  delete this file
    Y  delete this file and every following duplicate without asking
    n/N/empty  keep it
End of input stops the run; nothing more is deleted afterwards.
"""
import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple

from deldup.core.errors import ReadError
from deldup.core.models import DuplicateDecision
from deldup.services.file_service import FileService

logger = logging.getLogger(__name__)

PROMPT_TEXT = "Delete? (y/Y/n/N) :"


class DeleteAnswer(Enum):
    YES = "yes"
    YES_TO_ALL = "yes-to-all"
    NO = "no"


DELETE_ANSWER_ALIASES = {
    "y": DeleteAnswer.YES,
    "Y": DeleteAnswer.YES_TO_ALL,
    "n": DeleteAnswer.NO,
    "N": DeleteAnswer.NO,
}


class DeletionOutcome(Enum):
    DELETED = "deleted"
    KEPT = "kept"
    SKIPPED = "skipped"  # not a confirmed duplicate, or nothing to delete
    FAILED = "failed"
    STOPPED = "stopped"


class DeletionPolicy:
    """
    Consumes DuplicateDecision objects and removes the duplicated new files.
    """

    def __init__(
            self,
            delete_all: bool = False,
            permanent: bool = False,
            prompt: Optional[Callable[[str], str]] = None,
            file_service=FileService
    ):
        self.delete_all = delete_all
        self.permanent = permanent
        self.prompt = prompt or input
        self.file_service = file_service
        self.stopped = False
        self.deleted: List[str] = []
        self.failed: List[Tuple[str, str]] = []
        self.freed_bytes = 0

    def apply(self, decision: DuplicateDecision) -> DeletionOutcome:
        if not decision.is_duplicate:
            return DeletionOutcome.SKIPPED

        target = decision.candidate.deletion_target
        if target is None:
            return DeletionOutcome.SKIPPED

        if self.stopped:
            return DeletionOutcome.STOPPED

        if not self.delete_all:
            answer = self._ask()
            if answer is None:
                logger.info("End of input stream detected, stopping")
                self.stopped = True
                return DeletionOutcome.STOPPED
            if answer is DeleteAnswer.NO:
                return DeletionOutcome.KEPT
            if answer is DeleteAnswer.YES_TO_ALL:
                self.delete_all = True

        try:
            self.file_service.remove(target, permanent=self.permanent)
        except RuntimeError as e:
            logger.warning(f"Failed to delete {target}: {e}")
            self.failed.append((target, str(e)))
            return DeletionOutcome.FAILED

        logger.debug(f"Deleted {target}")
        self.deleted.append(target)
        self.freed_bytes += self._size_of(decision)
        return DeletionOutcome.DELETED

    @staticmethod
    def _size_of(decision: DuplicateDecision) -> int:
        # Size is cached from indexing; the file itself is gone by now
        try:
            return decision.candidate.size()
        except ReadError:
            return 0

    def _ask(self) -> Optional[DeleteAnswer]:
        """Returns None at end of input; anything unrecognised means keep."""
        try:
            response = self.prompt(PROMPT_TEXT)
        except EOFError:
            return None
        response = response.strip()
        if not response:
            return DeleteAnswer.NO
        return DELETE_ANSWER_ALIASES.get(response[0], DeleteAnswer.NO)

"""
Critical deletion policy tests: only confirmed duplicates may ever be removed.
"""
from unittest import mock

import pytest

from deldup.core.models import ArchiveEntry, DuplicateDecision, FileIdentity, MatchVerdict
from deldup.services.deletion_policy import DeletionOutcome, DeletionPolicy, PROMPT_TEXT


def duplicate(path):
    return DuplicateDecision(candidate=FileIdentity.for_file(path), verdict=MatchVerdict.DUPLICATE)


def answers(*responses):
    """Prompt stub returning the given responses, then EOF."""
    queue = list(responses)

    def prompt(text):
        assert text == PROMPT_TEXT
        if not queue:
            raise EOFError
        return queue.pop(0)
    return prompt


@pytest.fixture
def file_service():
    return mock.Mock()


class TestAutomaticDeletion:

    def test_deletes_every_confirmed_duplicate(self, file_service):
        policy = DeletionPolicy(delete_all=True, file_service=file_service)

        assert policy.apply(duplicate("/new/a")) is DeletionOutcome.DELETED
        assert policy.apply(duplicate("/new/b")) is DeletionOutcome.DELETED

        assert file_service.remove.call_args_list == [
            mock.call("/new/a", permanent=False),
            mock.call("/new/b", permanent=False),
        ]
        assert policy.deleted == ["/new/a", "/new/b"]

    def test_permanent_flag_is_forwarded(self, file_service):
        DeletionPolicy(delete_all=True, permanent=True, file_service=file_service).apply(
            duplicate("/new/a"))
        file_service.remove.assert_called_once_with("/new/a", permanent=True)

    @pytest.mark.parametrize("verdict", [
        MatchVerdict.FALSE_POSITIVE, MatchVerdict.UNKNOWN, MatchVerdict.UNIQUE])
    def test_never_deletes_unconfirmed(self, file_service, verdict):
        policy = DeletionPolicy(delete_all=True, file_service=file_service)
        decision = DuplicateDecision(candidate=FileIdentity.for_file("/new/a"), verdict=verdict)

        assert policy.apply(decision) is DeletionOutcome.SKIPPED
        file_service.remove.assert_not_called()

    def test_archive_entries_have_no_deletion_target(self, file_service):
        entry = FileIdentity.for_archive_entry("/new/a.zip", ArchiveEntry("x.txt", 1, 0, 0.0))
        decision = DuplicateDecision(candidate=entry, verdict=MatchVerdict.DUPLICATE)

        policy = DeletionPolicy(delete_all=True, file_service=file_service)
        assert policy.apply(decision) is DeletionOutcome.SKIPPED
        file_service.remove.assert_not_called()

    def test_failure_is_recorded_and_not_raised(self, file_service):
        file_service.remove.side_effect = [RuntimeError("Failed to move to trash: busy"), None]
        policy = DeletionPolicy(delete_all=True, file_service=file_service)

        assert policy.apply(duplicate("/new/a")) is DeletionOutcome.FAILED
        assert policy.apply(duplicate("/new/b")) is DeletionOutcome.DELETED
        assert policy.failed == [("/new/a", "Failed to move to trash: busy")]
        assert policy.deleted == ["/new/b"]


class TestInteractiveDeletion:

    def test_y_deletes_n_keeps(self, file_service):
        policy = DeletionPolicy(prompt=answers("y", "n", "N", ""), file_service=file_service)

        outcomes = [policy.apply(duplicate(f"/new/{i}")) for i in range(4)]

        assert outcomes == [DeletionOutcome.DELETED] + [DeletionOutcome.KEPT] * 3
        assert policy.deleted == ["/new/0"]

    def test_capital_y_deletes_all_remaining(self, file_service):
        policy = DeletionPolicy(prompt=answers("n", "Yes please"), file_service=file_service)

        outcomes = [policy.apply(duplicate(f"/new/{i}")) for i in range(4)]

        assert outcomes == [DeletionOutcome.KEPT] + [DeletionOutcome.DELETED] * 3
        assert policy.delete_all is True
        assert policy.deleted == ["/new/1", "/new/2", "/new/3"]

    def test_end_of_input_stops(self, file_service):
        policy = DeletionPolicy(prompt=answers("y"), file_service=file_service)

        assert policy.apply(duplicate("/new/0")) is DeletionOutcome.DELETED
        assert policy.apply(duplicate("/new/1")) is DeletionOutcome.STOPPED
        assert policy.apply(duplicate("/new/2")) is DeletionOutcome.STOPPED
        assert policy.stopped
        assert file_service.remove.call_count == 1

    def test_unrecognised_answer_keeps(self, file_service):
        policy = DeletionPolicy(prompt=answers("  maybe "), file_service=file_service)
        assert policy.apply(duplicate("/new/0")) is DeletionOutcome.KEPT
        file_service.remove.assert_not_called()

    def test_no_prompt_for_non_duplicates(self, file_service):
        prompt = mock.Mock()
        policy = DeletionPolicy(prompt=prompt, file_service=file_service)
        policy.apply(DuplicateDecision(FileIdentity.for_file("/new/a"), MatchVerdict.FALSE_POSITIVE))
        prompt.assert_not_called()


class TestFreedBytes:

    def test_counts_size_of_deleted_files(self, temp_dir, file_service):
        target = temp_dir / "dup.bin"
        target.write_bytes(b"x" * 1500)
        decision = DuplicateDecision(FileIdentity.for_file(target), MatchVerdict.DUPLICATE)
        decision.candidate.size()

        policy = DeletionPolicy(delete_all=True, file_service=file_service)
        policy.apply(decision)
        assert policy.freed_bytes == 1500

    def test_kept_files_are_not_counted(self, temp_dir, file_service):
        target = temp_dir / "dup.bin"
        target.write_bytes(b"x" * 10)
        decision = DuplicateDecision(FileIdentity.for_file(target), MatchVerdict.DUPLICATE)

        policy = DeletionPolicy(prompt=answers("n"), file_service=file_service)
        policy.apply(decision)
        assert policy.freed_bytes == 0

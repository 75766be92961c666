"""Unit tests for the chunked batch deletion driver."""

from collections.abc import Sequence
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from uploadsweep.sweep.batches import chunked, run_batches, summary_message
from uploadsweep.sweep.models import BatchProgress, BatchResult, FileDeletionResult


def _all_deleted(paths: Sequence[str], _root: object) -> BatchResult:
    return BatchResult(deleted=len(paths))


class TestChunked:
    """Tests for chunked."""

    def test_splits_into_consecutive_chunks(self) -> None:
        paths = [f"/r/{i}.jpg" for i in range(250)]
        chunks = list(chunked(paths, 100))

        assert [len(c) for c in chunks] == [100, 100, 50]
        assert [p for c in chunks for p in c] == paths

    def test_empty(self) -> None:
        assert list(chunked([], 100)) == []

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            list(chunked(["a"], 0))


class TestRunBatches:
    """Tests for run_batches."""

    def test_250_paths_make_three_calls(self) -> None:
        delete = MagicMock(side_effect=_all_deleted)
        paths = [f"/r/{i}.jpg" for i in range(250)]

        result = run_batches(paths, "/r", delete=delete, sleep=MagicMock())

        assert delete.call_count == 3
        assert [len(call.args[0]) for call in delete.call_args_list] == [100, 100, 50]
        assert result.total == 250

    def test_chunks_submitted_in_order(self) -> None:
        delete = MagicMock(side_effect=_all_deleted)
        paths = [f"/r/{i}.jpg" for i in range(5)]

        run_batches(paths, "/r", delete=delete, batch_size=2, sleep=MagicMock())

        submitted = [p for call in delete.call_args_list for p in call.args[0]]
        assert submitted == paths

    def test_failed_chunk_counts_all_paths_and_continues(self) -> None:
        delete = MagicMock(
            side_effect=[BatchResult(deleted=2), ConnectionError("reset"), BatchResult(deleted=1)]
        )
        sleep = MagicMock()
        paths = [f"/r/{i}.jpg" for i in range(5)]

        result = run_batches(
            paths, "/r", delete=delete, batch_size=2, delay=0.5, error_delay=1.0, sleep=sleep
        )

        assert delete.call_count == 3
        assert result.deleted == 3
        assert result.failed == 2
        assert [r.path for r in result.results if not r.success] == ["/r/2.jpg", "/r/3.jpg"]
        assert [call.args[0] for call in sleep.call_args_list] == [0.5, 1.0]

    def test_per_file_results_kept_in_order_across_chunks(self) -> None:
        paths = [f"/r/{i}.jpg" for i in range(1000)]

        def delete(chunk: Sequence[str], _root: object) -> BatchResult:
            return BatchResult.from_results(
                [FileDeletionResult(path=p, success=True) for p in chunk]
            )

        result = run_batches(paths, "/r", delete=delete, batch_size=3, delay=0)

        assert result.deleted == 1000
        assert [r.path for r in result.results] == paths

    def test_no_delay_after_last_chunk(self) -> None:
        sleep = MagicMock()
        run_batches(["/r/a.jpg"], "/r", delete=_all_deleted, sleep=sleep)
        sleep.assert_not_called()

    def test_zero_delay_skips_sleep(self) -> None:
        sleep = MagicMock()
        paths = [f"/r/{i}.jpg" for i in range(3)]
        run_batches(paths, "/r", delete=_all_deleted, batch_size=1, delay=0, sleep=sleep)
        sleep.assert_not_called()

    def test_progress_reported_after_each_chunk(self) -> None:
        snapshots: list[BatchProgress] = []
        paths = [f"/r/{i}.jpg" for i in range(250)]

        run_batches(paths, "/r", delete=_all_deleted, on_progress=snapshots.append, sleep=MagicMock())

        assert [s.chunk_index for s in snapshots] == [0, 1, 2]
        assert [s.processed for s in snapshots] == [100, 200, 250]
        assert snapshots[-1].remaining == 0
        assert snapshots[-1].percent == 100
        assert all(s.chunk_count == 3 for s in snapshots)

    def test_empty_selection(self) -> None:
        delete = MagicMock()
        result = run_batches([], "/r", delete=delete)

        delete.assert_not_called()
        assert result == BatchResult()

    def test_with_real_deleter(self, uploads: Path) -> None:
        paths = [
            str(uploads / "2024" / "01" / "stray.png"),
            str(uploads / "2024" / "02" / "report.pdf"),
            str(uploads / "2024" / "02" / "gone.jpg"),
        ]

        result = run_batches(paths, uploads, batch_size=2, sleep=MagicMock())

        assert result.deleted == 2
        assert result.failed == 1
        assert not (uploads / "2024" / "01" / "stray.png").exists()


class TestSummaryMessage:
    """Tests for summary_message."""

    def test_deleted_only(self) -> None:
        assert summary_message(BatchResult(deleted=3)) == "3 orphan files deleted."

    def test_singular(self) -> None:
        assert summary_message(BatchResult(deleted=1, failed=1)) == (
            "1 orphan file deleted. 1 file could not be deleted."
        )

    def test_failed_only(self) -> None:
        assert summary_message(BatchResult(failed=2)) == "2 files could not be deleted."

    def test_nothing(self) -> None:
        assert summary_message(BatchResult()) == "No action taken."

"""Unit tests for BatchDeleter."""

from pathlib import Path
from unittest.mock import patch

import pytest
from uploadsweep.sweep.deleter import BatchDeleter, delete_batch


class TestDeleteBatch:
    """Tests for single-chunk deletion."""

    def test_deletes_files_inside_root(self, uploads: Path) -> None:
        targets = [uploads / "2024" / "01" / "stray.png", uploads / "2024" / "02" / "report.pdf"]

        result = delete_batch([str(t) for t in targets], uploads)

        assert result.deleted == 2
        assert result.failed == 0
        for target in targets:
            assert not target.exists()

    def test_empty_batch(self, uploads: Path) -> None:
        result = delete_batch([], uploads)
        assert result.deleted == 0
        assert result.failed == 0
        assert result.results == ()

    def test_missing_file_fails_without_affecting_others(self, uploads: Path) -> None:
        """A file already gone counts as failed; the rest of the chunk is deleted."""
        paths = [str(uploads / "2024" / "01" / f"orphan-{i}.jpg") for i in range(100)]
        for p in paths:
            Path(p).write_bytes(b"x")
        Path(paths[42]).unlink()

        result = delete_batch(paths, uploads)

        assert result.deleted == 99
        assert result.failed == 1
        assert result.results[42].success is False
        assert result.results[42].error is not None
        assert "does not exist" in result.results[42].error

    def test_path_outside_root_never_deleted(self, tmp_path: Path, uploads: Path) -> None:
        outside = tmp_path / "keep.jpg"
        outside.write_bytes(b"x")

        result = delete_batch([str(outside)], uploads)

        assert result.failed == 1
        assert outside.exists()
        assert "outside" in (result.results[0].error or "")

    def test_parent_segment_never_deleted(self, tmp_path: Path, uploads: Path) -> None:
        outside = tmp_path / "keep.jpg"
        outside.write_bytes(b"x")
        sneaky = f"{uploads}/2024/../../keep.jpg"

        result = delete_batch([sneaky], uploads)

        assert result.failed == 1
        assert outside.exists()

    def test_sibling_directory_never_deleted(self, tmp_path: Path, uploads: Path) -> None:
        sibling = tmp_path / "uploads-backup"
        sibling.mkdir()
        target = sibling / "a.jpg"
        target.write_bytes(b"x")

        result = delete_batch([str(target)], uploads)

        assert result.failed == 1
        assert target.exists()

    def test_directory_not_deleted(self, uploads: Path) -> None:
        directory = uploads / "2024" / "02"

        result = delete_batch([str(directory)], uploads)

        assert result.failed == 1
        assert directory.is_dir()

    def test_repeated_slashes_normalized(self, uploads: Path) -> None:
        target = uploads / "2024" / "01" / "stray.png"
        messy = str(target).replace("/2024/", "//2024//")

        result = delete_batch([messy], uploads)

        assert result.deleted == 1
        assert not target.exists()

    def test_backslash_in_name_deletes_only_named_file(self, uploads: Path) -> None:
        selected = uploads / "a\\b.jpg"
        selected.write_bytes(b"selected")
        (uploads / "a").mkdir()
        neighbour = uploads / "a" / "b.jpg"
        neighbour.write_bytes(b"neighbour")

        result = delete_batch([str(selected)], uploads)

        assert result.deleted == 1
        assert not selected.exists()
        assert neighbour.exists()

    def test_root_with_trailing_slash(self, uploads: Path) -> None:
        target = uploads / "2024" / "01" / "stray.png"
        result = delete_batch([str(target)], f"{uploads}/")
        assert result.deleted == 1

    def test_retry_counts_already_deleted_as_failed(self, uploads: Path) -> None:
        paths = [str(uploads / "2024" / "01" / "stray.png")]
        first = delete_batch(paths, uploads)
        second = delete_batch(paths, uploads)

        assert (first.deleted, first.failed) == (1, 0)
        assert (second.deleted, second.failed) == (0, 1)

    def test_unlink_error_counts_failed(self, uploads: Path) -> None:
        paths = [
            str(uploads / "2024" / "01" / "stray.png"),
            str(uploads / "2024" / "02" / "report.pdf"),
        ]

        with patch.object(Path, "unlink", side_effect=PermissionError("Permission denied")):
            result = delete_batch(paths, uploads)

        assert result.deleted == 0
        assert result.failed == 2
        assert "Permission denied" in (result.results[0].error or "")

    def test_symlinked_root_accepts_resolved_paths(self, tmp_path: Path, uploads: Path) -> None:
        link = tmp_path / "uploads-link"
        link.symlink_to(uploads, target_is_directory=True)
        target = uploads.resolve() / "2024" / "01" / "stray.png"

        result = delete_batch([str(target)], link)

        assert result.deleted == 1

    @pytest.mark.parametrize("count", [0, 1, 7])
    def test_counts_add_up(self, uploads: Path, tmp_path: Path, count: int) -> None:
        paths = [str(uploads / f"gone-{i}.jpg") for i in range(count)] + [str(tmp_path / "x.jpg")]
        result = delete_batch(paths, uploads)
        assert result.deleted + result.failed == len(paths)


class TestDryRun:
    """Tests for dry-run mode."""

    def test_dry_run_keeps_files(self, uploads: Path) -> None:
        target = uploads / "2024" / "01" / "stray.png"

        result = BatchDeleter(dry_run=True).delete_batch([str(target)], uploads)

        assert result.deleted == 1
        assert result.results[0].dry_run is True
        assert target.exists()

    def test_dry_run_still_checks(self, tmp_path: Path, uploads: Path) -> None:
        outside = tmp_path / "keep.jpg"
        outside.write_bytes(b"x")

        result = BatchDeleter(dry_run=True).delete_batch([str(outside)], uploads)

        assert result.failed == 1
        assert result.results[0].dry_run is False

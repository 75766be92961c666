"""Unit tests for OrphanScanner."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from uploadsweep.sweep.registry import RegistryRecord, RegistryUnavailableError
from uploadsweep.sweep.scanner import OrphanScanner, scan
from uploadsweep.sweep.sources import JsonRegistrySource
from uploadsweep.sweep.walker import MediaFileWalker


def _names(paths: tuple[str, ...]) -> list[str]:
    return [Path(p).name for p in paths]


class TestScan:
    """Tests for scan orchestration."""

    def test_registered_and_stray(self, tmp_path: Path) -> None:
        """One registered photo and one unregistered image: only the stray is orphaned."""
        root = tmp_path / "uploads"
        (root / "2024" / "01").mkdir(parents=True)
        (root / "2024" / "01" / "photo.jpg").write_bytes(b"x")
        (root / "2024" / "01" / "stray.png").write_bytes(b"x")

        result = scan(root, [RegistryRecord(relative_path="2024/01/photo.jpg")])

        assert len(result.all_files) == 2
        assert _names(result.orphan_files) == ["stray.png"]

    def test_variants_not_orphaned(self, uploads: Path, registry_json: Path) -> None:
        result = OrphanScanner().scan(uploads, JsonRegistrySource(registry_json))

        assert sorted(_names(result.orphan_files)) == ["report.pdf", "stray.png"]
        assert result.total_count == 4

    def test_orphans_subset_in_walk_order(self, uploads: Path) -> None:
        result = scan(uploads, [RegistryRecord(relative_path="2024/01/stray.png")])

        assert set(result.orphan_files) <= set(result.all_files)
        positions = [result.all_files.index(p) for p in result.orphan_files]
        assert positions == sorted(positions)

    def test_empty_registry_everything_orphaned(self, uploads: Path) -> None:
        result = scan(uploads, [])
        assert result.orphan_files == result.all_files

    def test_idempotent(self, uploads: Path, registry_json: Path) -> None:
        source = JsonRegistrySource(registry_json)
        first = scan(uploads, source)
        second = scan(uploads, source)

        assert first.all_files == second.all_files
        assert first.orphan_files == second.orphan_files

    def test_root_is_resolved(self, uploads: Path) -> None:
        result = scan(uploads / "2024" / ".." / "2024", [])
        assert result.root == str((uploads / "2024").resolve())

    def test_missing_root_empty_result(self, tmp_path: Path) -> None:
        result = scan(tmp_path / "missing", [RegistryRecord(relative_path="a.jpg")])
        assert result.all_files == ()
        assert result.orphan_files == ()

    def test_source_queried_every_scan(self, uploads: Path) -> None:
        source = MagicMock()
        source.load_records.return_value = []

        scanner = OrphanScanner()
        scanner.scan(uploads, source)
        scanner.scan(uploads, source)

        assert source.load_records.call_count == 2

    def test_registry_unavailable_propagates(self, uploads: Path) -> None:
        source = MagicMock()
        source.load_records.side_effect = RegistryUnavailableError("down")
        walker = MagicMock(spec=MediaFileWalker)

        with pytest.raises(RegistryUnavailableError):
            OrphanScanner(walker=walker).scan(uploads, source)

        walker.walk.assert_not_called()

    def test_uses_injected_walker(self, tmp_path: Path) -> None:
        root = str(tmp_path.resolve())
        walker = MagicMock(spec=MediaFileWalker)
        walker.walk.return_value = [f"{root}/a.jpg", f"{root}/b.jpg"]

        result = OrphanScanner(walker=walker).scan(tmp_path, [RegistryRecord(relative_path="a.jpg")])

        walker.walk.assert_called_once_with(root)
        assert result.orphan_files == (f"{root}/b.jpg",)

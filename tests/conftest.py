"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
from pathlib import Path

import pytest


@pytest.fixture
def uploads(tmp_path: Path) -> Path:
    """Uploads tree with one registered image, its thumbnail and strays.

    Layout::

        uploads/
            2024/01/photo.jpg             registered
            2024/01/photo-150x150.jpg     size variant of photo.jpg
            2024/01/stray.png             orphan
            2024/02/report.pdf            orphan
            2024/02/notes.md              unsupported extension
            cache.tmp                     unsupported extension
    """
    root = tmp_path / "uploads"
    (root / "2024" / "01").mkdir(parents=True)
    (root / "2024" / "02").mkdir(parents=True)
    (root / "2024" / "01" / "photo.jpg").write_bytes(b"jpeg")
    (root / "2024" / "01" / "photo-150x150.jpg").write_bytes(b"thumb")
    (root / "2024" / "01" / "stray.png").write_bytes(b"png")
    (root / "2024" / "02" / "report.pdf").write_bytes(b"pdf")
    (root / "2024" / "02" / "notes.md").write_text("notes")
    (root / "cache.tmp").write_text("tmp")
    return root


@pytest.fixture
def registry_entries() -> list[dict[str, object]]:
    """Registry entries matching the uploads fixture."""
    return [
        {
            "relative_path": "2024/01/photo.jpg",
            "metadata": {
                "file": "2024/01/photo.jpg",
                "sizes": {"thumbnail": {"file": "photo-150x150.jpg"}},
            },
        },
    ]


@pytest.fixture
def registry_json(tmp_path: Path, registry_entries: list[dict[str, object]]) -> Path:
    """Registry JSON export file matching the uploads fixture."""
    path = tmp_path / "registry.json"
    path.write_text(json.dumps(registry_entries))
    return path

"""Domain models for orphan scanning and batch deletion.

This module defines the immutable result types produced by a scan
and by batch deletion, plus the media category enumeration used to
group supported file extensions.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class MediaCategory(str, Enum):
    """Category of a supported media file.

    Attributes:
        IMAGE: Raster and vector images.
        DOCUMENT: Office documents, PDFs and plain text.
        AUDIO: Audio files.
        VIDEO: Video files.
        ARCHIVE: Compressed archives.
    """

    IMAGE = "image"
    DOCUMENT = "document"
    AUDIO = "audio"
    VIDEO = "video"
    ARCHIVE = "archive"


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Outcome of reconciling an uploads tree against the registry.

    Attributes:
        root: Absolute root directory that was scanned.
        all_files: Every supported file found, in walk order.
        orphan_files: Files absent from the registry, in walk order.
            Always a subset of all_files.
        scanned_at: ISO 8601 timestamp of the scan.
    """

    root: str
    all_files: tuple[str, ...]
    orphan_files: tuple[str, ...]
    scanned_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @property
    def orphan_count(self) -> int:
        """Number of orphaned files."""
        return len(self.orphan_files)

    @property
    def total_count(self) -> int:
        """Number of scanned files."""
        return len(self.all_files)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "root": self.root,
            "scanned_at": self.scanned_at,
            "all_files": list(self.all_files),
            "orphan_files": list(self.orphan_files),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanResult":
        """Rebuild a ScanResult from its exported dictionary form.

        Raises:
            ValueError: If required keys are missing or have the wrong type.
        """
        try:
            root = data["root"]
            all_files = data["all_files"]
            orphan_files = data["orphan_files"]
        except (KeyError, TypeError) as e:
            msg = f"Invalid scan export: missing {e}"
            raise ValueError(msg) from e

        if not isinstance(root, str):
            msg = "Invalid scan export: 'root' must be a string"
            raise ValueError(msg)
        for name, value in (("all_files", all_files), ("orphan_files", orphan_files)):
            if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                msg = f"Invalid scan export: '{name}' must be a list of strings"
                raise ValueError(msg)

        scanned_at = data.get("scanned_at")
        if isinstance(scanned_at, str):
            return cls(
                root=root,
                all_files=tuple(all_files),
                orphan_files=tuple(orphan_files),
                scanned_at=scanned_at,
            )
        return cls(root=root, all_files=tuple(all_files), orphan_files=tuple(orphan_files))


@dataclass(frozen=True, slots=True)
class FileDeletionResult:
    """Result of a single file deletion attempt.

    Attributes:
        path: Path as supplied by the caller.
        success: Whether the file was deleted (or would be, in dry-run).
        error: Error message if the deletion failed, None otherwise.
        dry_run: Whether this was a dry-run (no actual deletion).
    """

    path: str
    success: bool
    error: str | None = None
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Deleted/failed counts for one or more deletion chunks.

    Attributes:
        deleted: Number of files deleted.
        failed: Number of files that could not be deleted.
        results: Per-file results, in input order.
    """

    deleted: int = 0
    failed: int = 0
    results: tuple[FileDeletionResult, ...] = ()

    @property
    def total(self) -> int:
        """Number of paths accounted for."""
        return self.deleted + self.failed

    @classmethod
    def from_results(cls, results: list[FileDeletionResult]) -> "BatchResult":
        """Build a BatchResult by counting per-file results."""
        deleted = sum(1 for r in results if r.success)
        return cls(deleted=deleted, failed=len(results) - deleted, results=tuple(results))


@dataclass(frozen=True, slots=True)
class BatchProgress:
    """Progress snapshot emitted after each processed chunk.

    Attributes:
        chunk_index: Zero-based index of the chunk just processed.
        chunk_count: Total number of chunks.
        deleted: Accumulated deleted count.
        failed: Accumulated failed count.
        total: Total number of paths across all chunks.
    """

    chunk_index: int
    chunk_count: int
    deleted: int
    failed: int
    total: int

    @property
    def processed(self) -> int:
        """Number of paths processed so far."""
        return self.deleted + self.failed

    @property
    def remaining(self) -> int:
        """Number of paths not yet processed."""
        return self.total - self.processed

    @property
    def percent(self) -> int:
        """Completion percentage rounded to the nearest integer."""
        if self.total == 0:
            return 100
        return round(self.processed / self.total * 100)

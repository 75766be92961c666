"""Orphan media scanning and batch deletion.

This module provides the media file walker, the registry identity
index, orphan matching, scan orchestration, and chunked deletion of
orphaned files under an uploads root.
"""

from uploadsweep.sweep.batches import DEFAULT_BATCH_SIZE, chunked, run_batches, summary_message
from uploadsweep.sweep.deleter import BatchDeleter, delete_batch
from uploadsweep.sweep.extensions import SUPPORTED_EXTENSIONS, category_for, is_supported
from uploadsweep.sweep.matcher import is_known, is_orphan
from uploadsweep.sweep.models import (
    BatchProgress,
    BatchResult,
    FileDeletionResult,
    MediaCategory,
    ScanResult,
)
from uploadsweep.sweep.registry import (
    RegistryError,
    RegistryIndex,
    RegistryRecord,
    RegistryUnavailableError,
    build_index,
)
from uploadsweep.sweep.scanner import OrphanScanner, scan
from uploadsweep.sweep.sources import (
    JsonRegistrySource,
    RegistrySource,
    SqliteRegistrySource,
    open_registry_source,
)
from uploadsweep.sweep.walker import MediaFileWalker

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "SUPPORTED_EXTENSIONS",
    "BatchDeleter",
    "BatchProgress",
    "BatchResult",
    "FileDeletionResult",
    "JsonRegistrySource",
    "MediaCategory",
    "MediaFileWalker",
    "OrphanScanner",
    "RegistryError",
    "RegistryIndex",
    "RegistryRecord",
    "RegistrySource",
    "RegistryUnavailableError",
    "ScanResult",
    "SqliteRegistrySource",
    "build_index",
    "category_for",
    "chunked",
    "delete_batch",
    "is_known",
    "is_orphan",
    "is_supported",
    "open_registry_source",
    "run_batches",
    "scan",
    "summary_message",
]

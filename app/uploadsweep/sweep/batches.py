"""Chunked batch deletion driver.

Splits a selection of orphan paths into fixed-size chunks and drives
one delete call per chunk, sequentially, accumulating totals. A chunk
whose call fails outright counts every path in it as failed and the
loop moves on to the next chunk. Completed chunks are never rolled
back.
"""

import logging
import os
import time
from collections.abc import Callable, Iterator, Sequence

from uploadsweep.sweep.deleter import delete_batch
from uploadsweep.sweep.models import BatchProgress, BatchResult, FileDeletionResult

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
DEFAULT_BATCH_DELAY = 0.5
DEFAULT_ERROR_DELAY = 1.0

DeleteFn = Callable[[Sequence[str], str | os.PathLike[str]], BatchResult]
ProgressFn = Callable[[BatchProgress], None]


def chunked(paths: Sequence[str], size: int = DEFAULT_BATCH_SIZE) -> Iterator[list[str]]:
    """Yield consecutive chunks of at most size paths.

    Raises:
        ValueError: If size is less than 1.
    """
    if size < 1:
        msg = f"Batch size must be at least 1, got {size}"
        raise ValueError(msg)
    for start in range(0, len(paths), size):
        yield list(paths[start : start + size])


def run_batches(
    paths: Sequence[str],
    root: str | os.PathLike[str],
    *,
    delete: DeleteFn = delete_batch,
    batch_size: int = DEFAULT_BATCH_SIZE,
    delay: float = DEFAULT_BATCH_DELAY,
    error_delay: float = DEFAULT_ERROR_DELAY,
    on_progress: ProgressFn | None = None,
    sleep: Callable[[float], None] | None = None,
) -> BatchResult:
    """Delete paths chunk by chunk and return the accumulated result.

    Args:
        paths: Full selection of paths to delete.
        root: Uploads root passed to every delete call.
        delete: Single-chunk delete operation.
        batch_size: Maximum paths per chunk.
        delay: Pause between chunks after a successful call.
        error_delay: Pause between chunks after a failed call.
        on_progress: Called with a BatchProgress after every chunk.
        sleep: Sleep function, defaults to time.sleep.

    Returns:
        Accumulated BatchResult where total == len(paths).

    Raises:
        ValueError: If batch_size is less than 1.
    """
    chunks = list(chunked(paths, batch_size))
    total = len(paths)
    deleted = 0
    failed = 0
    results: list[FileDeletionResult] = []

    for chunk_index, chunk in enumerate(chunks):
        failed_call = False
        try:
            chunk_result = delete(chunk, root)
        except Exception as e:  # noqa: BLE001
            logger.error("Batch %d of %d failed: %s", chunk_index + 1, len(chunks), e)
            failed_call = True
            chunk_result = BatchResult(
                failed=len(chunk),
                results=tuple(
                    FileDeletionResult(path=p, success=False, error=f"Batch failed: {e}") for p in chunk
                ),
            )

        deleted += chunk_result.deleted
        failed += chunk_result.failed
        results.extend(chunk_result.results)

        if on_progress is not None:
            on_progress(
                BatchProgress(
                    chunk_index=chunk_index,
                    chunk_count=len(chunks),
                    deleted=deleted,
                    failed=failed,
                    total=total,
                )
            )

        if chunk_index < len(chunks) - 1:
            pause = error_delay if failed_call else delay
            if pause > 0:
                (sleep or time.sleep)(pause)

    return BatchResult(deleted=deleted, failed=failed, results=tuple(results))


def summary_message(result: BatchResult) -> str:
    """Compose the user-facing summary for an accumulated result.

    Args:
        result: Accumulated batch result.

    Returns:
        Message such as "3 orphan files deleted. 1 file could not be deleted."
    """
    parts: list[str] = []
    if result.deleted > 0:
        noun = "file" if result.deleted == 1 else "files"
        parts.append(f"{result.deleted} orphan {noun} deleted.")
    if result.failed > 0:
        noun = "file" if result.failed == 1 else "files"
        parts.append(f"{result.failed} {noun} could not be deleted.")
    if not parts:
        return "No action taken."
    return " ".join(parts)

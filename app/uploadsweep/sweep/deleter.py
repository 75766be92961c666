"""Single-chunk orphan file deletion.

Deletes a caller-selected list of paths under a containment guard.
Every path is handled independently: a rejected or failed path is
counted and the rest of the chunk carries on.
"""

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from uploadsweep.sweep.models import BatchResult, FileDeletionResult
from uploadsweep.sweep.paths import is_within_root, normalize_slashes

logger = logging.getLogger(__name__)


class BatchDeleter:
    """Deletes one chunk of orphan files.

    A path is only deleted when its normalized form is lexically inside
    the root and the path exactly as given refers to an existing
    regular file. Calls are synchronous and safe to retry: files
    already gone are counted as failed, nothing else happens.

    Attributes:
        _dry_run: If True, run all checks but do not delete anything.
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the BatchDeleter.

        Args:
            dry_run: If True, report what would be deleted without deleting.
        """
        self._dry_run = dry_run

    def delete_batch(self, paths: Sequence[str], root: str | os.PathLike[str]) -> BatchResult:
        """Delete a chunk of files and return its counts.

        Args:
            paths: Absolute paths to delete.
            root: Uploads root every path must be inside.

        Returns:
            BatchResult where deleted + failed == len(paths).
        """
        roots = _candidate_roots(root)
        results = [self._delete_single(path, roots) for path in paths]
        batch = BatchResult.from_results(results)

        logger.info("Batch of %d: %d deleted, %d failed", len(paths), batch.deleted, batch.failed)
        return batch

    def _delete_single(self, path: str, roots: tuple[str, ...]) -> FileDeletionResult:
        """Check and delete a single file.

        Args:
            path: Path as supplied by the caller.
            roots: Accepted canonical forms of the root directory.

        Returns:
            FileDeletionResult indicating success or failure.
        """
        normalized = normalize_slashes(path)

        if not any(is_within_root(normalized, r) for r in roots):
            logger.warning("Refusing to delete path outside root: %s", path)
            return FileDeletionResult(
                path=path,
                success=False,
                error=f"Path is outside the uploads root: {path}",
            )

        target = Path(path)
        try:
            is_file = target.is_file()
        except OSError as e:
            return FileDeletionResult(path=path, success=False, error=str(e))

        if not is_file:
            logger.debug("Not an existing regular file: %s", path)
            return FileDeletionResult(
                path=path,
                success=False,
                error=f"File does not exist: {path}",
            )

        if self._dry_run:
            logger.info("Dry-run: would delete %s", path)
            return FileDeletionResult(path=path, success=True, dry_run=True)

        try:
            target.unlink()
        except OSError as e:
            logger.warning("Failed to delete %s: %s", path, e)
            return FileDeletionResult(path=path, success=False, error=str(e))

        logger.debug("Deleted %s", path)
        return FileDeletionResult(path=path, success=True)


def _candidate_roots(root: str | os.PathLike[str]) -> tuple[str, ...]:
    """Return the root as given plus its symlink-resolved form.

    Scan results carry resolved paths, so both spellings of the root
    are accepted for the containment check.
    """
    given = normalize_slashes(os.fspath(root))
    resolved = normalize_slashes(os.path.realpath(root))
    if given == resolved:
        return (given,)
    return (given, resolved)


def delete_batch(paths: Sequence[str], root: str | os.PathLike[str]) -> BatchResult:
    """Delete one chunk of files using a default BatchDeleter."""
    return BatchDeleter().delete_batch(paths, root)

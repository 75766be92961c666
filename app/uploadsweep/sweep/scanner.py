"""Orphan scan orchestration.

Combines the media walker, the registry index and the matcher into
a single scan that returns every supported file together with the
orphaned subset.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from uploadsweep.sweep.matcher import is_known
from uploadsweep.sweep.models import ScanResult
from uploadsweep.sweep.registry import RegistryRecord, build_index
from uploadsweep.sweep.sources import RegistrySource
from uploadsweep.sweep.walker import MediaFileWalker

logger = logging.getLogger(__name__)


class OrphanScanner:
    """Finds files under an uploads root that the registry does not know.

    The scanner holds no state between scans: the registry is queried
    and indexed fresh on every call.

    Args:
        walker: Walker used to enumerate candidate files. Defaults to
            a new MediaFileWalker.
    """

    def __init__(self, walker: MediaFileWalker | None = None) -> None:
        self._walker = walker or MediaFileWalker()

    def scan(
        self,
        root: str | os.PathLike[str],
        records: Iterable[RegistryRecord] | RegistrySource,
    ) -> ScanResult:
        """Scan root and classify each supported file.

        Args:
            root: Uploads root directory.
            records: Registry records, or a source to load them from.

        Returns:
            ScanResult with all files and the orphan subset, both in
            walk order.

        Raises:
            RegistryUnavailableError: If the registry source cannot be
                queried. No partial result is returned.
        """
        # Load the registry first so an unavailable store fails fast.
        if hasattr(records, "load_records"):
            records = records.load_records()
        index = build_index(records)

        root_path = str(Path(root).resolve())
        all_files = self._walker.walk(root_path)
        orphan_files = [path for path in all_files if not is_known(path, root_path, index)]

        logger.info(
            "Scanned %s: %d files, %d orphans",
            root_path,
            len(all_files),
            len(orphan_files),
        )
        return ScanResult(
            root=root_path,
            all_files=tuple(all_files),
            orphan_files=tuple(orphan_files),
        )


def scan(
    root: str | os.PathLike[str],
    records: Iterable[RegistryRecord] | RegistrySource,
) -> ScanResult:
    """Scan root for orphans using a default OrphanScanner."""
    return OrphanScanner().scan(root, records)

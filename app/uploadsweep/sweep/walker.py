"""Recursive media file enumeration.

Walks an uploads root and collects every regular file whose
extension is in the supported allow-list. Unreadable subtrees are
skipped so that a single bad directory never fails the whole walk.
"""

import logging
import os
from pathlib import Path

from uploadsweep.sweep.extensions import is_supported

logger = logging.getLogger(__name__)


class MediaFileWalker:
    """Enumerates candidate media files under a root directory.

    Traversal is pre-order and entries are sorted by name inside each
    directory, so results are deterministic for an unchanged tree.
    Symlinked directories are not followed.
    """

    def walk(self, root: str | os.PathLike[str]) -> list[str]:
        """Collect all supported files under root.

        Args:
            root: Directory to scan.

        Returns:
            Absolute paths of supported files, in walk order. Empty if
            root does not exist or cannot be read.
        """
        try:
            root_path = Path(root).resolve()
        except (OSError, RuntimeError):
            logger.warning("Cannot resolve scan root: %s", root)
            return []

        if not root_path.is_dir():
            logger.warning("Scan root is not a readable directory: %s", root_path)
            return []

        files: list[str] = []
        self._walk_directory(root_path, files)
        logger.debug("Walked %s: %d supported files", root_path, len(files))
        return files

    def _walk_directory(self, directory: Path, files: list[str]) -> None:
        """Append supported files of one directory, recursing into children.

        Args:
            directory: Directory to read.
            files: Accumulator for matching file paths.
        """
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            return

        for entry in entries:
            try:
                if entry.is_symlink() and entry.is_dir():
                    continue
                if entry.is_dir():
                    self._walk_directory(entry, files)
                elif entry.is_file() and is_supported(entry.name):
                    files.append(str(entry))
            except OSError as e:
                logger.debug("Cannot stat %s: %s", entry, e)

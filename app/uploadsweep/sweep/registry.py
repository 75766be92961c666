"""Registry records and the known-file identity index.

A registry record describes one attachment known to the authoritative
store: its primary relative path plus metadata listing derived files
(resized copies and the pre-scaling original). The index flattens all
records into a set of identity strings for O(1) membership tests.

Two identity classes share one set: full relative paths and bare
filenames. A bare filename match makes a file known even if it lives
in another directory, which catches registry entries whose stored
name differs from the on-disk layout at the cost of masking some
orphans that happen to share a name with a registered file.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from uploadsweep.sweep.paths import basename, dirname, normalize_slashes

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Base exception for registry errors."""


class RegistryUnavailableError(RegistryError):
    """Raised when the registry store cannot be queried at all."""


@dataclass(frozen=True, slots=True)
class RegistryRecord:
    """One attachment known to the registry.

    Attributes:
        relative_path: Primary file path relative to the uploads root,
            or None if the store only has metadata for this attachment.
        metadata: Attachment metadata as stored. Expected to be a mapping
            with optional ``file``, ``sizes`` and ``original_image`` keys;
            anything else is treated as malformed and contributes no
            variants.
    """

    relative_path: str | None = None
    metadata: Any = None

    def variant_directory(self) -> str:
        """Directory that derived files live in, relative to the root.

        Uses ``metadata["file"]`` when present, falling back to the
        directory of the primary relative path.
        """
        meta_file = self.metadata.get("file") if isinstance(self.metadata, Mapping) else None
        if isinstance(meta_file, str) and meta_file:
            return dirname(meta_file)
        if self.relative_path:
            return dirname(self.relative_path)
        return ""

    def variant_filenames(self) -> list[str]:
        """Filenames of derived files declared in the metadata.

        Malformed parts of the metadata are skipped individually.

        Returns:
            Bare filenames of size variants followed by the original
            image, if any.
        """
        meta = self.metadata
        if meta is None:
            return []
        if not isinstance(meta, Mapping):
            logger.debug("Skipping non-mapping metadata for %s", self.relative_path)
            return []

        names: list[str] = []

        sizes = meta.get("sizes")
        if isinstance(sizes, Mapping):
            for size_name, size_data in sizes.items():
                if not isinstance(size_data, Mapping):
                    logger.debug("Skipping malformed size %r for %s", size_name, self.relative_path)
                    continue
                size_file = size_data.get("file")
                if isinstance(size_file, str) and size_file:
                    names.append(size_file)
        elif sizes:
            logger.debug("Skipping malformed sizes for %s", self.relative_path)

        original = meta.get("original_image")
        if isinstance(original, str) and original:
            names.append(original)

        return names


class RegistryIndex:
    """Set of identity strings for files known to the registry.

    Identities are root-relative paths and bare filenames. Inserting
    the same identity twice is a no-op. The index is built once per
    scan and only read afterwards.
    """

    __slots__ = ("_identities",)

    def __init__(self, identities: Iterable[str] = ()) -> None:
        self._identities: set[str] = set()
        for identity in identities:
            self.add(identity)

    def add(self, identity: str) -> None:
        """Insert an identity, ignoring empty strings."""
        identity = normalize_slashes(identity).lstrip("/")
        if identity:
            self._identities.add(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self._identities

    def __len__(self) -> int:
        return len(self._identities)

    def __iter__(self) -> Iterator[str]:
        return iter(self._identities)

    def __repr__(self) -> str:
        return f"RegistryIndex({len(self._identities)} identities)"


def build_index(records: Iterable[RegistryRecord]) -> RegistryIndex:
    """Build the identity index from registry records.

    For each record the primary relative path and its bare filename are
    inserted. Each variant filename is inserted both joined to the
    variant directory and on its own.

    Args:
        records: Registry records, typically from a RegistrySource.

    Returns:
        Populated RegistryIndex.
    """
    index = RegistryIndex()
    record_count = 0

    for record in records:
        record_count += 1

        if record.relative_path:
            index.add(record.relative_path)
            index.add(basename(record.relative_path))

        variant_dir = record.variant_directory()
        for filename in record.variant_filenames():
            index.add(f"{variant_dir}/{filename}" if variant_dir else filename)
            index.add(filename)

    logger.debug("Built registry index: %d records, %d identities", record_count, len(index))
    return index

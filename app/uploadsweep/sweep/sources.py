"""Registry record sources.

A registry source queries the authoritative store and returns the
full list of registry records. Sources are re-queried on every scan
and never cache results, so a scan always reflects the current store.

Two sources are provided:
- JsonRegistrySource: a JSON array exported from the store.
- SqliteRegistrySource: a WordPress-style ``postmeta`` table.

Any failure to reach the store raises RegistryUnavailableError.
Per-record problems never do: they produce malformed records that
contribute no variants.
"""

import json
import logging
import re
import sqlite3
from pathlib import Path
from typing import Any, Literal, Protocol

import phpserialize

from uploadsweep.sweep.registry import RegistryRecord, RegistryUnavailableError

logger = logging.getLogger(__name__)

RegistryKind = Literal["json", "sqlite"]

# Meta keys used by WordPress for attachment files and metadata
ATTACHED_FILE_KEY = "_wp_attached_file"
ATTACHMENT_METADATA_KEY = "_wp_attachment_metadata"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class RegistrySource(Protocol):
    """Anything that can produce the current list of registry records."""

    def load_records(self) -> list[RegistryRecord]:
        """Query the store and return all registry records.

        Raises:
            RegistryUnavailableError: If the store cannot be queried.
        """
        ...


class JsonRegistrySource:
    """Reads registry records from a JSON export.

    The file must contain a JSON array of objects with optional
    ``relative_path`` (string) and ``metadata`` keys. Metadata is a JSON
    object, or a string holding PHP-serialized or JSON-encoded metadata
    as copied from the postmeta table.

    Args:
        path: Path to the JSON file.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    def load_records(self) -> list[RegistryRecord]:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise RegistryUnavailableError(f"Registry file not found: {self._path}") from e
        except json.JSONDecodeError as e:
            raise RegistryUnavailableError(f"Invalid registry JSON in {self._path}: {e}") from e
        except OSError as e:
            raise RegistryUnavailableError(f"Failed to read registry {self._path}: {e}") from e

        if not isinstance(data, list):
            msg = f"Registry JSON must be an array of records: {self._path}"
            raise RegistryUnavailableError(msg)

        records: list[RegistryRecord] = []
        for position, item in enumerate(data):
            if not isinstance(item, dict):
                logger.debug("Skipping non-object registry entry at position %d", position)
                continue
            relative_path = item.get("relative_path")
            if not isinstance(relative_path, str):
                relative_path = None
            metadata = item.get("metadata")
            if isinstance(metadata, str):
                metadata = _decode_metadata(metadata, position)
            records.append(RegistryRecord(relative_path=relative_path, metadata=metadata))

        logger.debug("Loaded %d registry records from %s", len(records), self._path)
        return records


class SqliteRegistrySource:
    """Reads registry records from a WordPress-style postmeta table.

    Expects a table with ``post_id``, ``meta_key`` and ``meta_value``
    columns. Attached file rows provide primary relative paths and
    attachment metadata rows provide variant metadata, PHP-serialized
    as WordPress writes it or JSON-encoded. Rows sharing a post_id are
    combined into one record.

    Args:
        path: Path to the SQLite database.
        table: Name of the postmeta table.
    """

    def __init__(self, path: Path, table: str = "postmeta") -> None:
        if not _IDENTIFIER.match(table):
            msg = f"Invalid table name: {table!r}"
            raise ValueError(msg)
        self._path = path
        self._table = table

    def load_records(self) -> list[RegistryRecord]:
        if not self._path.is_file():
            raise RegistryUnavailableError(f"Registry database not found: {self._path}")

        query = (
            f"SELECT post_id, meta_key, meta_value FROM {self._table} "  # nosec: B608
            "WHERE meta_key IN (?, ?) ORDER BY post_id"
        )
        try:
            conn = sqlite3.connect(f"{self._path.resolve().as_uri()}?mode=ro", uri=True)
            try:
                rows = conn.execute(query, (ATTACHED_FILE_KEY, ATTACHMENT_METADATA_KEY)).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise RegistryUnavailableError(f"Failed to query registry {self._path}: {e}") from e

        paths: dict[Any, str | None] = {}
        metadata: dict[Any, Any] = {}
        for post_id, meta_key, meta_value in rows:
            if meta_key == ATTACHED_FILE_KEY:
                paths[post_id] = meta_value if isinstance(meta_value, str) and meta_value else None
            else:
                metadata[post_id] = _decode_metadata(meta_value, post_id)

        records = [
            RegistryRecord(relative_path=paths.get(post_id), metadata=metadata.get(post_id))
            for post_id in dict.fromkeys([*paths, *metadata])
        ]
        logger.debug("Loaded %d registry records from %s", len(records), self._path)
        return records


def _decode_metadata(value: object, record_id: object) -> Any:
    """Decode an attachment metadata value.

    WordPress stores attachment metadata PHP-serialized; JSON exports
    carry it as JSON. Values in neither form are kept as-is and end up
    as malformed metadata on the record, so only that record's variants
    are lost.
    """
    if not isinstance(value, str | bytes):
        return value
    try:
        return json.loads(value)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug("Attachment metadata for record %s is not JSON", record_id)

    raw = value.encode("utf-8") if isinstance(value, str) else value
    try:
        return phpserialize.loads(raw, decode_strings=True, array_hook=dict)
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning("Attachment metadata for record %s cannot be decoded: %s", record_id, e)
        return value


def open_registry_source(
    kind: RegistryKind,
    path: Path,
    table: str = "postmeta",
) -> RegistrySource:
    """Create a registry source for the given kind.

    Args:
        kind: Store type ("json" or "sqlite").
        path: Path to the store file.
        table: Table name for SQLite stores.

    Returns:
        Configured RegistrySource.

    Raises:
        ValueError: If kind is unknown or the table name is invalid.
    """
    if kind == "json":
        return JsonRegistrySource(path)
    if kind == "sqlite":
        return SqliteRegistrySource(path, table=table)
    msg = f"Unknown registry kind: {kind}"
    raise ValueError(msg)

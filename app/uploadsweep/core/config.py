"""Configuration model and I/O.

Settings for the uploads root, the registry store and the batch
deletion loop. Configuration is stored in
~/.config/uploadsweep/config.toml; command-line options override it.

Example:
    root = "/var/www/html/wp-content/uploads"
    batch_size = 100

    [registry]
    kind = "sqlite"
    path = "/var/backups/wordpress.db"
    table = "wp_postmeta"
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from uploadsweep.core.paths import get_config_path
from uploadsweep.sweep.batches import DEFAULT_BATCH_DELAY, DEFAULT_BATCH_SIZE, DEFAULT_ERROR_DELAY
from uploadsweep.sweep.sources import RegistryKind, RegistrySource, open_registry_source

logger = logging.getLogger(__name__)


class RegistryConfig(BaseModel):
    """Location of the authoritative registry store.

    Attributes:
        kind: Store type ("json" export or "sqlite" postmeta table).
        path: Path to the store file.
        table: Postmeta table name for SQLite stores.
    """

    model_config = ConfigDict(extra="forbid")

    kind: Annotated[RegistryKind, Field(description="Registry store type")] = "json"
    path: Annotated[Path, Field(description="Path to the registry store")]
    table: Annotated[
        str,
        Field(pattern=r"^[A-Za-z_][A-Za-z0-9_]*$", description="Postmeta table name"),
    ] = "postmeta"

    def open_source(self) -> RegistrySource:
        """Create the registry source described by this config."""
        return open_registry_source(self.kind, self.path.expanduser(), table=self.table)


class SweepConfig(BaseModel):
    """Top-level uploadsweep configuration.

    Attributes:
        root: Uploads root directory to scan.
        registry: Registry store settings.
        batch_size: Paths per delete call (1-1000, default 100).
        batch_delay: Seconds to pause between chunks.
        error_delay: Seconds to pause after a failed chunk.
    """

    model_config = ConfigDict(extra="forbid")

    root: Annotated[Path | None, Field(description="Uploads root directory")] = None
    registry: Annotated[RegistryConfig | None, Field(description="Registry store")] = None
    batch_size: Annotated[
        int,
        Field(ge=1, le=1000, description="Paths per delete call (1-1000)"),
    ] = DEFAULT_BATCH_SIZE
    batch_delay: Annotated[
        float,
        Field(ge=0, le=60, description="Pause between chunks in seconds"),
    ] = DEFAULT_BATCH_DELAY
    error_delay: Annotated[
        float,
        Field(ge=0, le=60, description="Pause after a failed chunk in seconds"),
    ] = DEFAULT_ERROR_DELAY


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> SweepConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated SweepConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return SweepConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> SweepConfig:
    """Load configuration, falling back to defaults if no file exists.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return SweepConfig()


def save_config(config: SweepConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The SweepConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: SweepConfig) -> dict[str, object]:
    """Convert SweepConfig to a dictionary for TOML serialization.

    None values are omitted since TOML has no null.

    Args:
        config: The SweepConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    result: dict[str, object] = {}

    if config.root is not None:
        result["root"] = str(config.root)

    result["batch_size"] = config.batch_size
    result["batch_delay"] = config.batch_delay
    result["error_delay"] = config.error_delay

    if config.registry is not None:
        result["registry"] = {
            "kind": config.registry.kind,
            "path": str(config.registry.path),
            "table": config.registry.table,
        }

    return result

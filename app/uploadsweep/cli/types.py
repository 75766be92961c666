"""Shared types and helpers for CLI commands.

Resolves the uploads root and the registry source from command-line
options, falling back to the configuration file.
"""

from enum import Enum
from pathlib import Path

import typer

from uploadsweep.core.config import (
    ConfigError,
    RegistryConfig,
    SweepConfig,
    load_config_or_default,
)
from uploadsweep.sweep.sources import RegistrySource
from uploadsweep.utils.formatting import print_error


class RegistryChoice(str, Enum):
    """Available registry store types for CLI commands."""

    JSON = "json"
    SQLITE = "sqlite"


class OutputFormat(str, Enum):
    """Output format options for scan results."""

    TABLE = "table"
    JSON = "json"


def get_config() -> SweepConfig:
    """Load configuration, exiting with an error if it is invalid."""
    try:
        return load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def resolve_root(root: Path | None, config: SweepConfig) -> Path:
    """Pick the uploads root from the CLI argument or the config.

    Raises:
        typer.Exit: If neither provides a root.
    """
    chosen = root or config.root
    if chosen is None:
        print_error("No uploads root given. Pass ROOT or set 'root' in the config file.")
        raise typer.Exit(code=1)
    return chosen.expanduser()


def resolve_registry(
    registry: Path | None,
    kind: RegistryChoice | None,
    table: str | None,
    config: SweepConfig,
) -> RegistrySource:
    """Build the registry source from CLI options, falling back to the config.

    Raises:
        typer.Exit: If no registry is configured or the options are invalid.
    """
    configured = config.registry

    if registry is None and configured is None:
        print_error("No registry given. Pass --registry or add a [registry] section to the config.")
        raise typer.Exit(code=1)

    path = registry if registry is not None else configured.path  # type: ignore[union-attr]
    if kind is not None:
        kind_value = kind.value
    elif configured is not None:
        kind_value = configured.kind
    else:
        kind_value = "sqlite" if path.suffix in (".db", ".sqlite", ".sqlite3") else "json"
    table_value = table or (configured.table if configured is not None else "postmeta")

    try:
        return RegistryConfig(kind=kind_value, path=path, table=table_value).open_source()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

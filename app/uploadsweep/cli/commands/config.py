"""Configuration commands.

Provides commands to show, locate and create the uploadsweep
configuration file.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer
from rich.markup import escape

from uploadsweep.cli.types import RegistryChoice
from uploadsweep.core.config import (
    ConfigError,
    ConfigNotFoundError,
    RegistryConfig,
    SweepConfig,
    config_to_dict,
    load_config,
    save_config,
)
from uploadsweep.core.paths import get_config_path
from uploadsweep.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and create the configuration file.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    try:
        config = load_config()
    except ConfigNotFoundError:
        print_info(f"No config file at {get_config_path()}; using defaults.")
        config = SweepConfig()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(escape(tomli_w.dumps(config_to_dict(config))), highlight=False)


@app.command()
def path() -> None:
    """Print the configuration file path."""
    console.print(str(get_config_path()), highlight=False)


@app.command()
def init(
    root: Annotated[
        Path,
        typer.Option("--root", help="Uploads root directory."),
    ],
    registry: Annotated[
        Path | None,
        typer.Option("--registry", "-r", help="Registry store file."),
    ] = None,
    registry_kind: Annotated[
        RegistryChoice,
        typer.Option("--registry-kind", "-k", help="Registry store type.", case_sensitive=False),
    ] = RegistryChoice.JSON,
    table: Annotated[
        str,
        typer.Option("--table", help="Postmeta table name for SQLite registries."),
    ] = "postmeta",
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Create a configuration file."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_error(f"Config already exists: {config_path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        registry_config = (
            RegistryConfig(kind=registry_kind.value, path=registry.expanduser().resolve(), table=table)
            if registry is not None
            else None
        )
        config = SweepConfig(root=root.expanduser().resolve(), registry=registry_config)
        saved = save_config(config, config_path)
    except (ValueError, ConfigError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")

"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from uploadsweep import __version__
from uploadsweep.cli.commands import clean, config, scan
from uploadsweep.sweep.extensions import EXTENSIONS_VERSION
from uploadsweep.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="uploadsweep",
    help="Find and remove media files missing from the attachment registry.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"uploadsweep version {__version__} (extension list v{EXTENSIONS_VERSION})")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Log DEBUG and above.
        quiet: Log ERROR and above.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """uploadsweep - find and remove orphaned media files.

    Compares an uploads directory against the attachment registry and
    deletes files the registry does not know about, in batches.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose, quiet)


# Register commands
app.command(name="scan")(scan.scan)
app.command(name="clean")(clean.clean)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()

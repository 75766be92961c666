"""Scan command for finding orphaned media files.

Walks the uploads root, loads the registry and lists every supported
file the registry does not know about.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from uploadsweep.cli.types import (
    OutputFormat,
    RegistryChoice,
    get_config,
    resolve_registry,
    resolve_root,
)
from uploadsweep.sweep.extensions import category_for
from uploadsweep.sweep.models import ScanResult
from uploadsweep.sweep.paths import relative_to_root
from uploadsweep.sweep.registry import RegistryUnavailableError
from uploadsweep.sweep.scanner import OrphanScanner
from uploadsweep.utils.formatting import (
    console,
    create_file_table,
    format_size,
    print_error,
    print_info,
    print_success,
)


def scan(
    root: Annotated[
        Path | None,
        typer.Argument(help="Uploads root directory (default: from config)."),
    ] = None,
    registry: Annotated[
        Path | None,
        typer.Option("--registry", "-r", help="Registry store file (JSON export or SQLite)."),
    ] = None,
    registry_kind: Annotated[
        RegistryChoice | None,
        typer.Option("--registry-kind", "-k", help="Registry store type.", case_sensitive=False),
    ] = None,
    table: Annotated[
        str | None,
        typer.Option("--table", help="Postmeta table name for SQLite registries."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    export_path: Annotated[
        Path | None,
        typer.Option(
            "--export",
            "-e",
            help="Export scan results to a JSON file (usable by 'clean --from-export').",
        ),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-l",
            help="Limit number of displayed results.",
        ),
    ] = None,
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="List every scanned file, not only orphans."),
    ] = False,
) -> None:
    """Scan the uploads root for files missing from the registry."""
    config = get_config()
    root_path = resolve_root(root, config)
    source = resolve_registry(registry, registry_kind, table, config)

    try:
        with console.status("Scanning for orphan files..."):
            result = OrphanScanner().scan(root_path, source)
    except RegistryUnavailableError as e:
        print_error(f"Registry unavailable: {e}")
        raise typer.Exit(code=1) from e

    if export_path is not None:
        _export_results(result, export_path)

    listed = result.all_files if show_all else result.orphan_files
    display = listed[:limit] if limit else listed

    if output_format == OutputFormat.JSON:
        data = result.to_dict()
        if limit:
            data["orphan_files"] = data["orphan_files"][:limit]
            data["all_files"] = data["all_files"][:limit]
        console.print_json(json.dumps(data))
        return

    if not result.orphan_files and not show_all:
        print_success(f"No orphan files found ({result.total_count} files scanned).")
        return

    _print_table(result, display, show_all)

    console.print(
        f"\n[dim]Found {result.orphan_count} orphan files (of {result.total_count} scanned)[/dim]"
    )
    if limit and len(display) < len(listed):
        console.print(f"[dim](showing {len(display)} of {len(listed)}, limited to {limit})[/dim]")


# === Private helper functions ===


def _print_table(result: ScanResult, paths: tuple[str, ...], show_all: bool) -> None:
    """Display files as a Rich table with paths relative to the root."""
    title = "Scanned Files" if show_all else "Orphan Files"
    table = create_file_table(title)
    orphans = set(result.orphan_files) if show_all else set()

    for path in paths:
        relative = escape(relative_to_root(path, result.root))
        if show_all:
            style = "orphan" if path in orphans else "known"
            relative = f"[{style}]{relative}[/{style}]"
        category = category_for(path)
        table.add_row(relative, category.value if category else "-", _file_size(path))

    console.print(table)


def _file_size(path: str) -> str:
    """Return the formatted size of a file, or "Unknown" if it cannot be read."""
    try:
        return format_size(Path(path).stat().st_size)
    except OSError:
        return "Unknown"


def _export_results(result: ScanResult, export_path: Path) -> None:
    """Export the scan result to a JSON file."""
    export_path = export_path.resolve()
    if export_path.is_dir():
        print_error(f"Export path is a directory: {export_path}")
        raise typer.Exit(code=1)

    try:
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(json.dumps(result.to_dict(), indent=2))
        print_info(f"Results exported to {export_path}")
    except OSError as e:
        print_error(f"Failed to export: {e}")
        raise typer.Exit(code=1) from e

"""Clean command for deleting orphaned media files.

Selects orphans from a previous scan export or a fresh scan, asks for
confirmation, and deletes them in chunks with a progress bar.
"""

import fnmatch
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from uploadsweep.cli.types import RegistryChoice, get_config, resolve_registry, resolve_root
from uploadsweep.sweep.batches import run_batches, summary_message
from uploadsweep.sweep.deleter import BatchDeleter
from uploadsweep.sweep.models import BatchProgress, BatchResult, ScanResult
from uploadsweep.sweep.paths import relative_to_root
from uploadsweep.sweep.registry import RegistryUnavailableError
from uploadsweep.sweep.scanner import OrphanScanner
from uploadsweep.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def clean(
    root: Annotated[
        Path | None,
        typer.Argument(help="Uploads root directory (default: from config or export)."),
    ] = None,
    from_export: Annotated[
        Path | None,
        typer.Option("--from-export", help="Use orphans from a 'scan --export' file."),
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
    patterns: Annotated[
        list[str] | None,
        typer.Option(
            "--match",
            "-m",
            help="Only delete orphans whose relative path matches this glob (repeatable).",
        ),
    ] = None,
    batch_size: Annotated[
        int | None,
        typer.Option("--batch-size", "-b", min=1, help="Files per batch (default: 100)."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete orphaned files in batches."""
    config = get_config()

    if from_export is not None:
        result = _load_export(from_export)
        root_path = root.expanduser() if root is not None else Path(result.root)
    else:
        root_path = resolve_root(root, config)
        source = resolve_registry(registry, registry_kind, table, config)
        try:
            with console.status("Scanning for orphan files..."):
                result = OrphanScanner().scan(root_path, source)
        except RegistryUnavailableError as e:
            print_error(f"Registry unavailable: {e}")
            raise typer.Exit(code=1) from e

    selected = _select(result, patterns or [])
    if not selected:
        print_info("No orphan files selected for deletion.")
        return

    size = batch_size or config.batch_size
    chunk_count = -(-len(selected) // size)
    action = "Would delete" if dry_run else "Deleting"
    console.print(
        f"{action} [bold]{len(selected)}[/bold] orphan file(s) under {escape(str(root_path))} "
        f"in {chunk_count} batch(es) of up to {size}."
    )

    if not dry_run and not yes:
        confirmed = typer.confirm(
            "\nDeleted files cannot be restored. Proceed?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    deleter = BatchDeleter(dry_run=dry_run)
    totals = _run_with_progress(
        selected, root_path, deleter, size, config.batch_delay, config.error_delay
    )

    _print_summary(totals, dry_run)

    if totals.failed and not dry_run:
        raise typer.Exit(code=1)


# === Private helper functions ===


def _load_export(path: Path) -> ScanResult:
    """Load a scan result exported by 'scan --export'."""
    try:
        data = json.loads(path.read_text())
        return ScanResult.from_dict(data)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        print_error(f"Cannot load scan export {path}: {e}")
        raise typer.Exit(code=1) from e


def _select(result: ScanResult, patterns: list[str]) -> list[str]:
    """Return orphans matching any glob pattern, or all orphans if none given."""
    if not patterns:
        return list(result.orphan_files)
    return [
        path
        for path in result.orphan_files
        if any(fnmatch.fnmatch(relative_to_root(path, result.root), p) for p in patterns)
    ]


def _run_with_progress(
    paths: list[str],
    root: Path,
    deleter: BatchDeleter,
    batch_size: int,
    delay: float,
    error_delay: float,
) -> BatchResult:
    """Drive the batch loop while rendering a progress bar."""
    with Progress(
        TextColumn("[info]{task.description}[/]"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("[success]{task.fields[deleted]} deleted[/] [error]{task.fields[failed]} failed[/]"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Deleting", total=len(paths), deleted=0, failed=0)

        def on_progress(snapshot: BatchProgress) -> None:
            progress.update(
                task,
                completed=snapshot.processed,
                description=f"Batch {snapshot.chunk_index + 1}/{snapshot.chunk_count}",
                deleted=snapshot.deleted,
                failed=snapshot.failed,
            )

        return run_batches(
            paths,
            root,
            delete=deleter.delete_batch,
            batch_size=batch_size,
            delay=delay,
            error_delay=error_delay,
            on_progress=on_progress,
        )


def _print_summary(totals: BatchResult, dry_run: bool) -> None:
    """Print the final summary and any failed paths."""
    if dry_run:
        print_info(f"Dry-run: {totals.deleted} file(s) would be deleted, {totals.failed} would fail.")
    elif totals.failed:
        print_warning(summary_message(totals))
    elif totals.deleted:
        print_success(summary_message(totals))
    else:
        print_info(summary_message(totals))

    for r in totals.results:
        if not r.success:
            message = escape(r.error or "Unknown error")
            console.print(f"  [error]FAIL[/error] [muted]{message}[/muted]", highlight=False)

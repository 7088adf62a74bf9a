"""CLI commands for snapcatalog."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.logging import RichHandler

from snapcatalog.core.exceptions import SnapcatalogError


if TYPE_CHECKING:
    from snapcatalog import DateRange, MetaCatalog


app = typer.Typer(
    name="snapcatalog",
    help="Find, fetch and prune backup manifests kept in remote storage.",
    no_args_is_help=True,
)

# Window searched when neither --range nor --hours is given
DEFAULT_HOURS = 24.0


@app.callback()
def configure(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log listing and download details.",
    ),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def fail(error: SnapcatalogError) -> typer.Exit:
    """Print a library error with its hint and return the exit to raise."""
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)
    return typer.Exit(1)


def load_catalog_context() -> MetaCatalog:
    """Build the catalog from SNAPCATALOG_* settings for CLI commands.

    Raises:
        typer.Exit: If settings are missing or invalid.
    """
    from snapcatalog import MetaCatalog, load_settings

    try:
        settings = load_settings()
        return MetaCatalog.from_settings(settings)
    except SnapcatalogError as e:
        raise fail(e) from None
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


def resolve_range(range_text: str | None, hours: float | None) -> DateRange:
    """Turn --range/--hours options into a bounded DateRange.

    Raises:
        typer.Exit: If both are given, or the range does not parse.
    """
    from snapcatalog import DateRange, InvalidRangeError

    if range_text and hours is not None:
        typer.echo("Error: --range and --hours are mutually exclusive.", err=True)
        raise typer.Exit(1)

    if not range_text:
        return DateRange.last(hours if hours is not None else DEFAULT_HOURS)

    try:
        date_range = DateRange.parse(range_text)
    except InvalidRangeError as e:
        raise fail(e) from None
    if date_range.end is None:
        typer.echo("Error: --range needs both a start and an end.", err=True)
        raise typer.Exit(1)
    return date_range


RANGE_OPTION = typer.Option(
    None,
    "--range",
    "-r",
    help="UTC window as YYYYMMDDHHMM,YYYYMMDDHHMM.",
)
HOURS_OPTION = typer.Option(
    None,
    "--hours",
    help=f"Search the last N hours (default {DEFAULT_HOURS:g}).",
)


@app.command()
def prefix(
    range_text: str | None = typer.Option(
        None,
        "--range",
        "-r",
        help="UTC window (YYYYMMDDHHMM[,YYYYMMDDHHMM]) to narrow the prefix.",
    ),
) -> None:
    """Print the remote prefix manifests are listed under."""
    from snapcatalog import DateRange, InvalidRangeError

    cat = load_catalog_context()
    try:
        date_range = DateRange.parse(range_text) if range_text else None
    except InvalidRangeError as e:
        raise fail(e) from None
    typer.echo(cat.get_search_prefix(date_range))


@app.command()
def fetch(
    range_text: str | None = RANGE_OPTION,
    hours: float | None = HOURS_OPTION,
    key: str | None = typer.Option(
        None,
        "--key",
        "-k",
        help="Fetch this remote key instead of the newest manifest in range.",
    ),
    prune: bool = typer.Option(
        False,
        "--prune",
        help="Delete local manifests before downloading.",
    ),
) -> None:
    """Download the newest manifest in a window and print its local path."""
    from snapcatalog import RichProgressReporter

    cat = load_catalog_context()

    try:
        if key:
            manifest = cat.codec.decode(key)
            if manifest.kind is not cat.meta_info.kind:
                typer.echo(
                    f"Error: {key} is a {manifest.kind} artifact, "
                    f"not a {cat.meta_info.kind} manifest.",
                    err=True,
                )
                raise typer.Exit(1)
        else:
            manifest = cat.find_latest(resolve_range(range_text, hours))
            if manifest is None:
                typer.echo("No manifest found in the requested window.")
                raise typer.Exit(1)

        if prune:
            cat.prune_local_manifests()

        with RichProgressReporter() as progress:
            local = cat.materialize(manifest, progress=progress)
    except SnapcatalogError as e:
        raise fail(e) from None

    typer.echo(str(local))


@app.command()
def prune() -> None:
    """Delete local manifests, including partial downloads."""
    from snapcatalog.core.meta_maintenance import find_local_meta_files

    cat = load_catalog_context()
    directory = cat.get_local_manifest_directory()
    before = len(find_local_meta_files(directory, cat.meta_info))
    cat.prune_local_manifests()
    after = len(find_local_meta_files(directory, cat.meta_info))
    typer.echo(f"Pruned {before - after} manifest file(s) from {directory}.")
    if after:
        typer.echo(f"{after} file(s) could not be deleted.", err=True)
        raise typer.Exit(1)


@app.command()
def push(
    local_path: str = typer.Argument(help="Path to a local manifest to upload."),
    at: str | None = typer.Option(
        None,
        "--at",
        help="Backup time as YYYYMMDDHHMM (UTC). Defaults to the file's mtime.",
    ),
) -> None:
    """Upload a manifest under the key encoded for its backup time."""
    from datetime import UTC, datetime

    from snapcatalog import RichProgressReporter
    from snapcatalog.core.path_utils import MINUTE_FORMAT

    local_file = Path(local_path)
    if not local_file.is_file():
        typer.echo(f"Error: File '{local_path}' does not exist.", err=True)
        raise typer.Exit(1)

    try:
        if at:
            when = datetime.strptime(at, MINUTE_FORMAT).replace(tzinfo=UTC)
        else:
            when = datetime.fromtimestamp(local_file.stat().st_mtime, tz=UTC)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    cat = load_catalog_context()
    info = cat.meta_info
    manifest = cat.codec.new_path(info.kind, when, info.file_name(when))
    storage = cat.storage
    dest = cat.codec.encode(manifest, storage.root_prefix())

    try:
        with RichProgressReporter() as progress:
            callback = progress.start_task(manifest.file_name, 0)
            try:
                storage.upload(local_file, dest, callback)
            finally:
                progress.finish_task(manifest.file_name)
    except SnapcatalogError as e:
        raise fail(e) from None

    typer.echo(dest)


def main() -> None:
    """Entry point for the CLI."""
    app()

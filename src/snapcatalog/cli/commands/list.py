"""List command for CLI."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from snapcatalog.cli.formatting import _format_timestamp
from snapcatalog.cli.main import (
    HOURS_OPTION,
    RANGE_OPTION,
    app,
    fail,
    load_catalog_context,
    resolve_range,
)
from snapcatalog.core.exceptions import SnapcatalogError


@app.command(name="list")
def list_manifests(
    range_text: str | None = RANGE_OPTION,
    hours: float | None = HOURS_OPTION,
    keys_only: bool = typer.Option(
        False,
        "--keys",
        help="Print one remote key per line instead of a table.",
    ),
) -> None:
    """List remote manifests in a window, newest first."""
    cat = load_catalog_context()
    date_range = resolve_range(range_text, hours)

    try:
        metas = cat.find_manifests(date_range)
    except SnapcatalogError as e:
        raise fail(e) from None

    if not metas:
        typer.echo(f"No manifests found for {date_range}.")
        return

    if keys_only:
        for meta in metas:
            typer.echo(meta.remote_key)
        return

    # Build Rich table
    table = Table(title=f"Manifests {date_range}")
    table.add_column("Backup time")
    table.add_column("Node")
    table.add_column("File")
    table.add_column("Key", overflow="fold")

    for meta in metas:
        table.add_row(_format_timestamp(meta), meta.node, meta.file_name, meta.remote_key)

    # Force terminal output to ensure tables render correctly in all environments
    console = Console(force_terminal=True)
    console.print(table)

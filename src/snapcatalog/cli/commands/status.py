"""Status command for CLI."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from snapcatalog.cli.formatting import (
    _format_size,
    _format_state_with_color,
    _local_state,
)
from snapcatalog.cli.main import app, load_catalog_context
from snapcatalog.core.meta_maintenance import find_local_meta_files


@app.command()
def status() -> None:
    """Show the manifests currently in the local manifest directory."""
    cat = load_catalog_context()
    directory = cat.get_local_manifest_directory()
    files = find_local_meta_files(directory, cat.meta_info)

    if not files:
        typer.echo(f"No local manifests in {directory}.")
        return

    # Build Rich table
    table = Table(title=str(directory))
    table.add_column("File")
    table.add_column("Size")
    table.add_column("State")

    for path in files:
        state = _local_state(path)
        table.add_row(
            path.name,
            _format_size(path.stat().st_size),
            _format_state_with_color(state),
        )

    console = Console(force_terminal=True)
    console.print(table)

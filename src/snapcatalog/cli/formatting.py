"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from snapcatalog.core.formatting import state_to_color
from snapcatalog.core.meta_files import TMP_SUFFIX


if TYPE_CHECKING:
    from pathlib import Path

    from snapcatalog.core.models import BackupPath


def _format_state_with_color(state: str) -> Text:
    """Format state string with color coding.

    Args:
        state: State string ("complete" or "partial")

    Returns:
        Rich Text object with appropriate color:
        - "complete" -> green
        - "partial" -> yellow
    """
    color = state_to_color(state)
    return Text(state, style=color) if color else Text(state)


def _local_state(path: Path) -> str:
    """Get the state of a local manifest file (complete/partial)."""
    return "partial" if path.name.endswith(TMP_SUFFIX) else "complete"


def _format_timestamp(meta: BackupPath) -> str:
    """Render a manifest timestamp for tables."""
    return meta.last_modified.strftime("%Y-%m-%d %H:%M:%S UTC")


def _format_size(size_bytes: int) -> str:
    """Format size in bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"

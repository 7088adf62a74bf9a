"""Configuration for snapcatalog.

Settings are read once, from SNAPCATALOG_* environment variables or a .env
file, when a catalog is built. This module also provides project root
discovery used to resolve relative local directories.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from snapcatalog.core.exceptions import ConfigurationError
from snapcatalog.core.meta_files import ManifestFormat
from snapcatalog.core.ports import DEFAULT_DOWNLOAD_CONCURRENCY


def find_project_root(start: Path | None = None) -> Path:
    """Find the project root directory by walking up from start directory.

    Searches for marker files in the following priority order:
    1. .snapcatalog - Explicit project marker
    2. pyproject.toml - Python project root
    3. .git - Version control root

    Args:
        start: Directory to start searching from. If None, uses current directory.

    Returns:
        Path to project root directory. Returns start directory if no markers found.
    """
    if start is None:
        start = Path.cwd()

    markers = [".snapcatalog", "pyproject.toml", ".git"]
    current = start.resolve()

    for parent in [current, *current.parents]:
        for marker in markers:
            if (parent / marker).exists():
                return parent

    return start.resolve()


class SnapcatalogSettings(BaseSettings):
    """Sidecar settings needed by the manifest catalog."""

    model_config = SettingsConfigDict(
        env_prefix="SNAPCATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cluster_name: str
    node_id: str
    # s3://bucket/prefix, file:///path or a plain local path
    backup_location: str
    # Local manifest directory, relative values resolve against the project root
    data_file_location: Path = Path("data/meta")
    manifest_format: ManifestFormat = ManifestFormat.V2
    download_concurrency: int = Field(default=DEFAULT_DOWNLOAD_CONCURRENCY, ge=1)

    @field_validator("cluster_name", "node_id")
    @classmethod
    def _single_segment(cls, value: str) -> str:
        if not value or "/" in value:
            raise ValueError("must be non-empty and must not contain '/'")
        return value

    @field_validator("backup_location")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    def resolved_data_dir(self, root: Path | None = None) -> Path:
        """Local manifest directory as an absolute path."""
        if self.data_file_location.is_absolute():
            return self.data_file_location
        return find_project_root(root) / self.data_file_location


def load_settings(**overrides: object) -> SnapcatalogSettings:
    """Load settings from the environment, applying explicit overrides.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return SnapcatalogSettings(**values)  # type: ignore[arg-type]
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) for error in e.errors()
        )
        raise ConfigurationError(f"Invalid snapcatalog settings ({fields}): {e}") from e

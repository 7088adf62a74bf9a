"""Progress display adapters."""

from snapcatalog.progress.rich_progress import RichProgressReporter


__all__ = ["RichProgressReporter"]

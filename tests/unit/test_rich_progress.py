"""Unit tests for RichProgressReporter adapter."""

import io

import pytest


def _quiet_console():
    from rich.console import Console

    return Console(file=io.StringIO(), force_terminal=False)


@pytest.mark.progress
class TestRichProgressReporter:
    """Tests for RichProgressReporter."""

    def test_rich_reporter_satisfies_protocol(self) -> None:
        """RichProgressReporter should implement ProgressReporter."""
        from snapcatalog.core.ports import ProgressReporter
        from snapcatalog.progress import RichProgressReporter

        reporter = RichProgressReporter(console=_quiet_console())
        assert isinstance(reporter, ProgressReporter)

    def test_unknown_total_is_filled_by_callback(self) -> None:
        """A task started with total 0 learns its size from the callback."""
        from snapcatalog.progress import RichProgressReporter

        with RichProgressReporter(console=_quiet_console()) as reporter:
            callback = reporter.start_task("meta_v2.json", 0)
            task = reporter._progress.tasks[0]
            assert task.total is None

            callback(512, 1024)

            assert task.total == 1024
            assert task.completed == 512

    def test_finish_task_completes_known_total(self) -> None:
        """finish_task() fills the bar when the size is known."""
        from snapcatalog.progress import RichProgressReporter

        with RichProgressReporter(console=_quiet_console()) as reporter:
            callback = reporter.start_task("meta_v2.json", 0)
            callback(100, 400)
            reporter.finish_task("meta_v2.json")

            assert reporter._progress.tasks[0].completed == 400

    def test_finish_unknown_task_is_noop(self) -> None:
        """Finishing a task that was never started does nothing."""
        from snapcatalog.progress import RichProgressReporter

        with RichProgressReporter(console=_quiet_console()) as reporter:
            reporter.finish_task("never-started")

    def test_with_catalog_materialize(self, tmp_path, fake_remote, codec, put_manifest) -> None:
        """The reporter can drive a real materialize() call."""
        from datetime import UTC, datetime

        from snapcatalog.core.services import MetaCatalog
        from snapcatalog.progress import RichProgressReporter

        manifest = put_manifest(datetime(2023, 5, 1, 10, tzinfo=UTC), body=b"x" * 64)
        catalog = MetaCatalog(tmp_path, fake_remote, codec)

        with RichProgressReporter(console=_quiet_console()) as reporter:
            local = catalog.materialize(manifest, progress=reporter)

        assert local.read_bytes() == b"x" * 64

"""Tests for rich console rendering and logging setup."""

import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from styleprogress.core import ProgressManager
from styleprogress.utils.logging import setup_logging
from styleprogress.utils.progress import ConsoleProgress


@pytest.fixture
def console():
    """Create a console writing to memory."""
    return Console(file=io.StringIO(), force_terminal=False, width=100)


class TestConsoleProgress:
    """Test the manager-subscribed progress display."""

    def test_subscribes_and_restores(self, console):
        """Test start() takes over the subscription and finish() hands it back."""
        previous = []
        manager = ProgressManager(previous.append)
        display = ConsoleProgress(manager, console=console)

        display.start()
        assert manager.on_progress_update == display.update

        display.finish()
        assert manager.on_progress_update == previous.append
        assert display.progress is None

    def test_one_task_per_tracker(self, console):
        """Test each tracker id gets its own bar next to the overall bar."""
        manager = ProgressManager()
        display = ConsoleProgress(manager, console=console)
        display.start()
        try:
            manager.create_tracker("fetch", 4).update_progress(2, "Fetching")
            manager.create_tracker("analyze", 10).update_progress(1, "Analyzing")
            manager.get_tracker("fetch").update_progress(3, "Fetching")

            assert set(display.tasks) == {"fetch", "analyze"}
            overall = display.progress.tasks[0]
            assert overall.completed == pytest.approx(manager.get_global_progress())
        finally:
            display.finish()

    def test_out_of_range_clamped_for_display(self, console):
        """Test over-range percentages render as 100 without touching the tracker."""
        manager = ProgressManager()
        display = ConsoleProgress(manager, console=console)
        display.start()
        try:
            tracker = manager.create_tracker("over", 2)
            tracker.update_progress(5, "Too far")

            task = display.progress.tasks[1]
            assert task.completed == 100
            assert tracker.percentage == pytest.approx(250)
        finally:
            display.finish()

    def test_update_before_start_is_ignored(self, console):
        """Test events arriving when not started are dropped."""
        manager = ProgressManager()
        display = ConsoleProgress(manager, console=console)
        tracker = manager.create_tracker("t", 1)

        display.update(tracker.get_progress())

        assert display.tasks == {}


class TestSetupLogging:
    """Test logging configuration."""

    def test_rich_handler_installed(self, console):
        """Test the package logger gets exactly one RichHandler."""
        logger = setup_logging(logging.DEBUG, console=console)
        setup_logging(logging.DEBUG, console=console)

        assert logger.name == "styleprogress"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_subscriber_failure_logged(self, console):
        """Test a failing subscriber is reported through the package logger."""
        setup_logging(logging.DEBUG, console=console)

        def broken(snapshot):
            raise RuntimeError("display crashed")

        manager = ProgressManager(broken)
        manager.create_tracker("op", 2).update_progress(1)

        assert "Progress subscriber failed" in console.file.getvalue()

"""Tests for the asyncio-driven analysis simulation."""

import io

import pytest
from rich.console import Console

from styleprogress.config import EngineConfig
from styleprogress.core import create_standard_progress_manager
from styleprogress.simulation import AnalysisSimulation
from styleprogress.simulation import analysis_batch_configs
from styleprogress.simulation import simulate_command


def test_batch_configs_follow_stage_weights():
    """Test sub-operations are weighted from the manager's stage table."""
    manager = create_standard_progress_manager()
    configs = analysis_batch_configs(manager, repositories=3, files_per_repository=4)

    assert [(c.id, c.weight, c.total_steps) for c in configs] == [
        ("fetch", 20, 3),
        ("analyze", 50, 12),
        ("generate", 15, 3),
    ]


@pytest.mark.asyncio
class TestAnalysisSimulation:
    """Test the simulated run end to end."""

    async def test_run_completes_batch(self):
        """Test the batch finishes at 100% and releases its trackers."""
        events = []
        manager = create_standard_progress_manager(events.append)
        simulation = AnalysisSimulation(manager, EngineConfig(), repositories=3, files_per_repository=2, delay=0)

        summary = await simulation.run()

        assert summary.is_complete
        assert summary.overall_progress == pytest.approx(100)
        assert summary.completed_operations == 3
        assert manager.get_active_trackers() == {}
        assert events

    async def test_interleaved_updates_are_monotonic(self):
        """Test concurrent per-repository tasks still report increasing steps."""
        steps = []

        def record(snapshot):
            if snapshot.id.operation_id == "analyze":
                steps.append(snapshot.current_step)

        manager = create_standard_progress_manager(record)
        simulation = AnalysisSimulation(manager, EngineConfig(), repositories=4, files_per_repository=3, delay=0)

        await simulation.run()

        assert steps == list(range(1, 13))

    async def test_annotations_reach_subscriber(self):
        """Test repository and file annotations are passed through."""
        files = set()

        def record(snapshot):
            if snapshot.current_file:
                files.add((snapshot.current_repository, snapshot.current_file))

        manager = create_standard_progress_manager(record)
        await AnalysisSimulation(manager, EngineConfig(), repositories=2, files_per_repository=2, delay=0).run()

        assert files == {
            ("repo-1", "module_1.py"),
            ("repo-1", "module_2.py"),
            ("repo-2", "module_1.py"),
            ("repo-2", "module_2.py"),
        }

    async def test_simulate_command_prints_summary(self):
        """Test the command entry point renders a summary table."""
        console = Console(file=io.StringIO(), force_terminal=False, width=120)

        summary = await simulate_command(2, 2, None, delay=0, console=console)

        assert summary.is_complete
        output = console.file.getvalue()
        assert "Batch Summary" in output
        assert "3/3 operations complete" in output

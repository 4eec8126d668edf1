"""Simulated style analysis run driving a batch operation from asyncio tasks."""

import asyncio
import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from styleprogress.config import EngineConfig
from styleprogress.config import load_config
from styleprogress.core import BatchOperation
from styleprogress.core import BatchOperationConfig
from styleprogress.core import BatchSummary
from styleprogress.core import ProgressManager
from styleprogress.core import Stage
from styleprogress.utils.progress import ConsoleProgress


logger = logging.getLogger(__name__)

GENERATION_STEPS = ["Collecting statistics", "Building profile", "Writing profile"]


def analysis_batch_configs(manager: ProgressManager, repositories: int, files_per_repository: int) -> list[BatchOperationConfig]:
    """Sub-operations of one analysis run, weighted by the manager's stage table."""
    return [
        BatchOperationConfig(
            id="fetch",
            name="Fetching repositories",
            weight=manager.stage_weight(Stage.FETCHING_REPOSITORIES),
            total_steps=repositories,
        ),
        BatchOperationConfig(
            id="analyze",
            name="Analyzing code",
            weight=manager.stage_weight(Stage.ANALYZING_CODE),
            total_steps=repositories * files_per_repository,
        ),
        BatchOperationConfig(
            id="generate",
            name="Generating profile",
            weight=manager.stage_weight(Stage.GENERATING_PROFILE),
            total_steps=len(GENERATION_STEPS),
        ),
    ]


class AnalysisSimulation:
    """Drive the fetch / analyze / generate trackers of a batch with fake work."""

    def __init__(
        self,
        manager: ProgressManager,
        config: EngineConfig,
        repositories: int = 3,
        files_per_repository: int = 4,
        delay: float = 0.05,
    ):
        self.manager = manager
        self.config = config
        self.repositories = [f"repo-{i + 1}" for i in range(repositories)]
        self.files_per_repository = files_per_repository
        self.delay = delay
        self.batch: BatchOperation | None = None

    async def run(self) -> BatchSummary:
        """
        Run every phase in order and return the final batch summary.

        Repositories are fetched and analyzed concurrently; files within one
        repository are analyzed sequentially.
        """
        self.batch = self.manager.create_batch_operation(
            "analysis",
            analysis_batch_configs(self.manager, len(self.repositories), self.files_per_repository),
        )

        await self._fetch()
        await self._analyze()
        await self._generate()

        return self.batch.get_summary()

    async def _fetch(self) -> None:
        tracker = self.batch.get_operation("fetch")
        tracker.set_stage(Stage.FETCHING_REPOSITORIES)
        self.config.configure_tracker(tracker, repositories=len(self.repositories))
        fetched = 0

        async def fetch_one(repo: str) -> None:
            nonlocal fetched
            await asyncio.sleep(self.delay)
            fetched += 1
            tracker.update_progress(fetched, f"Fetched {repo}", current_repository=repo)

        await asyncio.gather(*(fetch_one(repo) for repo in self.repositories))
        self.batch.complete_operation("fetch")

    async def _analyze(self) -> None:
        tracker = self.batch.get_operation("analyze")
        tracker.set_stage(Stage.ANALYZING_CODE)
        self.config.configure_tracker(tracker, repositories=len(self.repositories))
        analyzed = 0

        async def analyze_repository(repo: str) -> None:
            nonlocal analyzed
            for index in range(self.files_per_repository):
                file_name = f"module_{index + 1}.py"
                await asyncio.sleep(self.delay)
                analyzed += 1
                tracker.update_progress(
                    analyzed,
                    f"Analyzing {file_name} ({index + 1}/{self.files_per_repository} files in {repo})",
                    current_repository=repo,
                    current_file=file_name,
                )

        await asyncio.gather(*(analyze_repository(repo) for repo in self.repositories))
        self.batch.complete_operation("analyze")

    async def _generate(self) -> None:
        tracker = self.batch.get_operation("generate")
        tracker.set_stage(Stage.GENERATING_PROFILE)
        self.config.configure_tracker(tracker)

        for step, message in enumerate(GENERATION_STEPS, start=1):
            await asyncio.sleep(self.delay)
            tracker.update_progress(step, message)

        tracker.complete("Profile generated")
        self.batch.complete_operation("generate")


def display_summary(console: Console, summary: BatchSummary) -> None:
    """Print a batch summary as a table."""
    table = Table(title=f"Batch Summary: {summary.batch_id}")
    table.add_column("Operation", style="cyan")
    table.add_column("Name", style="magenta")
    table.add_column("Progress", style="green", justify="right")
    table.add_column("Last message", style="dim")

    for operation in summary.operations:
        table.add_row(operation.id, operation.stage, f"{operation.percentage:.0f}%", operation.message)

    console.print(table)
    console.print(
        f"[bold]Overall:[/bold] {summary.overall_progress:.1f}% "
        f"({summary.completed_operations}/{summary.total_operations} operations complete)"
    )


async def simulate_command(
    repositories: int,
    files_per_repository: int,
    config_path: Path | None,
    delay: float = 0.05,
    console: Console | None = None,
) -> BatchSummary:
    """Main entry point for the demo command."""
    console = console or Console()
    config = load_config(config_path)
    manager = config.create_manager()

    console.print(
        f"[cyan]Simulating analysis of {repositories} repositories "
        f"({files_per_repository} files each)...[/cyan]"
    )

    display = ConsoleProgress(manager, description="Overall", console=console)
    display.start()
    try:
        simulation = AnalysisSimulation(manager, config, repositories, files_per_repository, delay)
        summary = await simulation.run()
    finally:
        display.finish()

    logger.info("Simulation finished with %d live trackers", len(manager.get_active_trackers()))
    display_summary(console, summary)
    return summary

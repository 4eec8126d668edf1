"""Console rendering of manager progress using rich."""

from typing import Any

from rich.console import Console
from rich.progress import BarColumn
from rich.progress import Progress
from rich.progress import TaskID
from rich.progress import TextColumn
from rich.progress import TimeElapsedColumn

from styleprogress.core.manager import ProgressManager
from styleprogress.core.tracker import ProgressSnapshot
from styleprogress.core.tracker import format_time


def _clamp(percentage: float) -> float:
    return max(0.0, min(100.0, percentage))


class ConsoleProgress:
    """Console progress bars for every tracker on a manager, plus an overall bar.

    Subscribes itself to the manager on start and restores the previous
    subscriber on finish. Out-of-range percentages are clamped for display only.
    """

    def __init__(self, manager: ProgressManager, description: str = "Overall", console: Console | None = None):
        self.manager = manager
        self.description = description
        self.console = console
        self.progress: Progress | None = None
        self.overall_task: TaskID | None = None
        self.tasks: dict[Any, TaskID] = {}
        self._previous_subscriber = None

    def start(self) -> None:
        """Start progress rendering and subscribe to the manager."""
        self.progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TextColumn("[dim]{task.fields[eta]}"),
            TimeElapsedColumn(),
            console=self.console,
        )
        self.progress.start()
        self.overall_task = self.progress.add_task(f"[cyan]{self.description}", total=100, eta="")
        self._previous_subscriber = self.manager.on_progress_update
        self.manager.subscribe(self.update)

    def update(self, snapshot: ProgressSnapshot) -> None:
        """Render one progress event."""
        if self.progress is None or self.overall_task is None:
            return

        task_id = self.tasks.get(snapshot.id)
        if task_id is None:
            task_id = self.progress.add_task(str(snapshot.id), total=100, eta="")
            self.tasks[snapshot.id] = task_id

        label = f"{snapshot.id}: {snapshot.message}" if snapshot.message else str(snapshot.id)
        eta = "" if snapshot.is_complete else format_time(snapshot.estimated_time_remaining)
        self.progress.update(task_id, completed=_clamp(snapshot.percentage), description=label, eta=eta)
        self.progress.update(self.overall_task, completed=_clamp(self.manager.get_global_progress()))

    def finish(self) -> None:
        """Stop rendering and hand the subscription back."""
        if self.progress:
            self.manager.subscribe(self._previous_subscriber)
            self.progress.stop()
            self.progress = None
            self.overall_task = None
            self.tasks.clear()

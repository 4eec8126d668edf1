"""Progress tracking for a single unit of work."""

import logging
import math
import time
from dataclasses import asdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from typing import Protocol


logger = logging.getLogger(__name__)

DEFAULT_ESTIMATED_TOTAL_TIME_MS = 30_000
PER_REPOSITORY_TIME_MS = 3_000
MINIMUM_TOTAL_TIME_MS = 10_000


@dataclass(frozen=True)
class ProgressSnapshot:
    """Immutable view of a tracker (or a stage announcement) at one instant."""

    id: Any
    current_step: float
    total_steps: int
    percentage: float
    message: str
    stage: str | None
    is_complete: bool
    start_time: datetime
    last_update_time: datetime
    elapsed_time: float
    estimated_time_remaining: float
    current_repository: str | None = None
    current_file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain dictionary for UI consumption, ids and timestamps stringified."""
        data = asdict(self)
        data["id"] = str(self.id)
        data["start_time"] = self.start_time.isoformat()
        data["last_update_time"] = self.last_update_time.isoformat()
        return data


class ProgressCallback(Protocol):
    """Protocol for progress callback functions."""

    def __call__(self, snapshot: ProgressSnapshot) -> None: ...


class ProgressTracker:
    """Track current step out of a fixed total for one unit of work.

    Steps are taken as given: a step past ``total_steps`` or below zero yields a
    percentage above 100 or below 0 instead of an error. Callers that need a
    bounded value check the percentage themselves.

    Example::

        tracker = ProgressTracker("fetch", total_steps=4, on_update=print)
        tracker.set_stage("FETCHING_REPOSITORIES")
        for i, repo in enumerate(repos, start=1):
            fetch(repo)
            tracker.update_progress(i, f"Fetched {repo}")
    """

    def __init__(self, tracker_id: Any, total_steps: int, on_update: ProgressCallback | None = None):
        self.id = tracker_id
        self.total_steps = total_steps
        self.on_update = on_update
        self.estimated_total_time = float(DEFAULT_ESTIMATED_TOTAL_TIME_MS)
        self._init_state()

    def _init_state(self) -> None:
        self.current_step: float = 0
        self.stage: str | None = None
        self.message = ""
        self.current_repository: str | None = None
        self.current_file: str | None = None
        self._complete = False
        self._failed = False
        self.start_time = datetime.now()
        self.last_update_time = self.start_time
        self._started_at = time.monotonic()

    @property
    def percentage(self) -> float:
        """Current step as a percentage of the total, 0 for zero-step trackers."""
        if self.total_steps <= 0:
            return 0.0
        return self.current_step * 100 / self.total_steps

    def is_complete(self) -> bool:
        return self._complete

    def update_progress(
        self,
        step: float,
        message: str | None = None,
        *,
        current_repository: str | None = None,
        current_file: str | None = None,
    ) -> None:
        """Set the current step and notify the callback.

        Args:
            step: New current step (not clamped)
            message: Human-readable status, empty when omitted
            current_repository: Optional annotation passed through to snapshots
            current_file: Optional annotation passed through to snapshots
        """
        self.current_step = step
        self.message = message if message is not None else ""
        self.current_repository = current_repository
        self.current_file = current_file
        self._complete = step >= self.total_steps
        self._failed = False
        self._touch()
        self._notify()

    def set_stage(self, stage: str | None) -> None:
        """Label the tracker with a stage; picked up by the next notification."""
        # Stage enums are str subclasses; store the plain value.
        self.stage = None if stage is None else getattr(stage, "value", stage)

    def complete(self, message: str = "Completed") -> None:
        """Force the tracker to its final step and notify."""
        self.current_step = self.total_steps
        self.message = message
        self.current_repository = None
        self.current_file = None
        self._complete = True
        self._failed = False
        self._touch()
        self._notify()

    def fail(self, message: str) -> None:
        """Record an error message without touching step state."""
        self.message = f"Error: {message}"
        self._failed = True
        self._touch()
        self._notify()

    def reset(self) -> None:
        """Return to the just-constructed state with a fresh start time."""
        self._init_state()

    def set_estimated_total_time(self, milliseconds: float) -> None:
        self.estimated_total_time = max(0.0, float(milliseconds))

    def set_total_repositories(
        self,
        count: int,
        per_repository_ms: float = PER_REPOSITORY_TIME_MS,
        minimum_ms: float = MINIMUM_TOTAL_TIME_MS,
    ) -> None:
        """Size the fallback time estimate from the number of repositories."""
        self.estimated_total_time = float(max(minimum_ms, count * per_repository_ms))

    def get_elapsed_time(self) -> float:
        """Milliseconds since construction or the last reset."""
        return (time.monotonic() - self._started_at) * 1000

    def estimated_time_remaining(self) -> float:
        """Best-effort milliseconds left.

        Extrapolates from the observed rate once some progress has been made,
        otherwise falls back to ``estimated_total_time`` minus elapsed time.
        """
        if self._complete or self._failed:
            return 0.0

        elapsed = self.get_elapsed_time()
        pct = self.percentage
        if 0 < pct < 100:
            return elapsed * (100 - pct) / pct
        return max(0.0, self.estimated_total_time - elapsed)

    def get_progress(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            id=self.id,
            current_step=self.current_step,
            total_steps=self.total_steps,
            percentage=self.percentage,
            message=self.message,
            stage=self.stage,
            is_complete=self._complete,
            start_time=self.start_time,
            last_update_time=self.last_update_time,
            elapsed_time=self.get_elapsed_time(),
            estimated_time_remaining=self.estimated_time_remaining(),
            current_repository=self.current_repository,
            current_file=self.current_file,
        )

    def _touch(self) -> None:
        self.last_update_time = datetime.now()

    def _notify(self) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(self.get_progress())
        except Exception:
            logger.exception("Progress callback failed for tracker %r", self.id)

    def __repr__(self) -> str:
        return f"ProgressTracker(id={self.id!r}, step={self.current_step}/{self.total_steps}, stage={self.stage!r})"


def format_time(milliseconds: float) -> str:
    """
    Format a duration for display.

    Examples:
    - 1000 → "1 second"
    - 45000 → "45 seconds"
    - 120000 → "2 minutes"
    - 95000 → "1:35"

    Returns:
        Human-readable duration, seconds rounded up
    """
    seconds = max(0, math.ceil(milliseconds / 1000))

    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"

    minutes, remaining = divmod(seconds, 60)
    if remaining == 0:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"

    return f"{minutes}:{remaining:02d}"

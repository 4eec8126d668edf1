"""Weighted aggregation of many progress trackers."""

import logging
from collections.abc import Mapping
from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import Any

from .aggregate import OperationSummary
from .aggregate import weighted_mean
from .batch import BatchOperation
from .batch import BatchOperationConfig
from .tracker import ProgressCallback
from .tracker import ProgressSnapshot
from .tracker import ProgressTracker


logger = logging.getLogger(__name__)

DEFAULT_WEIGHT = 1.0


class Stage(str, Enum):
    """Standard stages of a style analysis run."""

    INITIALIZATION = "INITIALIZATION"
    FETCHING_REPOSITORIES = "FETCHING_REPOSITORIES"
    ANALYZING_CODE = "ANALYZING_CODE"
    GENERATING_PROFILE = "GENERATING_PROFILE"
    FINALIZING = "FINALIZING"


DEFAULT_STAGES: dict[str, float] = {
    Stage.INITIALIZATION.value: 5,
    Stage.FETCHING_REPOSITORIES.value: 20,
    Stage.ANALYZING_CODE.value: 50,
    Stage.GENERATING_PROFILE.value: 15,
    Stage.FINALIZING.value: 10,
}


def _stage_key(stage: Any) -> str:
    return getattr(stage, "value", stage)


class ProgressManager:
    """Own a set of named trackers and keep one weighted global percentage.

    The global percentage is the mean of every registered tracker's percentage,
    weighted by the weight of the tracker's current stage. Trackers with no stage,
    or a stage missing from the table, weigh 1.
    """

    def __init__(self, on_progress_update: ProgressCallback | None = None):
        self.on_progress_update = on_progress_update
        self.trackers: dict[Any, ProgressTracker] = {}
        self.stages: dict[str, float] = {}
        self.global_progress = 0.0

    def subscribe(self, callback: ProgressCallback | None) -> None:
        """Replace the subscriber notified on every state change."""
        self.on_progress_update = callback

    def set_stages(self, stages: Mapping[Any, float]) -> None:
        """Replace the whole stage-weight table."""
        self.stages = {_stage_key(stage): weight for stage, weight in stages.items()}
        logger.debug("Stage table set: %s", self.stages)
        self._update_global_progress()

    def stage_weight(self, stage: Any) -> float:
        if stage is None:
            return DEFAULT_WEIGHT
        return self.stages.get(_stage_key(stage)) or DEFAULT_WEIGHT

    def create_tracker(self, tracker_id: Any, total_steps: int) -> ProgressTracker:
        """Build and register a tracker whose updates flow through this manager."""

        def on_tracker_update(snapshot: ProgressSnapshot) -> None:
            self._update_global_progress()
            self._emit(snapshot)

        tracker = ProgressTracker(tracker_id, total_steps, on_tracker_update)
        self.trackers[tracker_id] = tracker
        logger.debug("Registered tracker %s (%d steps)", tracker_id, total_steps)
        self._update_global_progress()
        return tracker

    def get_tracker(self, tracker_id: Any) -> ProgressTracker | None:
        return self.trackers.get(tracker_id)

    def remove_tracker(self, tracker_id: Any) -> None:
        """Unregister a tracker; it keeps working but no longer reports here."""
        tracker = self.trackers.pop(tracker_id, None)
        if tracker is not None:
            tracker.on_update = None
            logger.debug("Removed tracker %s", tracker_id)
        self._update_global_progress()

    def get_active_trackers(self) -> dict[Any, ProgressTracker]:
        return dict(self.trackers)

    def has_active_operations(self) -> bool:
        return bool(self.trackers)

    def update_progress(self, stage: Any, percentage: float) -> None:
        """
        Announce progress for a whole stage, independent of any tracker.

        Args:
            stage: Stage name; unknown stages weigh 1
            percentage: Stage completion, 0-100
        """
        stage = _stage_key(stage)
        now = datetime.now()

        self._update_global_progress()
        logger.debug("Stage %s at %s%% (weight %s)", stage, percentage, self.stage_weight(stage))

        self._emit(
            ProgressSnapshot(
                id=stage,
                current_step=percentage,
                total_steps=100,
                percentage=percentage,
                message=f"{stage}: {percentage}%",
                stage=stage,
                is_complete=percentage >= 100,
                start_time=now,
                last_update_time=now,
                elapsed_time=0.0,
                estimated_time_remaining=self.estimated_time_remaining(),
            )
        )

    def get_global_progress(self) -> float:
        """Weighted mean over the live trackers as they stand now."""
        return self._compute_global_progress()

    def estimated_time_remaining(self) -> float:
        """Most conservative (largest) positive ETA across live trackers."""
        estimates = [t.estimated_time_remaining() for t in list(self.trackers.values())]
        return max((eta for eta in estimates if eta > 0), default=0.0)

    def get_operations_summary(self) -> list[OperationSummary]:
        summaries = []
        for tracker_id, tracker in list(self.trackers.items()):
            progress = tracker.get_progress()
            summaries.append(
                OperationSummary(
                    id=tracker_id,
                    stage=progress.stage,
                    percentage=progress.percentage,
                    message=progress.message,
                    estimated_time_remaining=progress.estimated_time_remaining,
                )
            )
        return summaries

    def reset(self) -> None:
        """Drop all trackers and the stage table."""
        for tracker in self.trackers.values():
            tracker.on_update = None
        self.trackers.clear()
        self.stages.clear()
        self.global_progress = 0.0
        logger.debug("Progress manager reset")

    def create_batch_operation(
        self,
        batch_id: str,
        configs: Sequence[BatchOperationConfig | Mapping[str, Any]],
    ) -> BatchOperation:
        """Register one tracker per sub-operation and wrap them in a batch."""
        return BatchOperation(batch_id, configs, self)

    def _compute_global_progress(self) -> float:
        entries = [
            (tracker.percentage, self.stage_weight(tracker.stage))
            for tracker in list(self.trackers.values())
        ]
        return weighted_mean(entries)

    def _update_global_progress(self) -> None:
        self.global_progress = self._compute_global_progress()

    def _emit(self, snapshot: ProgressSnapshot) -> None:
        if self.on_progress_update is None:
            return
        try:
            self.on_progress_update(snapshot)
        except Exception:
            logger.exception("Progress subscriber failed on %s", snapshot.id)


def create_standard_progress_manager(on_progress_update: ProgressCallback | None = None) -> ProgressManager:
    """Progress manager pre-loaded with :data:`DEFAULT_STAGES`."""
    manager = ProgressManager(on_progress_update)
    manager.set_stages(DEFAULT_STAGES)
    return manager

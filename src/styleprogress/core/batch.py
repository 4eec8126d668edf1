"""Batch operations: a fixed set of weighted sub-operations on a shared manager."""

import logging
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import asdict
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any
from typing import NamedTuple

from styleprogress.utils.validation import validate_batch_configs

from .aggregate import OperationSummary
from .aggregate import weighted_mean
from .tracker import ProgressTracker


if TYPE_CHECKING:
    from .manager import ProgressManager


logger = logging.getLogger(__name__)


class BatchKey(NamedTuple):
    """Manager key of a batch sub-operation tracker."""

    batch_id: str
    operation_id: str

    def __str__(self) -> str:
        return f"{self.batch_id}_{self.operation_id}"


@dataclass(frozen=True)
class BatchOperationConfig:
    """Declaration of one sub-operation in a batch."""

    id: str
    name: str
    weight: float
    total_steps: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BatchOperationConfig":
        """Accept both ``total_steps`` and ``totalSteps`` spellings."""
        total_steps = data["total_steps"] if "total_steps" in data else data["totalSteps"]
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            weight=data.get("weight", 1),
            total_steps=int(total_steps),
        )


@dataclass(frozen=True)
class BatchSummary:
    """Read model of a whole batch."""

    batch_id: str
    overall_progress: float
    operations: list[OperationSummary]
    is_complete: bool
    completed_operations: int
    total_operations: int


class BatchOperation:
    """Track a known-in-advance set of sub-operations as one weighted unit.

    Each configured sub-operation gets its own tracker on the owning manager.
    Batch progress is computed over these trackers only, with the weights from
    the batch configuration. Once every sub-operation is marked complete the
    trackers are removed from the manager; a completed batch cannot be resumed.

    Raises:
        InvalidBatchConfigError: No operations, duplicate ids, non-positive
            weights or invalid step counts
    """

    def __init__(
        self,
        batch_id: str,
        configs: Sequence[BatchOperationConfig | Mapping[str, Any]],
        progress_manager: "ProgressManager",
    ):
        validate_batch_configs([asdict(c) if isinstance(c, BatchOperationConfig) else c for c in configs])

        self.batch_id = batch_id
        self.configs: tuple[BatchOperationConfig, ...] = tuple(
            c if isinstance(c, BatchOperationConfig) else BatchOperationConfig.from_dict(c) for c in configs
        )
        self.progress_manager = progress_manager
        self.operations: dict[str, ProgressTracker] = {}
        self.weights: dict[str, float] = {}
        self.completed: set[str] = set()
        self.batch_progress = 0.0
        self._cleaned_up = False

        for config in self.configs:
            tracker = progress_manager.create_tracker(self.key(config.id), config.total_steps)
            self.operations[config.id] = tracker
            self.weights[config.id] = config.weight

        logger.debug("Batch %s created with %d operations", batch_id, len(self.operations))

    def key(self, operation_id: str) -> BatchKey:
        return BatchKey(self.batch_id, operation_id)

    def get_operation(self, operation_id: str) -> ProgressTracker | None:
        return self.operations.get(operation_id)

    def complete_operation(self, operation_id: str) -> None:
        """Mark a sub-operation done; unknown ids are ignored."""
        if operation_id not in self.operations:
            logger.debug("Batch %s has no operation %r", self.batch_id, operation_id)
            return

        self.completed.add(operation_id)
        self._update_batch_progress()

        if self.is_complete() and not self._cleaned_up:
            self._cleanup()

    def get_batch_progress(self) -> float:
        return self._compute_batch_progress()

    def is_complete(self) -> bool:
        return all(config.id in self.completed for config in self.configs)

    def get_summary(self) -> BatchSummary:
        names = {config.id: config.name for config in self.configs}
        operations = []
        for operation_id, tracker in self.operations.items():
            progress = tracker.get_progress()
            operations.append(
                OperationSummary(
                    id=operation_id,
                    stage=names.get(operation_id, operation_id),
                    percentage=progress.percentage,
                    message=progress.message,
                    estimated_time_remaining=progress.estimated_time_remaining,
                )
            )

        return BatchSummary(
            batch_id=self.batch_id,
            overall_progress=self.get_batch_progress(),
            operations=operations,
            is_complete=self.is_complete(),
            completed_operations=len(self.completed),
            total_operations=len(self.configs),
        )

    def _compute_batch_progress(self) -> float:
        entries = [
            (tracker.percentage, self.weights[operation_id])
            for operation_id, tracker in self.operations.items()
        ]
        return weighted_mean(entries)

    def _update_batch_progress(self) -> None:
        self.batch_progress = self._compute_batch_progress()

    def _cleanup(self) -> None:
        for operation_id in list(self.operations):
            self.progress_manager.remove_tracker(self.key(operation_id))
        self._cleaned_up = True
        logger.debug("Batch %s complete, trackers released", self.batch_id)

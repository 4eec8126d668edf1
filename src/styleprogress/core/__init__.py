"""Progress tracking, weighted aggregation and batch operations."""

from .aggregate import OperationSummary
from .batch import BatchKey
from .batch import BatchOperation
from .batch import BatchOperationConfig
from .batch import BatchSummary
from .manager import DEFAULT_STAGES
from .manager import ProgressManager
from .manager import Stage
from .manager import create_standard_progress_manager
from .tracker import ProgressCallback
from .tracker import ProgressSnapshot
from .tracker import ProgressTracker
from .tracker import format_time


__all__ = [
    "ProgressTracker",
    "ProgressSnapshot",
    "ProgressCallback",
    "ProgressManager",
    "OperationSummary",
    "Stage",
    "DEFAULT_STAGES",
    "create_standard_progress_manager",
    "BatchOperation",
    "BatchOperationConfig",
    "BatchSummary",
    "BatchKey",
    "format_time",
]

"""StyleProgress - Weighted progress tracking for style analysis runs."""

__version__ = "0.1.0"
__license__ = "GPL-3.0-or-later"

from styleprogress.core import DEFAULT_STAGES
from styleprogress.core import BatchOperation
from styleprogress.core import ProgressManager
from styleprogress.core import ProgressTracker
from styleprogress.core import Stage
from styleprogress.core import create_standard_progress_manager


__all__ = [
    "ProgressTracker",
    "ProgressManager",
    "BatchOperation",
    "Stage",
    "DEFAULT_STAGES",
    "create_standard_progress_manager",
    "__version__",
]

"""Engine configuration: stage weights and time-estimate defaults."""

import json
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any

from styleprogress.core.manager import DEFAULT_STAGES
from styleprogress.core.manager import ProgressManager
from styleprogress.core.tracker import DEFAULT_ESTIMATED_TOTAL_TIME_MS
from styleprogress.core.tracker import MINIMUM_TOTAL_TIME_MS
from styleprogress.core.tracker import PER_REPOSITORY_TIME_MS
from styleprogress.core.tracker import ProgressCallback
from styleprogress.core.tracker import ProgressTracker
from styleprogress.utils.errors import ConfigurationError
from styleprogress.utils.validation import validate_stage_weights


@dataclass
class EngineConfig:
    """Settings applied to managers and trackers built for one run."""

    stages: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_STAGES))
    estimated_total_time_ms: float = DEFAULT_ESTIMATED_TOTAL_TIME_MS
    per_repository_ms: float = PER_REPOSITORY_TIME_MS
    minimum_total_time_ms: float = MINIMUM_TOTAL_TIME_MS

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EngineConfig":
        """Build from a parsed config document, validating the stage table."""
        config = cls()

        if "stages" in data:
            config.stages = validate_stage_weights(data["stages"])

        for key in ("estimated_total_time_ms", "per_repository_ms", "minimum_total_time_ms"):
            if key not in data:
                continue
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(f"{key} must be a non-negative number, got {value!r}")
            setattr(config, key, float(value))

        return config

    def create_manager(self, on_progress_update: ProgressCallback | None = None) -> ProgressManager:
        manager = ProgressManager(on_progress_update)
        manager.set_stages(self.stages)
        return manager

    def configure_tracker(self, tracker: ProgressTracker, repositories: int | None = None) -> ProgressTracker:
        """Apply the time-estimate defaults, sized by repository count when given."""
        if repositories is None:
            tracker.set_estimated_total_time(self.estimated_total_time_ms)
        else:
            tracker.set_total_repositories(repositories, self.per_repository_ms, self.minimum_total_time_ms)
        return tracker


def load_config(path: Path | None) -> EngineConfig:
    """
    Load engine configuration from a JSON file.

    Example file::

        {
          "stages": {"FETCHING_REPOSITORIES": 30, "ANALYZING_CODE": 70},
          "estimated_total_time_ms": 45000
        }

    Args:
        path: Config file, or None for defaults

    Returns:
        Validated configuration
    """
    if path is None:
        return EngineConfig()

    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config root must be an object: {path}")

    return EngineConfig.from_dict(data)

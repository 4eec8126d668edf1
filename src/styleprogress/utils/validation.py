"""Stage table and batch configuration validation."""

from collections.abc import Mapping
from collections.abc import Sequence
from numbers import Real
from typing import Any

from styleprogress.utils.errors import InvalidBatchConfigError
from styleprogress.utils.errors import InvalidStageWeightsError


def validate_stage_weights(stages: Mapping[str, Any]) -> dict[str, float]:
    """Validate a stage-weight table and return it with float weights."""
    if not stages:
        raise InvalidStageWeightsError("Stage table is empty")

    validated = {}
    for name, weight in stages.items():
        if not isinstance(name, str) or not name:
            raise InvalidStageWeightsError(f"Invalid stage name: {name!r}")

        if isinstance(weight, bool) or not isinstance(weight, Real):
            raise InvalidStageWeightsError(f"Weight for stage {name!r} is not a number: {weight!r}")

        if weight <= 0:
            raise InvalidStageWeightsError(f"Weight for stage {name!r} must be positive, got {weight}")

        validated[name] = float(weight)

    return validated


def validate_batch_configs(configs: Sequence[Mapping[str, Any]]) -> None:
    """Check batch sub-operations have unique ids, positive weights and sane step counts."""
    if not configs:
        raise InvalidBatchConfigError("Batch has no operations")

    seen: set[str] = set()
    for config in configs:
        op_id = config.get("id")
        if not op_id:
            raise InvalidBatchConfigError(f"Operation without id: {dict(config)}")

        if op_id in seen:
            raise InvalidBatchConfigError(f"Duplicate operation id: {op_id}")
        seen.add(op_id)

        weight = config.get("weight", 1)
        if isinstance(weight, bool) or not isinstance(weight, Real) or weight <= 0:
            raise InvalidBatchConfigError(f"Operation {op_id!r} needs a positive weight, got {weight!r}")

        total_steps = config.get("total_steps", config.get("totalSteps"))
        if isinstance(total_steps, bool) or not isinstance(total_steps, int) or total_steps < 0:
            raise InvalidBatchConfigError(f"Operation {op_id!r} needs total_steps >= 0, got {total_steps!r}")

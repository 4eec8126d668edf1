"""Custom exceptions for StyleProgress.

Progress updates never raise; these cover configuration loading and the CLI.
"""


class StyleProgressError(Exception):
    """Base exception for StyleProgress errors."""
    pass


class ConfigurationError(StyleProgressError):
    """Configuration file missing or unreadable."""
    pass


class InvalidStageWeightsError(ConfigurationError):
    """Stage-weight table is empty or has non-positive weights."""
    pass


class InvalidBatchConfigError(ConfigurationError):
    """Batch sub-operation declarations are inconsistent."""
    pass

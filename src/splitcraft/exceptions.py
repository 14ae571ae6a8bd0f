"""Exception and warning types raised by SplitCraft."""

from __future__ import annotations


class SplitCraftError(Exception):
    """Base class for all SplitCraft errors."""


class ConfigurationError(SplitCraftError, ValueError):
    """Requested columns, seeds or fold counts do not fit the input data.

    Raised before any statistic is computed; the pipeline never retries.
    """


class LeakageError(SplitCraftError):
    """A target vector was handed to a transform step that must not see it."""


class NotFittedError(SplitCraftError, AttributeError):
    """A transform was called on an estimator that has not been fitted."""


class InvariantViolation(SplitCraftError, AssertionError):
    """Internal consistency check failed (overlapping partitions, shape mismatch).

    Correct input never triggers this; it signals a programming error.
    """


class DataQualityWarning(UserWarning):
    """Non-fatal data issue: dropped rows, empty columns, degenerate scales."""


__all__ = [
    "ConfigurationError",
    "DataQualityWarning",
    "InvariantViolation",
    "LeakageError",
    "NotFittedError",
    "SplitCraftError",
]

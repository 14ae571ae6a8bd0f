"""Validation utilities for SplitCraft."""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

import pandas as pd

from .exceptions import ConfigurationError, InvariantViolation, LeakageError
from .types import PartitionArrays, Schema


def validate_input_frame(
    df: pd.DataFrame,
    target: str,
    stratify_by: str,
    schema: Schema,
    encode_columns: Optional[Sequence[str]] = None,
) -> None:
    """Validate raw rows against the requested columns and schema."""
    if df.empty:
        raise ConfigurationError("Input rows are empty.")
    if df.columns.duplicated().any():
        raise ConfigurationError("Rows contain duplicated column names.")
    if target not in df.columns:
        raise ConfigurationError(f"Target '{target}' not found in rows.")
    if stratify_by not in df.columns:
        raise ConfigurationError(f"Stratification column '{stratify_by}' not found in rows.")
    if target in {c.name for c in schema.columns}:
        raise ConfigurationError(f"Target '{target}' must not appear among schema feature columns.")
    absent = [c.name for c in schema.columns if c.name not in df.columns]
    if absent:
        raise ConfigurationError(f"Schema columns not found in rows: {absent}")
    if encode_columns is not None:
        categorical = set(schema.categorical_columns)
        unknown = [c for c in encode_columns if c not in categorical]
        if unknown:
            raise ConfigurationError(f"Columns requested for target encoding are not categorical: {unknown}")


def check_disjoint(train: Iterable[int], test: Iterable[int]) -> None:
    overlap = set(train) & set(test)
    if overlap:
        raise InvariantViolation(f"{len(overlap)} row(s) appear in both train and test.")


def check_partition_shapes(name: str, part: PartitionArrays, width: int) -> None:
    """Every array of a partition must share one row count; numeric width is fixed."""
    n = part.n_rows
    if part.numeric.shape != (n, width):
        raise InvariantViolation(
            f"{name}: numeric matrix shape {part.numeric.shape} != ({n}, {width})"
        )
    for i, codes in enumerate(part.categorical):
        if codes.shape[0] != n:
            raise InvariantViolation(f"{name}: categorical array {i} has {codes.shape[0]} rows, expected {n}")
    if part.row_index.shape[0] != n:
        raise InvariantViolation(f"{name}: row index has {part.row_index.shape[0]} rows, expected {n}")


class LeakageGuardMixin:
    """Refuse targets in ``transform`` for estimators fit on the target."""

    raise_on_target_in_transform: bool = True

    def ensure_no_target_in_transform(self, y: Any) -> None:
        if y is not None and self.raise_on_target_in_transform:
            raise LeakageError(
                f"{type(self).__name__}.transform() received a target; "
                "encodings must come from fitted statistics only."
            )

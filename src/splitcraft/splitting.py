"""Stratified train/test splitting driven by the seeded sequence."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import pandas as pd

from .exceptions import ConfigurationError, InvariantViolation
from .logging import get_logger
from .schema import DEFAULT_MISSING_TOKENS, category_keys
from .sequence import permute
from .types import SplitResult

logger = get_logger(__name__)


def stratification_keys(
    df: pd.DataFrame,
    column: str,
    missing_tokens: Iterable[str] = DEFAULT_MISSING_TOKENS,
) -> list[str]:
    """Return one group key per row; missing cells share the ``__NA__`` group."""
    if column not in df.columns:
        raise ConfigurationError(f"Stratification column '{column}' not found in rows.")
    return list(category_keys(df[column], missing_tokens))


def stratified_split(keys: Sequence[str], train_fraction: float, seed: int) -> SplitResult:
    """Split row positions into train and test, group by group.

    Groups are visited in order of first appearance. Every group is permuted
    with the same ``seed`` and its first ``max(1, floor(size * train_fraction))``
    members go to train, so a singleton group never contributes to test.

    Args:
        keys: Group key for each row position
        train_fraction: Share of each group sent to train, in (0, 1]
        seed: DSG seed reused for every group

    Returns:
        SplitResult with train/test positions in concatenated group order
    """
    if not 0.0 < float(train_fraction) <= 1.0:
        raise ConfigurationError(f"train_fraction must be in (0, 1], got {train_fraction}")

    groups: dict[str, list[int]] = {}
    for i, key in enumerate(keys):
        groups.setdefault(key, []).append(i)

    train: list[int] = []
    test: list[int] = []
    counts: dict[str, tuple[int, int]] = {}
    for key, idxs in groups.items():
        shuffled = permute(idxs, seed)
        cut = max(1, math.floor(len(shuffled) * train_fraction))
        train.extend(shuffled[:cut])
        test.extend(shuffled[cut:])
        counts[key] = (cut, len(shuffled) - cut)

    if set(train) & set(test):
        raise InvariantViolation("Train and test partitions overlap.")

    logger.debug(f"Stratified split over {len(groups)} groups: {len(train)} train / {len(test)} test")
    return SplitResult(train=train, test=test, group_counts=counts)


__all__ = ["stratification_keys", "stratified_split"]

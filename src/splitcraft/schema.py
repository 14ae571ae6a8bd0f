"""Schema construction and raw-value parsing for SplitCraft.

The preparation pipeline receives a :class:`~splitcraft.types.Schema`; it
never decides column kinds itself. :func:`infer_schema` is a convenience for
callers (and the CLI) who start from raw records.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from .exceptions import ConfigurationError
from .logging import get_logger
from .types import MISSING_TOKEN, CategoryMap, Row, Schema

logger = get_logger(__name__)

DEFAULT_MISSING_TOKENS: tuple[str, ...] = ("", "?")
NUMERIC_RATIO_THRESHOLD = 0.8


def records_to_frame(rows: Sequence[Row] | pd.DataFrame) -> pd.DataFrame:
    """Materialize row records as an object DataFrame with a 0..n-1 index."""
    if isinstance(rows, pd.DataFrame):
        return rows.reset_index(drop=True)
    df = pd.DataFrame.from_records(list(rows))
    return df.reset_index(drop=True)


def is_missing(value: Any, missing_tokens: Iterable[str] = DEFAULT_MISSING_TOKENS) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and value.strip() in set(missing_tokens):
        return True
    return False


def normalize_category(value: Any, missing_tokens: Iterable[str] = DEFAULT_MISSING_TOKENS) -> str:
    """Map a raw cell onto its category key (missing cells become ``__NA__``)."""
    if is_missing(value, missing_tokens):
        return MISSING_TOKEN
    return value.strip() if isinstance(value, str) else str(value)


def category_keys(series: pd.Series, missing_tokens: Iterable[str] = DEFAULT_MISSING_TOKENS) -> pd.Series:
    tokens = tuple(missing_tokens)
    return series.map(lambda v: normalize_category(v, tokens)).astype(object)


def to_numeric_series(series: pd.Series, missing_tokens: Iterable[str] = DEFAULT_MISSING_TOKENS) -> pd.Series:
    """Parse a raw column into float64; unparseable and non-finite cells become NaN."""
    tokens = set(missing_tokens)
    cleaned = series.map(
        lambda v: np.nan if is_missing(v, tokens) else (v.strip() if isinstance(v, str) else v)
    )
    out = pd.to_numeric(cleaned, errors="coerce").astype(float)
    return out.where(np.isfinite(out))


def to_numeric_frame(
    df: pd.DataFrame,
    columns: Sequence[str],
    missing_tokens: Iterable[str] = DEFAULT_MISSING_TOKENS,
) -> pd.DataFrame:
    tokens = tuple(missing_tokens)
    return pd.DataFrame(
        {c: to_numeric_series(df[c], tokens) for c in columns},
        index=df.index,
        columns=list(columns),
    )


def build_category_map(series: pd.Series, missing_tokens: Iterable[str] = DEFAULT_MISSING_TOKENS) -> CategoryMap:
    return CategoryMap.from_values(list(category_keys(series, missing_tokens)))


def infer_schema(
    rows: Sequence[Row] | pd.DataFrame,
    target: str,
    numeric_threshold: float = NUMERIC_RATIO_THRESHOLD,
    missing_tokens: Iterable[str] = DEFAULT_MISSING_TOKENS,
    categorical_overrides: Optional[Iterable[str]] = None,
) -> Schema:
    """Classify columns as numeric or categorical by their parseable share.

    Args:
        rows: Raw records or an already-built DataFrame
        target: Target column (excluded from the schema)
        numeric_threshold: Minimum share of finite numeric cells for a numeric column
        missing_tokens: Raw values treated as missing
        categorical_overrides: Columns forced to categorical regardless of content

    Returns:
        Schema with numeric columns first, then categorical columns, each in
        source order
    """
    df = records_to_frame(rows)
    if df.empty:
        raise ConfigurationError("Cannot infer a schema from zero rows.")
    if target not in df.columns:
        raise ConfigurationError(f"Target '{target}' not found in columns.")

    tokens = tuple(missing_tokens)
    forced = set(categorical_overrides or ())
    numeric, categorical = [], []
    for col in df.columns:
        if col == target:
            continue
        ratio = float(to_numeric_series(df[col], tokens).notna().mean())
        if col not in forced and ratio >= numeric_threshold:
            numeric.append(col)
        else:
            categorical.append(col)
        logger.debug(f"Column '{col}': numeric share {ratio:.2f}")

    maps = {c: build_category_map(df[c], tokens) for c in categorical}
    logger.info(f"Inferred schema: {len(numeric)} numeric, {len(categorical)} categorical columns")
    return Schema.from_lists(numeric, categorical, maps)


__all__ = [
    "build_category_map",
    "category_keys",
    "infer_schema",
    "is_missing",
    "normalize_category",
    "records_to_frame",
    "to_numeric_frame",
    "to_numeric_series",
]

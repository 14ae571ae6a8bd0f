"""Column parsing and target transformers for SplitCraft."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from .exceptions import ConfigurationError, NotFittedError
from .logging import get_logger
from .schema import DEFAULT_MISSING_TOKENS, to_numeric_frame
from .types import TargetBounds

logger = get_logger(__name__)


class NumericConverter(BaseEstimator, TransformerMixin):
    """Convert raw string columns to float, turning missing tokens and junk into NaN."""

    def __init__(
        self,
        columns: Sequence[str] | None = None,
        missing_tokens: Sequence[str] = DEFAULT_MISSING_TOKENS,
    ) -> None:
        """Initialize with optional column list."""
        self.columns = columns
        self.missing_tokens = missing_tokens
        self.columns_: list[str] = []

    def fit(self, X: pd.DataFrame, y: pd.Series | None = None) -> "NumericConverter":
        """Fit converter (just stores column names)."""
        df = pd.DataFrame(X)
        self.columns_ = list(self.columns) if self.columns is not None else list(df.columns)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        """Transform by converting to numeric with coercion."""
        df = pd.DataFrame(X)
        missing = [c for c in self.columns_ if c not in df.columns]
        if missing:
            raise ConfigurationError(f"Numeric columns missing from rows: {missing}")
        return to_numeric_frame(df, self.columns_, self.missing_tokens)

    def get_feature_names_out(self, input_features: Sequence[str] | None = None) -> list[str]:
        """Get output feature names."""
        return self.columns_


class WinsorizedLogTarget(BaseEstimator, TransformerMixin):
    """Clip a numeric target to training quantiles, then apply ``log1p``.

    Bounds come from the finite values passed to ``fit`` (the training target
    only). ``transform`` keeps NaN for rows whose raw target did not parse, so
    the caller can drop them afterwards.

    Args:
        low_quantile: Lower clip quantile (linear interpolation)
        high_quantile: Upper clip quantile (linear interpolation)

    Attributes:
        bounds_: Fitted TargetBounds
    """

    def __init__(self, low_quantile: float = 0.05, high_quantile: float = 0.95) -> None:
        self.low_quantile = low_quantile
        self.high_quantile = high_quantile
        self.bounds_: TargetBounds | None = None

    def fit(self, X, y=None) -> "WinsorizedLogTarget":
        vals = np.asarray(X, dtype=float).reshape(-1)
        vals = vals[np.isfinite(vals)]
        if vals.size == 0:
            raise ConfigurationError("No finite training target values to fit winsorization bounds.")
        low = float(np.quantile(vals, self.low_quantile))
        high = float(np.quantile(vals, self.high_quantile))
        self.bounds_ = TargetBounds(low=low, high=high)
        logger.debug(f"Target clip bounds: [{low:.6g}, {high:.6g}] from {vals.size} training values")
        return self

    def clip(self, X) -> np.ndarray:
        if self.bounds_ is None:
            raise NotFittedError("WinsorizedLogTarget not fitted. Call fit() first.")
        vals = np.asarray(X, dtype=float).reshape(-1)
        return np.clip(vals, self.bounds_.low, self.bounds_.high)

    def transform(self, X) -> np.ndarray:
        clipped = self.clip(X)
        with np.errstate(invalid="ignore", divide="ignore"):
            return np.log1p(clipped)

    def inverse_transform(self, X) -> np.ndarray:
        return np.expm1(np.asarray(X, dtype=float))

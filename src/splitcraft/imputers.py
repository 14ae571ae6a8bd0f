"""Numeric imputation for SplitCraft."""

from __future__ import annotations

import warnings
from collections.abc import Sequence

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from .exceptions import DataQualityWarning, NotFittedError
from .logging import get_logger

logger = get_logger(__name__)


class MedianImputer(BaseEstimator, TransformerMixin):
    """Fill missing numeric cells with per-column medians.

    Expects already-parsed float columns (NaN marks a missing or unparseable
    cell). A column without a single parseable value imputes to 0.

    Args:
        columns: Columns to impute (None = every column seen in fit)

    Attributes:
        medians_: Column name to fill value
        columns_: Fitted column order
    """

    def __init__(self, columns: Sequence[str] | None = None) -> None:
        self.columns = columns
        self.medians_: dict[str, float] = {}
        self.columns_: list[str] = []
        self.fitted_ = False

    def fit(self, X: pd.DataFrame, y: pd.Series | None = None) -> "MedianImputer":
        df = pd.DataFrame(X)
        self.columns_ = list(self.columns) if self.columns is not None else list(df.columns)
        self.medians_ = {}
        for col in self.columns_:
            vals = df[col].to_numpy(dtype=float)
            vals = vals[np.isfinite(vals)]
            if vals.size == 0:
                msg = f"Numeric column '{col}' has no parseable values; imputing 0."
                logger.warning(msg)
                warnings.warn(msg, DataQualityWarning, stacklevel=2)
                self.medians_[col] = 0.0
            else:
                self.medians_[col] = float(np.median(vals))
        self.fitted_ = True
        logger.debug(f"Fitted MedianImputer on {len(df)} rows, {len(self.columns_)} columns")
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        if not self.fitted_:
            raise NotFittedError("MedianImputer not fitted. Call fit() first.")
        df = pd.DataFrame(X).copy()
        for col in self.columns_:
            s = df[col].astype(float)
            df[col] = s.where(np.isfinite(s), self.medians_[col])
        return df

    def get_feature_names_out(self, input_features: Sequence[str] | None = None) -> list[str]:
        return list(self.columns_)

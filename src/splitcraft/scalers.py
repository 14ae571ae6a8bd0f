"""Robust scaling for SplitCraft."""

from __future__ import annotations

import warnings
from typing import Optional, Sequence

import numpy as np
from sklearn.base import BaseEstimator, TransformerMixin

from .exceptions import DataQualityWarning, NotFittedError
from .logging import get_logger
from .types import ScalingStat

logger = get_logger(__name__)

MAD_CONSISTENCY = 1.4826


def median_mad(values: np.ndarray) -> tuple[float, float]:
    vals = np.asarray(values, dtype=float)
    median = float(np.median(vals))
    return median, float(np.median(np.abs(vals - median)))


def robust_stats(values: np.ndarray, mad_scale: float = MAD_CONSISTENCY) -> ScalingStat:
    """Median and scaled median absolute deviation of one column.

    A zero scale (constant column) is replaced by 1.
    """
    median, mad = median_mad(values)
    scale = mad_scale * mad
    return ScalingStat(median=median, scale=scale if scale != 0 else 1.0)


class RobustMADScaler(BaseEstimator, TransformerMixin):
    """Center by median and divide by ``mad_scale * MAD``, column by column.

    Fit on training rows only; the same parameters are reused verbatim for
    every other partition.

    Args:
        mad_scale: Consistency constant applied to the MAD
        feature_names: Optional names used in log messages and feature names

    Attributes:
        stats_: One ScalingStat per column
    """

    def __init__(self, mad_scale: float = MAD_CONSISTENCY, feature_names: Optional[Sequence[str]] = None) -> None:
        self.mad_scale = mad_scale
        self.feature_names = feature_names
        self.stats_: list[ScalingStat] = []
        self.n_features_in_: int = 0
        self.fitted_ = False

    def fit(self, X, y=None) -> "RobustMADScaler":
        arr = np.asarray(X, dtype=float)
        if arr.ndim != 2 or arr.shape[0] == 0:
            raise ValueError(f"RobustMADScaler needs a non-empty 2-D array, got shape {arr.shape}")
        self.n_features_in_ = arr.shape[1]
        names = self.get_feature_names_out()
        self.stats_ = []
        for j in range(arr.shape[1]):
            stat = robust_stats(arr[:, j], self.mad_scale)
            if stat.scale == 1.0 and median_mad(arr[:, j])[1] == 0:
                msg = f"Column '{names[j]}' has zero MAD on training rows; scale floored to 1."
                logger.warning(msg)
                warnings.warn(msg, DataQualityWarning, stacklevel=2)
            self.stats_.append(stat)
        self.fitted_ = True
        return self

    def _params(self) -> tuple[np.ndarray, np.ndarray]:
        if not self.fitted_:
            raise NotFittedError("RobustMADScaler not fitted. Call fit() first.")
        medians = np.array([s.median for s in self.stats_], dtype=float)
        scales = np.array([s.scale for s in self.stats_], dtype=float)
        return medians, scales

    def transform(self, X) -> np.ndarray:
        medians, scales = self._params()
        arr = np.asarray(X, dtype=float)
        if arr.shape[1] != medians.shape[0]:
            raise ValueError(f"Expected {medians.shape[0]} columns, got {arr.shape[1]}")
        return (arr - medians) / scales

    def inverse_transform(self, X) -> np.ndarray:
        medians, scales = self._params()
        return np.asarray(X, dtype=float) * scales + medians

    def get_feature_names_out(self, input_features: Optional[Sequence[str]] = None) -> list[str]:
        if self.feature_names is not None:
            return list(self.feature_names)
        if input_features is not None:
            return list(input_features)
        return [f"x{j}" for j in range(self.n_features_in_)]

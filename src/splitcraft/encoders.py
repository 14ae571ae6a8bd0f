"""Out-of-fold target encoding for SplitCraft."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from .exceptions import ConfigurationError, NotFittedError
from .logging import get_logger
from .schema import DEFAULT_MISSING_TOKENS, category_keys
from .sequence import permute
from .types import UNKNOWN_TOKEN
from .validators import LeakageGuardMixin

logger = get_logger(__name__)


def smoothed_mean(total: float, count: int, prior: float, alpha: float) -> float:
    """Shrink a category mean toward ``prior``; used by both fold and full maps."""
    return (total + alpha * prior) / (count + alpha)


def assign_folds(train_index: Sequence[int], n_splits: int, seed: int) -> dict[int, int]:
    """Permute training rows with the DSG and deal them round-robin into folds."""
    return {int(idx): k % n_splits for k, idx in enumerate(permute(train_index, seed))}


def _category_stats(keys: np.ndarray, target: np.ndarray) -> dict[str, tuple[float, int]]:
    if keys.size == 0:
        return {}
    temp = pd.DataFrame({"key": keys, "target": target})
    agg = temp.groupby("key", sort=True)["target"].agg(["sum", "count"])
    return {k: (float(s), int(c)) for k, s, c in zip(agg.index, agg["sum"], agg["count"])}


def _build_map(stats: dict[str, tuple[float, int]], prior: float, alpha: float) -> dict[str, float]:
    m = {UNKNOWN_TOKEN: prior}
    for key, (total, count) in stats.items():
        m[key] = float(smoothed_mean(total, count, prior, alpha))
    return m


class OutOfFoldTargetEncoder(BaseEstimator, TransformerMixin, LeakageGuardMixin):
    """Out-of-fold target encoder keyed by source row ids.

    ``fit`` receives the training rows (DataFrame index = source row id) and
    their raw target. Training rows are permuted with the DSG and dealt
    round-robin into ``n_splits`` folds. For each encoded column the encoder
    keeps one map per fold, built from every training row *outside* that
    fold, and one full map built from all training rows.

    ``transform`` looks rows up by index: a row that belongs to a fold gets
    its fold's map, so its own target never contributes to its own value;
    any other row (test rows) gets the full map. Unseen categories fall back
    to ``__UNK__``, the global training mean.

    Args:
        cols: Columns to encode (None = every column passed to fit)
        n_splits: Number of folds
        smoothing: Shrinkage strength ``alpha`` toward the global mean
        random_state: DSG seed for the fold assignment
        missing_tokens: Raw values mapped to the ``__NA__`` category
        raise_on_target_in_transform: Raise LeakageError if y reaches transform

    Attributes:
        fold_of_: Source row id to fold id
        fold_maps_: Column to list of per-fold maps
        full_maps_: Column to map fit on every training row
        global_prior_: Mean raw target over training rows with finite target
        columns_: Encoded columns

    Example:
        >>> enc = OutOfFoldTargetEncoder(n_splits=5, smoothing=10.0, random_state=1337)
        >>> train_encoded = enc.fit_transform(X_train, y_train)
        >>> test_encoded = enc.transform(X_test)
    """

    def __init__(
        self,
        cols: Optional[list[str]] = None,
        n_splits: int = 5,
        smoothing: float = 10.0,
        random_state: int = 1337,
        missing_tokens: Sequence[str] = DEFAULT_MISSING_TOKENS,
        raise_on_target_in_transform: bool = True,
    ) -> None:
        self.cols = cols
        self.n_splits = int(n_splits)
        self.smoothing = float(smoothing)
        self.random_state = int(random_state)
        self.missing_tokens = missing_tokens
        self.raise_on_target_in_transform = raise_on_target_in_transform

        self.fold_of_: dict[int, int] = {}
        self.fold_maps_: dict[str, list[dict[str, float]]] = {}
        self.full_maps_: dict[str, dict[str, float]] = {}
        self.global_prior_: Optional[float] = None
        self.columns_: list[str] = []

    def fit(self, X: pd.DataFrame, y) -> "OutOfFoldTargetEncoder":
        """Learn fold maps and full maps from training rows.

        Args:
            X: Training rows; the index holds source row ids
            y: Raw (untransformed) training target aligned with X

        Returns:
            Self
        """
        df = pd.DataFrame(X)
        target = np.asarray(y, dtype=float).reshape(-1)
        if target.shape[0] != len(df):
            raise ConfigurationError(f"Target has {target.shape[0]} values for {len(df)} rows.")
        if len(df) < self.n_splits:
            raise ConfigurationError(
                f"n_splits={self.n_splits} exceeds the {len(df)} available training rows."
            )
        if df.index.has_duplicates:
            raise ConfigurationError("Training row ids must be unique.")

        self.columns_ = list(self.cols) if self.cols is not None else list(df.columns)
        absent = [c for c in self.columns_ if c not in df.columns]
        if absent:
            raise ConfigurationError(f"Columns to encode not found: {absent}")

        finite = np.isfinite(target)
        if not finite.any():
            raise ConfigurationError("No finite training target values for target encoding.")
        prior = float(target[finite].mean())
        self.global_prior_ = prior

        row_ids = [int(i) for i in df.index]
        self.fold_of_ = assign_folds(row_ids, self.n_splits, self.random_state)
        folds = np.array([self.fold_of_[i] for i in row_ids], dtype=int)

        self.fold_maps_ = {}
        self.full_maps_ = {}
        for col in self.columns_:
            keys = category_keys(df[col], self.missing_tokens).to_numpy(dtype=object)
            self.full_maps_[col] = _build_map(
                _category_stats(keys[finite], target[finite]), prior, self.smoothing
            )
            per_fold = []
            for f in range(self.n_splits):
                keep = finite & (folds != f)
                per_fold.append(_build_map(_category_stats(keys[keep], target[keep]), prior, self.smoothing))
            self.fold_maps_[col] = per_fold

        logger.debug(
            f"Fitted OutOfFoldTargetEncoder on {len(row_ids)} rows, {len(self.columns_)} columns, "
            f"{self.n_splits} folds (prior={prior:.6g})"
        )
        return self

    def _lookup(self, col: str, row_id: int, key: str) -> float:
        fold = self.fold_of_.get(row_id)
        m = self.full_maps_[col] if fold is None else self.fold_maps_[col][fold]
        return m.get(key, m[UNKNOWN_TOKEN])

    def transform(self, X: pd.DataFrame, y=None) -> np.ndarray:
        """Encode rows; training rows use their fold map, others the full map.

        Args:
            X: Rows to encode; the index holds source row ids
            y: Must be None

        Returns:
            Encoded values (n_samples, n_columns)
        """
        self.ensure_no_target_in_transform(y)
        if self.global_prior_ is None:
            raise NotFittedError("OutOfFoldTargetEncoder not fitted. Call fit() or fit_transform() first.")

        df = pd.DataFrame(X)
        row_ids = [int(i) for i in df.index]
        out = np.empty((len(df), len(self.columns_)), dtype=float)
        for j, col in enumerate(self.columns_):
            keys = category_keys(df[col], self.missing_tokens)
            for i, (row_id, key) in enumerate(zip(row_ids, keys)):
                out[i, j] = self._lookup(col, row_id, key)
        return out

    def fit_transform(self, X: pd.DataFrame, y=None, **fit_params) -> np.ndarray:
        """Fit on training rows and return their out-of-fold encodings."""
        return self.fit(X, y).transform(X)

    def encoding_map(self, col: str, fold: Optional[int] = None) -> dict[str, float]:
        """Return a copy of one fold map, or the full map when ``fold`` is None."""
        if fold is None:
            return dict(self.full_maps_[col])
        return dict(self.fold_maps_[col][fold])

    def get_feature_names_out(self, input_features: Optional[list[str]] = None) -> list[str]:
        """Get output feature names."""
        return [f"te_{c}" for c in self.columns_]

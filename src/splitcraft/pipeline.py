"""Main TabularPreprocessor class for SplitCraft."""

from __future__ import annotations

import warnings
from contextlib import contextmanager
from copy import deepcopy
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .config import PipelineConfig
from .encoders import OutOfFoldTargetEncoder
from .exceptions import ConfigurationError, DataQualityWarning
from .imputers import MedianImputer
from .logging import get_logger
from .scalers import RobustMADScaler
from .schema import category_keys, records_to_frame, to_numeric_series
from .sequence import permute
from .settings import _deep_merge
from .splitting import stratification_keys, stratified_split
from .transformers import NumericConverter, WinsorizedLogTarget
from .types import CategoricalColumn, FinalSchema, PartitionArrays, PreparedData, Row, Schema
from .validators import check_disjoint, check_partition_shapes, validate_input_frame

logger = get_logger(__name__)


class TabularPreprocessor:
    """Turn raw row records into reproducible, leakage-controlled train/test arrays.

    Steps, in order: stratified split, median imputation, target winsorization
    and ``log1p``, out-of-fold target encoding, robust scaling, removal of rows
    without a finite target, and one seeded shuffle of the training order.
    Every statistic except the imputation medians is fit on training rows only.
    """

    def __init__(self, config: PipelineConfig | None = None) -> None:
        """Initialize with optional config."""
        self.cfg = config or PipelineConfig()
        self.imputer_: MedianImputer | None = None
        self.target_transformer_: WinsorizedLogTarget | None = None
        self.encoder_: OutOfFoldTargetEncoder | None = None
        self.scaler_: RobustMADScaler | None = None
        self.result_: PreparedData | None = None

    # ---------- Configuration API ----------
    def set_params(self, **overrides) -> "TabularPreprocessor":
        """Set configuration parameters sklearn-style.

        Example:
            >>> prep = TabularPreprocessor()
            >>> prep.set_params(train_fraction=0.7, n_splits=3)
        """
        current = _deep_merge(self.cfg.model_dump(), overrides)
        try:
            self.cfg = PipelineConfig(**current)
            logger.debug(f"Updated {len(overrides)} configuration parameters")
        except ValueError as e:
            logger.error(f"Failed to update configuration: {e}")
            raise ConfigurationError(f"Invalid configuration parameters: {e}") from e
        return self

    def get_params(self, deep: bool = True) -> dict:
        """Get configuration parameters sklearn-style."""
        if deep:
            return self.cfg.model_dump()
        return {"config": self.cfg}

    @contextmanager
    def with_overrides(self, **kwargs):
        """Context manager for temporary configuration overrides.

        Example:
            >>> with prep.with_overrides(seeds={"split": 7, "kfold": 1, "train_order": 2}):
            ...     prep.prepare(rows, schema)
        """
        original_cfg = deepcopy(self.cfg)
        try:
            self.set_params(**kwargs)
            yield self
        finally:
            self.cfg = original_cfg
            logger.debug("Restored original configuration after context")

    # ---------- Public API ----------
    def prepare(self, rows: Sequence[Row] | pd.DataFrame, schema: Schema) -> PreparedData:
        """Run the full preparation pipeline.

        Args:
            rows: Raw records (column name -> raw value), in source order
            schema: Column descriptors for the feature columns

        Returns:
            PreparedData with train/test arrays, scaling stats and the final schema
        """
        cfg = self.cfg
        tokens = tuple(cfg.missing_tokens)
        df = records_to_frame(rows)
        validate_input_frame(df, cfg.target, cfg.stratify_by, schema, cfg.encode_columns)
        encode_cols = list(cfg.encode_columns) if cfg.encode_columns is not None else schema.categorical_columns
        numeric_cols = schema.numeric_columns
        logger.info(
            f"Preparing {len(df)} rows: {len(numeric_cols)} numeric, "
            f"{len(schema.categorical_columns)} categorical, {len(encode_cols)} target-encoded"
        )

        # 1) stratified split
        keys = stratification_keys(df, cfg.stratify_by, tokens)
        split = stratified_split(keys, cfg.train_fraction, cfg.seeds.split)
        check_disjoint(split.train, split.test)
        train_pos = np.asarray(split.train, dtype=int)
        if encode_cols and len(split.train) < cfg.n_splits:
            raise ConfigurationError(
                f"n_splits={cfg.n_splits} exceeds the {len(split.train)} training rows."
            )

        # 2) numeric parsing + median imputation
        raw_num = NumericConverter(numeric_cols, tokens).fit(df).transform(df)
        self.imputer_ = MedianImputer(numeric_cols)
        self.imputer_.fit(raw_num.iloc[train_pos] if cfg.impute_on_train_only else raw_num)
        x_num = self.imputer_.transform(raw_num).to_numpy(dtype=float).reshape(len(df), len(numeric_cols))

        # 3) categorical codes
        codes = {
            col.name: category_keys(df[col.name], tokens).map(col.category_map.code).to_numpy(dtype=np.int32)
            for col in schema.columns
            if isinstance(col, CategoricalColumn)
        }

        # 4) target winsorization + log1p
        y_raw = to_numeric_series(df[cfg.target], tokens).to_numpy(dtype=float)
        low_q, high_q = cfg.clip_quantiles
        self.target_transformer_ = WinsorizedLogTarget(low_q, high_q).fit(y_raw[train_pos])
        y_log = self.target_transformer_.transform(y_raw)

        # 5) out-of-fold target encoding, appended after the base numeric columns
        feature_names = list(numeric_cols)
        global_mean = None
        if encode_cols:
            self.encoder_ = OutOfFoldTargetEncoder(
                cols=encode_cols,
                n_splits=cfg.n_splits,
                smoothing=cfg.smoothing,
                random_state=cfg.seeds.kfold,
                missing_tokens=tokens,
            )
            self.encoder_.fit(df[encode_cols].iloc[train_pos], y_raw[train_pos])
            encoded = self.encoder_.transform(df[encode_cols])
            feature_names += self.encoder_.get_feature_names_out()
            global_mean = self.encoder_.global_prior_
            x_plus = np.hstack([x_num, encoded])
        else:
            self.encoder_ = None
            x_plus = x_num
        width = x_plus.shape[1]
        final_schema = FinalSchema(
            base=schema,
            numeric_input_width=width,
            numeric_feature_names=tuple(feature_names),
        )

        # 6) robust scaling, fit on every training row
        self.scaler_ = RobustMADScaler(cfg.mad_scale, feature_names).fit(x_plus[train_pos])
        x_scaled = self.scaler_.transform(x_plus)

        # 7-8) drop rows without a finite target, order partitions, assemble
        valid = np.isfinite(y_log)
        train_rows = [i for i in split.train if valid[i]]
        test_rows = [i for i in split.test if valid[i]]
        dropped = sorted(i for i in split.train + split.test if not valid[i])
        if dropped:
            msg = f"Dropped {len(dropped)} row(s) with an unparseable target."
            logger.warning(msg)
            warnings.warn(msg, DataQualityWarning, stacklevel=2)
        train_order = permute(train_rows, cfg.seeds.train_order)
        check_disjoint(train_order, test_rows)

        train = self._assemble(train_order, x_scaled, codes, y_log, schema)
        test = self._assemble(test_rows, x_scaled, codes, y_log, schema)
        check_partition_shapes("train", train, width)
        check_partition_shapes("test", test, width)

        self.result_ = PreparedData(
            train=train,
            test=test,
            scaling_stats=list(self.scaler_.stats_),
            schema=final_schema,
            target_bounds=self.target_transformer_.bounds_,
            split=split,
            dropped_rows=dropped,
            global_target_mean=global_mean,
        )
        logger.info(
            f"Prepared {train.n_rows} train / {test.n_rows} test rows, numeric width {width}"
        )
        return self.result_

    @staticmethod
    def _assemble(
        order: Sequence[int],
        x_scaled: np.ndarray,
        codes: dict[str, np.ndarray],
        y_log: np.ndarray,
        schema: Schema,
    ) -> PartitionArrays:
        idx = np.asarray(order, dtype=np.int64)
        return PartitionArrays(
            numeric=x_scaled[idx],
            categorical=[codes[name][idx].reshape(-1, 1) for name in schema.categorical_columns],
            target=y_log[idx],
            row_index=idx,
        )


def prepare_datasets(
    rows: Sequence[Row] | pd.DataFrame,
    schema: Schema,
    config: Optional[PipelineConfig] = None,
    **overrides,
) -> PreparedData:
    """Functional entry point: ``TabularPreprocessor(config).prepare(rows, schema)``."""
    prep = TabularPreprocessor(config)
    if overrides:
        prep.set_params(**overrides)
    return prep.prepare(rows, schema)

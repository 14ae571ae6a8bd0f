"""SplitCraft: reproducible, leakage-controlled train/test preparation for tabular ML."""

from __future__ import annotations

from .cli import main
from .config import PipelineConfig, Seeds
from .encoders import OutOfFoldTargetEncoder, assign_folds, smoothed_mean
from .exceptions import (
    ConfigurationError,
    DataQualityWarning,
    InvariantViolation,
    LeakageError,
    NotFittedError,
    SplitCraftError,
)
from .imputers import MedianImputer
from .io import export_prepared, load_prepared, prepared_to_frames, read_records
from .pipeline import TabularPreprocessor, prepare_datasets
from .scalers import RobustMADScaler
from .schema import infer_schema
from .sequence import LCGSequence, lcg_next, permute
from .settings import load_config, save_config
from .splitting import stratified_split
from .transformers import NumericConverter, WinsorizedLogTarget
from .types import (
    CategoricalColumn,
    CategoryMap,
    FinalSchema,
    NumericColumn,
    PartitionArrays,
    PreparedData,
    ScalingStat,
    Schema,
)
from .version import version

__all__ = [
    "CategoricalColumn",
    "CategoryMap",
    "ConfigurationError",
    "DataQualityWarning",
    "FinalSchema",
    "InvariantViolation",
    "LCGSequence",
    "LeakageError",
    "MedianImputer",
    "NotFittedError",
    "NumericColumn",
    "NumericConverter",
    "OutOfFoldTargetEncoder",
    "PartitionArrays",
    "PipelineConfig",
    "PreparedData",
    "RobustMADScaler",
    "ScalingStat",
    "Schema",
    "Seeds",
    "SplitCraftError",
    "TabularPreprocessor",
    "WinsorizedLogTarget",
    "assign_folds",
    "export_prepared",
    "infer_schema",
    "lcg_next",
    "load_config",
    "load_prepared",
    "main",
    "permute",
    "prepare_datasets",
    "prepared_to_frames",
    "read_records",
    "save_config",
    "smoothed_mean",
    "stratified_split",
    "version",
]

"""Configuration settings for SplitCraft."""

from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

UINT32_LIMIT = 2**32


class Seeds(BaseModel):
    """Independent seeds for each stochastic step of the pipeline."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    split: int = Field(default=42, ge=0, lt=UINT32_LIMIT, description="Seed for per-group split permutation")
    kfold: int = Field(default=1337, ge=0, lt=UINT32_LIMIT, description="Seed for fold assignment")
    train_order: int = Field(default=777, ge=0, lt=UINT32_LIMIT, description="Seed for final training order")


class PipelineConfig(BaseModel):
    """Configuration for the SplitCraft preparation pipeline.

    All parameters can be set via:
    - Python API: PipelineConfig(param=value)
    - Environment variables: SPLITCRAFT__PARAM=value (SPLITCRAFT__SEEDS__SPLIT=7)
    - Config file: JSON
    - CLI: --set param=value
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    # ========== General ==========
    verbosity: int = Field(default=1, ge=0, le=3, description="Logging verbosity (0=quiet, 3=debug)")

    # ========== Columns ==========
    target: str = Field(default="price", min_length=1, description="Numeric target column")
    stratify_by: str = Field(default="make", min_length=1, description="Column used to stratify the split")
    encode_columns: Optional[List[str]] = Field(
        default=None,
        description="Categorical columns to target-encode (None = every categorical column)"
    )
    missing_tokens: Tuple[str, ...] = Field(
        default=("", "?"),
        description="Raw string values treated as missing"
    )

    # ========== Split ==========
    train_fraction: float = Field(
        default=0.8, gt=0.0, le=1.0,
        description="Share of each stratification group sent to train"
    )
    seeds: Seeds = Field(default_factory=Seeds, description="Seeds for split, folds and train order")

    # ========== Imputation ==========
    impute_on_train_only: bool = Field(
        default=False,
        description="Fit imputation medians on training rows only (default uses every row)"
    )

    # ========== Target ==========
    clip_quantiles: Tuple[float, float] = Field(
        default=(0.05, 0.95),
        description="Quantiles of the training target used for winsorization"
    )

    # ========== Target Encoding ==========
    n_splits: int = Field(default=5, ge=2, le=50, description="Number of out-of-fold encoding folds")
    smoothing: float = Field(
        default=10.0, ge=0.0,
        description="Shrinkage strength toward the global training mean"
    )

    # ========== Scaling ==========
    mad_scale: float = Field(
        default=1.4826, gt=0.0,
        description="Consistency constant applied to the median absolute deviation"
    )

    @field_validator("clip_quantiles")
    @classmethod
    def check_clip_quantiles(cls, v):
        """Ensure clip quantiles are valid."""
        if len(v) != 2:
            raise ValueError("clip_quantiles must be a tuple of 2 values")
        if not (0.0 <= v[0] <= v[1] <= 1.0):
            raise ValueError("clip_quantiles must satisfy 0 <= low <= high <= 1")
        return v

    @field_validator("encode_columns")
    @classmethod
    def check_encode_columns(cls, v):
        if v is not None and len(v) != len(set(v)):
            raise ValueError("encode_columns contains duplicates")
        return v

    @classmethod
    def from_env(cls, prefix: str = "SPLITCRAFT") -> "PipelineConfig":
        """Load configuration from environment variables.

        Example: SPLITCRAFT__TRAIN_FRACTION=0.75

        Args:
            prefix: Environment variable prefix

        Returns:
            PipelineConfig instance
        """
        from .settings import load_from_env
        env_config = load_from_env(prefix)
        return cls(**env_config)

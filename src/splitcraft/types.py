"""Typed containers shared across SplitCraft."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .exceptions import ConfigurationError

UNKNOWN_TOKEN = "__UNK__"
MISSING_TOKEN = "__NA__"

Row = Mapping[str, Any]


@dataclass(frozen=True)
class CategoryMap:
    """Dense integer codes for one categorical column.

    Code 0 is reserved for ``__UNK__``; observed values hold codes ``1..n``.
    """

    mapping: Mapping[str, int]
    size: int

    @classmethod
    def from_values(cls, values: Sequence[str]) -> "CategoryMap":
        """Build codes from observed values (sorted lexically, deduplicated)."""
        distinct = sorted(set(values))
        mapping = {UNKNOWN_TOKEN: 0}
        for i, v in enumerate(distinct):
            mapping[v] = i + 1
        return cls(mapping=mapping, size=len(distinct) + 1)

    def code(self, value: str) -> int:
        return int(self.mapping.get(value, 0))

    def __contains__(self, value: object) -> bool:
        return value in self.mapping


@dataclass(frozen=True)
class NumericColumn:
    name: str
    kind: str = field(default="numeric", init=False)


@dataclass(frozen=True)
class CategoricalColumn:
    name: str
    category_map: CategoryMap
    kind: str = field(default="categorical", init=False)

    @property
    def size(self) -> int:
        return self.category_map.size


ColumnDescriptor = Union[NumericColumn, CategoricalColumn]


@dataclass(frozen=True)
class Schema:
    """Ordered column descriptors for the feature columns (target excluded)."""

    columns: tuple[ColumnDescriptor, ...]

    def __post_init__(self) -> None:
        names = [c.name for c in self.columns]
        if len(names) != len(set(names)):
            raise ConfigurationError("Schema contains duplicated column names.")

    @classmethod
    def from_lists(
        cls,
        numeric_columns: Sequence[str],
        categorical_columns: Sequence[str],
        category_maps: Mapping[str, CategoryMap],
    ) -> "Schema":
        """Build a schema from the list-based form (numeric first, then categorical)."""
        cols: list[ColumnDescriptor] = [NumericColumn(n) for n in numeric_columns]
        for name in categorical_columns:
            cols.append(CategoricalColumn(name, category_maps[name]))
        return cls(columns=tuple(cols))

    @property
    def numeric_columns(self) -> list[str]:
        return [c.name for c in self.columns if isinstance(c, NumericColumn)]

    @property
    def categorical_columns(self) -> list[str]:
        return [c.name for c in self.columns if isinstance(c, CategoricalColumn)]

    @property
    def category_maps(self) -> dict[str, CategoryMap]:
        return {c.name: c.category_map for c in self.columns if isinstance(c, CategoricalColumn)}

    def to_dict(self) -> dict[str, Any]:
        return {
            "numeric_columns": self.numeric_columns,
            "categorical_columns": self.categorical_columns,
            "category_maps": {
                name: {"map": dict(cm.mapping), "size": cm.size}
                for name, cm in self.category_maps.items()
            },
        }


@dataclass(frozen=True)
class FinalSchema:
    """Schema plus the final numeric width produced by the assembler."""

    base: Schema
    numeric_input_width: int
    numeric_feature_names: tuple[str, ...]


@dataclass(frozen=True)
class ScalingStat:
    median: float
    scale: float


@dataclass(frozen=True)
class TargetBounds:
    low: float
    high: float


@dataclass(frozen=True)
class SplitResult:
    """Row positions per partition, in splitter order."""

    train: list[int]
    test: list[int]
    group_counts: dict[str, tuple[int, int]] = field(default_factory=dict)


@dataclass
class PartitionArrays:
    """Finished arrays for one partition, all sharing the same row order."""

    numeric: np.ndarray
    categorical: list[np.ndarray]
    target: np.ndarray
    row_index: np.ndarray

    @property
    def n_rows(self) -> int:
        return int(self.target.shape[0])

    def to_frame(
        self,
        numeric_names: Sequence[str],
        categorical_names: Sequence[str],
        target_name: str = "target",
    ) -> pd.DataFrame:
        """Flatten into a DataFrame indexed by source row id."""
        df = pd.DataFrame(self.numeric, columns=list(numeric_names), index=self.row_index)
        for name, codes in zip(categorical_names, self.categorical):
            df[f"{name}__code"] = codes.reshape(-1)
        df[target_name] = self.target
        return df


@dataclass
class PreparedData:
    """Everything the training layer consumes."""

    train: PartitionArrays
    test: PartitionArrays
    scaling_stats: list[ScalingStat]
    schema: FinalSchema
    target_bounds: TargetBounds
    split: SplitResult
    dropped_rows: list[int] = field(default_factory=list)
    global_target_mean: Optional[float] = None

    def summary(self) -> dict[str, Any]:
        return {
            "n_train": self.train.n_rows,
            "n_test": self.test.n_rows,
            "numeric_input_width": self.schema.numeric_input_width,
            "n_categorical": len(self.schema.base.categorical_columns),
            "dropped_rows": len(self.dropped_rows),
            "target_bounds": (self.target_bounds.low, self.target_bounds.high),
        }

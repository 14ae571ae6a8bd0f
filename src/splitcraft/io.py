"""Reading raw records and exporting prepared bundles."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional

import joblib
import pandas as pd

from .exceptions import ConfigurationError
from .logging import get_logger
from .types import PreparedData

logger = get_logger(__name__)


def sniff_separator(header_line: str) -> str:
    """Use ``;`` only when the header has semicolons and no commas."""
    return ";" if ";" in header_line and "," not in header_line else ","


def read_records(path: str | Path, target: Optional[str] = None) -> list[dict[str, str]]:
    """Read a delimited text file into row records with string values.

    Args:
        path: CSV file path
        target: If given, the header must contain this column

    Returns:
        One dict per data line, cells stripped, empty cells kept as ``""``
    """
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"Input file not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        header = fh.readline()
    sep = sniff_separator(header)

    df = pd.read_csv(p, sep=sep, dtype=str, keep_default_na=False, skip_blank_lines=True)
    df.columns = [str(c).strip() for c in df.columns]
    if target is not None and target not in df.columns:
        raise ConfigurationError(f"Column '{target}' not found in {p.name}")
    df = df.apply(lambda s: s.str.strip())
    logger.info(f"Read {len(df)} rows x {len(df.columns)} columns from {p.name} (sep='{sep}')")
    return df.to_dict(orient="records")


def export_prepared(prepared: PreparedData, out_path: str | Path) -> str:
    """Persist a PreparedData bundle with joblib and return its SHA256."""
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(prepared, p)
    checksum = hashlib.sha256(p.read_bytes()).hexdigest()
    logger.info(f"Prepared bundle exported to {p} with SHA256: {checksum[:16]}...")
    return checksum


def load_prepared(path: str | Path) -> PreparedData:
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"Bundle not found: {p}")
    obj = joblib.load(p)
    if not isinstance(obj, PreparedData):
        raise ConfigurationError(f"{p} does not contain a PreparedData bundle")
    return obj


def prepared_to_frames(prepared: PreparedData, target_name: str = "target") -> tuple[pd.DataFrame, pd.DataFrame]:
    """Flatten both partitions into DataFrames for inspection."""
    names = prepared.schema.numeric_feature_names
    cats = prepared.schema.base.categorical_columns
    return (
        prepared.train.to_frame(names, cats, target_name),
        prepared.test.to_frame(names, cats, target_name),
    )

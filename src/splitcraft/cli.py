"""Command-line interface for SplitCraft."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from .exceptions import SplitCraftError
from .io import export_prepared, read_records
from .logging import configure_logging, get_logger
from .pipeline import TabularPreprocessor
from .schema import NUMERIC_RATIO_THRESHOLD, infer_schema
from .settings import load_config, parse_overrides
from .types import PreparedData, Schema
from .version import version

logger = get_logger(__name__)
console = Console()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="splitcraft",
        description="Reproducible, leakage-controlled train/test preparation for tabular data.",
    )
    parser.add_argument("--version", action="version", version=f"splitcraft {version}")
    sub = parser.add_subparsers(dest="command", required=True)

    p_schema = sub.add_parser("schema", help="Infer and print the column schema of a CSV file")
    p_schema.add_argument("path", help="Input CSV file")
    p_schema.add_argument("--target", default="price", help="Target column (default: price)")
    p_schema.add_argument(
        "--numeric-threshold", type=float, default=NUMERIC_RATIO_THRESHOLD,
        help="Minimum parseable share for a numeric column",
    )

    p_prep = sub.add_parser("prepare", help="Split, encode and scale a CSV file")
    p_prep.add_argument("path", help="Input CSV file")
    p_prep.add_argument("--config", default=None, help="JSON config file")
    p_prep.add_argument("--target", default=None, help="Target column")
    p_prep.add_argument("--stratify", default=None, help="Stratification column")
    p_prep.add_argument("--encode", nargs="*", default=None, help="Categorical columns to target-encode")
    p_prep.add_argument("--train-fraction", type=float, default=None, help="Share of each group sent to train")
    p_prep.add_argument(
        "--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
        help="Override any config field, e.g. --set seeds.split=7",
    )
    p_prep.add_argument("--output", default=None, help="Write the prepared bundle (joblib) to this path")
    p_prep.add_argument("-v", "--verbosity", type=int, default=None, help="0=quiet .. 3=debug")
    return parser


def _schema_table(schema: Schema) -> Table:
    table = Table(title="Schema")
    table.add_column("Column")
    table.add_column("Kind")
    table.add_column("Cardinality", justify="right")
    for col in schema.columns:
        size = str(col.size) if col.kind == "categorical" else "-"
        table.add_row(col.name, col.kind, size)
    return table


def _summary_table(prepared: PreparedData) -> Table:
    table = Table(title="Prepared datasets")
    table.add_column("Partition")
    table.add_column("Rows", justify="right")
    table.add_column("Numeric width", justify="right")
    table.add_column("Categorical inputs", justify="right")
    for name, part in (("train", prepared.train), ("test", prepared.test)):
        table.add_row(
            name,
            str(part.n_rows),
            str(part.numeric.shape[1]),
            str(len(part.categorical)),
        )
    return table


def _cmd_schema(args: argparse.Namespace) -> int:
    rows = read_records(args.path, target=args.target)
    schema = infer_schema(rows, target=args.target, numeric_threshold=args.numeric_threshold)
    console.print(_schema_table(schema))
    return 0


def _cmd_prepare(args: argparse.Namespace) -> int:
    overrides = parse_overrides(args.overrides)
    for key, value in (
        ("target", args.target),
        ("stratify_by", args.stratify),
        ("encode_columns", args.encode),
        ("train_fraction", args.train_fraction),
        ("verbosity", args.verbosity),
    ):
        if value is not None:
            overrides[key] = value
    cfg = load_config(args.config, overrides=overrides)
    configure_logging(cfg.verbosity)

    rows = read_records(args.path, target=cfg.target)
    schema = infer_schema(rows, target=cfg.target, missing_tokens=cfg.missing_tokens)
    prepared = TabularPreprocessor(cfg).prepare(rows, schema)

    console.print(_summary_table(prepared))
    lo, hi = prepared.target_bounds.low, prepared.target_bounds.high
    console.print(f"Target clip bounds: [{lo:.6g}, {hi:.6g}]; dropped rows: {len(prepared.dropped_rows)}")
    if args.output:
        checksum = export_prepared(prepared, args.output)
        console.print(f"[green]Saved[/green] {args.output} (sha256 {checksum[:16]}...)")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the ``splitcraft`` command."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "schema":
            return _cmd_schema(args)
        return _cmd_prepare(args)
    except SplitCraftError as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.debug("CLI failure", exc_info=True)
        return 2


if __name__ == "__main__":
    sys.exit(main())


"""
@01_quickstart.py

Simple demonstration of SplitCraft library.
Shows how to turn raw car records into reproducible train/test arrays.
"""

import numpy as np

from splitcraft import PipelineConfig, infer_schema, prepare_datasets


def make_records(n=80, seed=0):
    """Synthetic car listings with a few missing cells, as raw strings."""
    rng = np.random.default_rng(seed)
    makes = ["audi", "bmw", "honda", "toyota", "volvo"]
    base = {"audi": 28000, "bmw": 34000, "honda": 15000, "toyota": 17000, "volvo": 24000}
    rows = []
    for i in range(n):
        make = makes[i % len(makes)]
        hp = int(rng.integers(70, 260))
        price = base[make] + 45 * hp + rng.normal(0, 2000)
        rows.append({
            "make": make,
            "fuel-type": "diesel" if rng.random() < 0.2 else "gas",
            "horsepower": str(hp) if rng.random() > 0.05 else "?",
            "curb-weight": str(int(rng.integers(1700, 3600))),
            "price": f"{price:.0f}" if rng.random() > 0.03 else "?",
        })
    return rows


def main():
    """Simple demonstration of SplitCraft library."""
    print("=" * 50)
    print("SplitCraft Library - Quick Start Demo")
    print("=" * 50)

    print("\n1. Building raw records...")
    rows = make_records()
    print(f"   {len(rows)} records, {len(rows[0])} columns")

    print("\n2. Inferring schema...")
    schema = infer_schema(rows, target="price")
    print(f"   Numeric: {schema.numeric_columns}")
    print(f"   Categorical: {schema.categorical_columns}")

    print("\n3. Preparing datasets...")
    cfg = PipelineConfig(target="price", stratify_by="make", train_fraction=0.8)
    prepared = prepare_datasets(rows, schema, cfg)
    for key, value in prepared.summary().items():
        print(f"   {key}: {value}")
    print(f"   Feature names: {list(prepared.schema.numeric_feature_names)}")

    print("\n4. Checking reproducibility...")
    again = prepare_datasets(rows, schema, cfg)
    same = np.array_equal(prepared.train.numeric, again.train.numeric)
    print(f"   Identical train matrix on rerun: {same}")

    print("\n" + "=" * 50)
    print("Demo completed successfully!")
    print("=" * 50)


if __name__ == "__main__":
    main()

"""Pytest fixtures for SplitCraft tests."""

import numpy as np
import pytest

from splitcraft import CategoryMap, PipelineConfig, Schema, Seeds


@pytest.fixture
def six_cars():
    """Six rows: make A x4, B x2."""
    prices = [10000, 12000, 11000, 9000, 20000, 21000]
    makes = ["A", "A", "A", "A", "B", "B"]
    hp = [100, 110, 105, 95, 150, 160]
    return [
        {"make": m, "horsepower": str(h), "price": str(p)}
        for m, h, p in zip(makes, hp, prices)
    ]


@pytest.fixture
def six_cars_schema():
    return Schema.from_lists(
        ["horsepower"],
        ["make"],
        {"make": CategoryMap.from_values(["A", "B"])},
    )


@pytest.fixture
def scenario_config():
    return PipelineConfig(
        target="price",
        stratify_by="make",
        train_fraction=0.8,
        seeds=Seeds(split=42, kfold=1337, train_order=777),
        n_splits=2,
    )


@pytest.fixture
def car_rows():
    """Sixty synthetic car records with a few missing cells."""
    rng = np.random.default_rng(0)
    makes = ["audi", "bmw", "toyota", "vw"]
    bodies = ["sedan", "hatchback", "wagon"]
    base = {"audi": 30000.0, "bmw": 35000.0, "toyota": 18000.0, "vw": 20000.0}
    rows = []
    for i in range(60):
        make = makes[i % 4]
        body = bodies[int(rng.integers(0, 3))]
        hp = int(rng.integers(70, 250))
        price = base[make] + 40.0 * hp + float(rng.normal(0, 1500))
        rows.append({
            "make": make,
            "body-style": body,
            "horsepower": str(hp),
            "curb-weight": str(int(rng.integers(1800, 3500))),
            "price": f"{price:.0f}",
        })
    rows[3]["horsepower"] = "?"
    rows[17]["horsepower"] = ""
    rows[8]["body-style"] = "?"
    return rows


@pytest.fixture
def car_schema(car_rows):
    from splitcraft.schema import build_category_map, records_to_frame

    df = records_to_frame(car_rows)
    return Schema.from_lists(
        ["horsepower", "curb-weight"],
        ["make", "body-style"],
        {c: build_category_map(df[c]) for c in ["make", "body-style"]},
    )

"""Tests for stratified splitting."""

import pytest

from splitcraft import ConfigurationError, permute, stratified_split
from splitcraft.schema import records_to_frame
from splitcraft.splitting import stratification_keys


def test_scenario_group_counts() -> None:
    keys = ["A", "A", "A", "A", "B", "B"]
    result = stratified_split(keys, 0.8, 42)
    assert result.group_counts == {"A": (3, 1), "B": (1, 1)}
    assert len(result.train) == 4
    assert len(result.test) == 2


def test_partition_coverage() -> None:
    keys = [k for k in "aabbbcccc" * 5] + ["solo"]
    result = stratified_split(keys, 0.7, 11)
    assert not set(result.train) & set(result.test)
    assert sorted(result.train + result.test) == list(range(len(keys)))
    for key, (n_train, n_test) in result.group_counts.items():
        assert n_train >= 1
        assert n_train + n_test == keys.count(key)
    assert result.group_counts["solo"] == (1, 0)


def test_groups_permuted_with_shared_seed() -> None:
    keys = ["x", "x", "x", "y", "y", "y"]
    result = stratified_split(keys, 0.5, 42)
    expected = permute([0, 1, 2], 42)[:1] + permute([3, 4, 5], 42)[:1]
    assert result.train == expected


def test_reproducible() -> None:
    keys = ["p", "q", "p", "q", "r", "p", "q"]
    assert stratified_split(keys, 0.6, 5) == stratified_split(keys, 0.6, 5)


def test_full_fraction_leaves_test_empty() -> None:
    result = stratified_split(["a", "b", "a"], 1.0, 3)
    assert result.test == []
    assert sorted(result.train) == [0, 1, 2]


@pytest.mark.parametrize("fraction", [0.0, -0.2, 1.5])
def test_invalid_fraction(fraction: float) -> None:
    with pytest.raises(ConfigurationError):
        stratified_split(["a", "b"], fraction, 1)


def test_missing_keys_share_a_group() -> None:
    df = records_to_frame([{"make": "?"}, {"make": ""}, {"make": "vw"}])
    assert stratification_keys(df, "make") == ["__NA__", "__NA__", "vw"]


def test_absent_stratification_column() -> None:
    df = records_to_frame([{"make": "vw"}])
    with pytest.raises(ConfigurationError):
        stratification_keys(df, "body-style")

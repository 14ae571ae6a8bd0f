"""Tests for config loading, environment overrides and validation."""

import json

import pytest

from splitcraft import ConfigurationError, PipelineConfig, load_config, save_config
from splitcraft.settings import load_from_env, parse_overrides


class TestPipelineConfig:
    def test_defaults(self) -> None:
        cfg = PipelineConfig()
        assert (cfg.seeds.split, cfg.seeds.kfold, cfg.seeds.train_order) == (42, 1337, 777)
        assert cfg.train_fraction == 0.8
        assert cfg.n_splits == 5
        assert cfg.smoothing == 10.0
        assert cfg.clip_quantiles == (0.05, 0.95)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"train_fraction": 0.0},
            {"train_fraction": 1.2},
            {"n_splits": 1},
            {"clip_quantiles": (0.9, 0.1)},
            {"encode_columns": ["make", "make"]},
            {"seeds": {"split": -1}},
            {"unknown_field": 1},
        ],
    )
    def test_invalid_values(self, kwargs) -> None:
        with pytest.raises(ValueError):
            PipelineConfig(**kwargs)


class TestEnvironment:
    def test_nested_keys_and_json_values(self) -> None:
        env = {
            "SPLITCRAFT__TRAIN_FRACTION": "0.75",
            "SPLITCRAFT__SEEDS__KFOLD": "3",
            "SPLITCRAFT__TARGET": "msrp",
            "OTHER__TARGET": "ignored",
        }
        assert load_from_env("SPLITCRAFT", env) == {
            "train_fraction": 0.75,
            "seeds": {"kfold": 3},
            "target": "msrp",
        }

    def test_load_config_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("SPLITCRAFT__N_SPLITS", "3")
        assert load_config().n_splits == 3
        assert load_config(use_env=False).n_splits == 5


class TestLoadConfig:
    def test_precedence(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"n_splits": 4, "smoothing": 2.0, "seeds": {"split": 9}}))
        monkeypatch.setenv("SPLITCRAFT__SMOOTHING", "3.0")
        cfg = load_config(path, overrides={"seeds": {"kfold": 11}})
        assert cfg.n_splits == 4
        assert cfg.smoothing == 3.0
        assert cfg.seeds.split == 9
        assert cfg.seeds.kfold == 11
        assert cfg.seeds.train_order == 777

    def test_invalid_values_wrapped(self) -> None:
        with pytest.raises(ConfigurationError):
            load_config(overrides={"train_fraction": 0}, use_env=False)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "absent.json")

    def test_save_then_load(self, tmp_path) -> None:
        cfg = PipelineConfig(encode_columns=["make"], seeds={"split": 1, "kfold": 2, "train_order": 3})
        path = save_config(cfg, tmp_path / "nested" / "cfg.json")
        assert load_config(path, use_env=False) == cfg


def test_parse_overrides() -> None:
    assert parse_overrides(["seeds.split=7", "train_fraction=0.7", "target=msrp"]) == {
        "seeds": {"split": 7},
        "train_fraction": 0.7,
        "target": "msrp",
    }
    with pytest.raises(ConfigurationError):
        parse_overrides(["no-equals-sign"])

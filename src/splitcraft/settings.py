"""Loading and saving PipelineConfig from environment and files."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from .config import PipelineConfig
from .exceptions import ConfigurationError
from .logging import get_logger

logger = get_logger(__name__)


def _parse_value(raw: str) -> Any:
    """Interpret an environment string as JSON when possible."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def load_from_env(prefix: str = "SPLITCRAFT", environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Collect ``PREFIX__FIELD`` variables into a nested config dict.

    Double underscores separate nesting levels, so ``SPLITCRAFT__SEEDS__KFOLD=3``
    becomes ``{"seeds": {"kfold": 3}}``.
    """
    env = os.environ if environ is None else environ
    marker = f"{prefix}__"
    out: dict[str, Any] = {}
    for key, raw in env.items():
        if not key.startswith(marker):
            continue
        path = [p.lower() for p in key[len(marker):].split("__") if p]
        if not path:
            continue
        node = out
        for part in path[:-1]:
            node = node.setdefault(part, {})
        node[path[-1]] = _parse_value(raw)
    if out:
        logger.debug(f"Loaded {len(out)} config keys from environment prefix {prefix}")
    return out


def _deep_merge(base: dict[str, Any], extra: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in extra.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    path: Optional[str | Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    use_env: bool = True,
    env_prefix: str = "SPLITCRAFT",
) -> PipelineConfig:
    """Build a config from (in increasing precedence) file, environment and overrides.

    Args:
        path: Optional JSON config file
        overrides: Explicit values, e.g. parsed from ``--set key=value``
        use_env: Whether to read ``SPLITCRAFT__*`` variables
        env_prefix: Environment variable prefix

    Returns:
        Validated PipelineConfig
    """
    data: dict[str, Any] = {}
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise ConfigurationError(f"Config file not found: {p}")
        with p.open("r", encoding="utf-8") as fh:
            loaded = json.load(fh)
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file {p} must contain a JSON object")
        data = _deep_merge(data, loaded)
    if use_env:
        data = _deep_merge(data, load_from_env(env_prefix))
    if overrides:
        data = _deep_merge(data, overrides)
    try:
        return PipelineConfig(**data)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def save_config(config: PipelineConfig, path: str | Path) -> Path:
    """Write a config as JSON and return the written path."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(config.model_dump(mode="json"), indent=2), encoding="utf-8")
    logger.info(f"Saved config to {p}")
    return p


def parse_overrides(pairs: list[str]) -> dict[str, Any]:
    """Turn ``["seeds.split=7", "train_fraction=0.7"]`` into a nested dict."""
    out: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ConfigurationError(f"Override '{pair}' must look like key=value")
        key, raw = pair.split("=", 1)
        parts = [p for p in key.strip().split(".") if p]
        if not parts:
            raise ConfigurationError(f"Override '{pair}' has an empty key")
        node = out
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = _parse_value(raw.strip())
    return out

"""Layered configuration for the scoring engine.

Loads and merges configuration from:
1. Default settings (built-in)
2. A YAML config file
3. CLI parameters (override)

Evidence multipliers and risk thresholds are platform policy and are not part
of this configuration.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

from ..errors import ConfigurationError

DEFAULT_CONFIG: dict = {
    "scoring": {
        "keyword": {
            "base_fraction": 0.5,
            "positive_step": 0.1,
            "negative_step": 0.15,
        },
    },
    "gaps": {
        "threshold": 80,
    },
    "strategy": {
        "top_vendors": 3,
    },
    "output": {
        "format": "table",
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_config_file(config_path: Path) -> dict:
    """Load a YAML config file; a missing or empty file yields an empty dict."""
    if not config_path.exists():
        return {}
    content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return data


def get_effective_config(
    config_path: Optional[Path] = None,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is not None:
        file_config = load_config_file(config_path)
        if file_config:
            config = deep_merge(config, file_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    return config

# utils/config.py
"""Configuration file loaders (YAML for settings, TOML for keybindings)."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict

import structlog
import yaml

log = structlog.get_logger(__name__)


def load_toml_config(config_path: Path, config_name: str) -> Dict[str, Any]:
    """Load a TOML file; a missing or malformed file yields an empty dict."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        return {}
    try:
        with config_path.open("rb") as f:
            config_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        log.error(
            f"Error parsing TOML for {config_name}",
            path=str(config_path),
            error=str(e),
        )
        return {}
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data


def load_yaml_config(config_path: Path, config_name: str) -> Dict[str, Any]:
    """Load a YAML file. Missing files and parse errors are raised."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        raise FileNotFoundError(
            f"{config_name} configuration file not found: {config_path}"
        )
    try:
        with config_path.open("r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error(
            f"Error parsing YAML for {config_name}",
            path=str(config_path),
            error=str(e),
            exc_info=True,
        )
        raise
    if config_data is None:
        log.warning(f"{config_name} config file is empty.", path=str(config_path))
        return {}
    if not isinstance(config_data, dict):
        raise ValueError(f"{config_name} config must be a mapping, got {type(config_data).__name__}")
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data

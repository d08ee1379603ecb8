"""TOML configuration loading.

``config/default.toml`` is always read; ``config/{BACKOFFICE_ENV}.toml`` is
layered on top when present. Environment variables are applied later by
``Settings``.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "BACKOFFICE_CONFIG_DIR"
ENVIRONMENT_ENV = "BACKOFFICE_ENV"


def get_config_dir() -> Path:
    """BACKOFFICE_CONFIG_DIR if set, else ./config."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.cwd() / "config"


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config() -> dict[str, Any]:
    """Read default.toml plus the optional per-environment overlay.

    Raises:
        FileNotFoundError: If default.toml is missing
        tomllib.TOMLDecodeError: If either file is malformed
    """
    config_dir = get_config_dir()
    default_path = config_dir / "default.toml"
    if not default_path.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            f"Create it or set {CONFIG_DIR_ENV}."
        )

    config = load_toml(default_path)
    env_path = config_dir / f"{get_environment()}.toml"
    if env_path.is_file():
        config = deep_merge(config, load_toml(env_path))
    return config

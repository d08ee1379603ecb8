"""Configuration loading: TOML files, then BACKOFFICE_* environment variables."""

from backoffice.config.loader import load_config
from backoffice.config.settings import Settings, set_toml_config

__all__ = ["Settings", "load_config", "set_toml_config"]

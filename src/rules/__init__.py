"""Configuration and module rules for autodef."""

from rules.config import (
    AutodefConfig,
    ConfigError,
    PackagesConfig,
    load_config,
)
from rules.modules import Layout, ModuleRegistry, classify_path

__all__ = [
    "AutodefConfig",
    "ConfigError",
    "Layout",
    "ModuleRegistry",
    "PackagesConfig",
    "classify_path",
    "load_config",
]

"""Utility subpackage.

Public exports:
- Config dataclasses and validation utilities
- YAML/JSON/CSV IO convenience helpers
- Logging setup for scripts
"""

from .config import (
    MIN_MEASUREMENTS,
    FitConfig,
    ReportConfig,
    USLConfig,
    config_from_dict,
    deep_update,
    validate_config,
)
from .io import (
    ensure_dir,
    load_measurements_csv,
    load_yaml,
    save_json,
    save_measurements_csv,
    save_yaml,
)
from .logging_config import setup_logging

__all__ = [
    # config
    "MIN_MEASUREMENTS",
    "USLConfig",
    "FitConfig",
    "ReportConfig",
    "config_from_dict",
    "deep_update",
    "validate_config",
    # io
    "ensure_dir",
    "load_yaml",
    "save_yaml",
    "save_json",
    "load_measurements_csv",
    "save_measurements_csv",
    # logging
    "setup_logging",
]

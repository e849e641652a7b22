"""Utility subpackage.

Public exports:
- Config dataclasses, YAML loading and validation
- YAML/JSON/CSV IO convenience helpers
- Round-half-to-even helpers shared by prices and indicators
"""

from .config import (
    DataConfig,
    EngineConfig,
    ITrendConfig,
    MomersionConfig,
    config_from_dict,
    deep_update,
    load_config,
    parse_hhmm,
    validate_config,
    validate_engine_config,
    validate_momersion_config,
)
from .io import ensure_dir, load_yaml, save_csv, save_json, save_yaml
from .rounding import round_half_even, round_half_even_decimal

__all__ = [
    # config
    "ITrendConfig",
    "EngineConfig",
    "MomersionConfig",
    "DataConfig",
    "parse_hhmm",
    "deep_update",
    "config_from_dict",
    "load_config",
    "validate_config",
    "validate_engine_config",
    "validate_momersion_config",
    # io
    "ensure_dir",
    "load_yaml",
    "save_yaml",
    "save_json",
    "save_csv",
    # rounding
    "round_half_even",
    "round_half_even_decimal",
]

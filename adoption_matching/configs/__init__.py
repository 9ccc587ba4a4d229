"""Configuration loading for the matching engine."""

from .loader import (
    load_config,
    validate_config,
    get_config_value,
    resolve_config_path,
    setup_logging,
    DEFAULT_CONFIG_PATH,
)
from .scaler_config import ScalerConfig, EXPECTED_FEATURES, DEFAULT_FEATURE_NAMES

__all__ = [
    "load_config",
    "validate_config",
    "get_config_value",
    "resolve_config_path",
    "setup_logging",
    "DEFAULT_CONFIG_PATH",
    "ScalerConfig",
    "EXPECTED_FEATURES",
    "DEFAULT_FEATURE_NAMES",
]

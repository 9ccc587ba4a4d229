"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that the matching sections are well formed.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"

KNOWN_METRICS = ["manhattan", "euclidean"]
COMPATIBILITY_DIMENSIONS = ["size", "energy", "coexistence", "personality", "lifestyle"]


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    required_sections = ["global", "knn", "compatibility", "application"]
    for section in required_sections:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    if "knn" in config:
        knn = config["knn"] or {}
        if "scaler_config" not in knn:
            issues.append("Missing knn.scaler_config")
        n_neighbors = knn.get("n_neighbors")
        if n_neighbors is not None and (not isinstance(n_neighbors, int) or n_neighbors < 1):
            issues.append(f"knn.n_neighbors must be an integer >= 1, got {n_neighbors}")

    if "compatibility" in config:
        compatibility = config["compatibility"] or {}
        weights = compatibility.get("weights", {})
        for dim in COMPATIBILITY_DIMENSIONS:
            if dim not in weights:
                issues.append(f"Missing compatibility.weights.{dim}")
            elif weights[dim] < 0:
                issues.append(f"Compatibility weight for {dim} must be >= 0, got {weights[dim]}")
        if compatibility.get("max_distance", 15) <= 0:
            issues.append(f"compatibility.max_distance must be > 0, got {compatibility['max_distance']}")

    if "application" in config:
        threshold = (config["application"] or {}).get("eligibility_threshold", 70)
        if not 0 <= threshold <= 100:
            issues.append(f"application.eligibility_threshold must be in [0, 100], got {threshold}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "compatibility.weights.size")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def resolve_config_path(config_path: str, relative_to: str) -> Path:
    """Resolve a path found inside a config file against that file's directory."""
    path = Path(config_path)
    if path.is_absolute():
        return path
    return Path(relative_to).parent / path


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)

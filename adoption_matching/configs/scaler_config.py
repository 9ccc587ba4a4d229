"""
Pretrained scaler configuration for the nearest-neighbor ranker.

The scaler parameters are fitted offline on the PetFinder dataset and shipped
as a static artifact. This module loads that artifact into an immutable
value and enforces the 9-feature contract at construction time, so a
malformed artifact fails at start-up instead of in the middle of a request.

Artifact format (YAML or JSON):
    feature_names: [Age, MaturitySize, ...]   # 9 names
    scaler_mean:   [...]                      # 9 floats
    scaler_scale:  [...]                      # 9 floats
    n_neighbors:   15
    metric:        manhattan
    weights:       distance                   # informational only
    version:       "2024.1"                   # optional
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional, Sequence, Tuple

import numpy as np
from sklearn.exceptions import NotFittedError
from sklearn.preprocessing import StandardScaler
from sklearn.utils.validation import check_is_fitted

from ..exceptions import ScalerConfigError
from .loader import load_config

logger = logging.getLogger(__name__)

EXPECTED_FEATURES = 9

DEFAULT_FEATURE_NAMES = (
    "Age",
    "MaturitySize",
    "FurLength",
    "Health",
    "Vaccinated",
    "Dewormed",
    "Sterilized",
    "Fee",
    "PhotoAmt",
)


@dataclass(frozen=True)
class ScalerConfig:
    """
    Immutable scaler configuration.

    Attributes:
        feature_names: Names of the 9 features, in vector order
        scaler_mean: Per-feature mean used for standardization
        scaler_scale: Per-feature scale used for standardization
        n_neighbors: Default number of neighbors (K)
        metric: Distance metric name ("manhattan" or "euclidean")
        weights: Neighbor weighting used during training (diagnostic only)
        version: Artifact version label, if the artifact carries one
    """
    feature_names: Tuple[str, ...]
    scaler_mean: Tuple[float, ...]
    scaler_scale: Tuple[float, ...]
    n_neighbors: int
    metric: str = "manhattan"
    weights: str = "uniform"
    version: Optional[str] = None

    def __post_init__(self):
        """Normalize sequences to tuples and validate the feature contract."""
        try:
            object.__setattr__(self, "feature_names", tuple(str(n) for n in self.feature_names))
            object.__setattr__(self, "scaler_mean", tuple(float(v) for v in self.scaler_mean))
            object.__setattr__(self, "scaler_scale", tuple(float(v) for v in self.scaler_scale))
        except (TypeError, ValueError) as e:
            raise ScalerConfigError(f"Scaler config contains non-numeric values: {e}") from e

        self.validate()

    def validate(self) -> None:
        """Validate configuration values."""
        for attr in ["feature_names", "scaler_mean", "scaler_scale"]:
            length = len(getattr(self, attr))
            if length != EXPECTED_FEATURES:
                raise ScalerConfigError(
                    f"{attr} must have {EXPECTED_FEATURES} elements, got {length}"
                )
        if isinstance(self.n_neighbors, bool) or not isinstance(self.n_neighbors, (int, np.integer)):
            raise ScalerConfigError(f"n_neighbors must be an integer, got {self.n_neighbors!r}")
        if self.n_neighbors < 1:
            raise ScalerConfigError(f"n_neighbors must be at least 1, got {self.n_neighbors}")
        if any(s < 0 for s in self.scaler_scale):
            raise ScalerConfigError(f"scaler_scale values must be >= 0, got {self.scaler_scale}")

    @property
    def n_features(self) -> int:
        """Number of features every vector must have."""
        return len(self.scaler_mean)

    @property
    def mean_array(self) -> np.ndarray:
        """Scaler means as a read-only numpy array."""
        return _readonly(self.scaler_mean)

    @property
    def scale_array(self) -> np.ndarray:
        """Scaler scales as a read-only numpy array."""
        return _readonly(self.scaler_scale)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "feature_names": list(self.feature_names),
            "scaler_mean": list(self.scaler_mean),
            "scaler_scale": list(self.scaler_scale),
            "n_neighbors": self.n_neighbors,
            "metric": self.metric,
            "weights": self.weights,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScalerConfig":
        """Create from dictionary."""
        missing = [k for k in ["feature_names", "scaler_mean", "scaler_scale", "n_neighbors"] if k not in d]
        if missing:
            raise ScalerConfigError(f"Scaler config is missing keys: {missing}")

        return cls(
            feature_names=d["feature_names"],
            scaler_mean=d["scaler_mean"],
            scaler_scale=d["scaler_scale"],
            n_neighbors=d["n_neighbors"],
            metric=d.get("metric", "manhattan"),
            weights=d.get("weights", "uniform"),
            version=d.get("version"),
        )

    @classmethod
    def from_scaler(
        cls,
        scaler: StandardScaler,
        n_neighbors: int,
        metric: str = "manhattan",
        feature_names: Optional[Sequence[str]] = None,
        weights: str = "uniform"
    ) -> "ScalerConfig":
        """
        Create from a fitted scikit-learn StandardScaler.

        Args:
            scaler: Fitted sklearn.preprocessing.StandardScaler
            n_neighbors: Number of neighbors the ranker should use
            metric: Distance metric name
            feature_names: Feature names; defaults to the scaler's
                feature_names_in_ when present, else the standard names
            weights: Neighbor weighting label

        Returns:
            ScalerConfig instance
        """
        if not isinstance(scaler, StandardScaler):
            raise ScalerConfigError(f"Expected a StandardScaler, got {type(scaler).__name__}")
        try:
            check_is_fitted(scaler)
        except NotFittedError as e:
            raise ScalerConfigError(f"StandardScaler is not fitted: {e}") from e
        if not scaler.with_mean:
            raise ScalerConfigError("StandardScaler must be fitted with with_mean=True")

        if feature_names is None:
            feature_names = getattr(scaler, "feature_names_in_", DEFAULT_FEATURE_NAMES)

        # A scaler fitted with with_std=False has no scale_
        scale = scaler.scale_ if scaler.scale_ is not None else np.ones_like(scaler.mean_)

        return cls(
            feature_names=list(feature_names),
            scaler_mean=list(scaler.mean_),
            scaler_scale=list(scale),
            n_neighbors=int(n_neighbors),
            metric=metric,
            weights=weights,
        )

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved scaler config to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "ScalerConfig":
        """
        Load from a JSON or YAML artifact.

        Raises:
            FileNotFoundError: If the artifact doesn't exist
            ScalerConfigError: If the artifact violates the feature contract
        """
        path = Path(filepath)
        if path.suffix.lower() == ".json":
            if not path.exists():
                raise FileNotFoundError(f"Scaler config file not found: {filepath}")
            with open(path, "r") as f:
                d = json.load(f)
        else:
            d = load_config(str(path))

        if not isinstance(d, dict):
            raise ScalerConfigError(f"Scaler config must be a mapping: {filepath}")

        config = cls.from_dict(d)
        logger.info(
            f"Loaded scaler config from {filepath}: "
            f"{config.n_neighbors} neighbors, metric {config.metric}"
        )
        return config


def _readonly(values: Sequence[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    arr.setflags(write=False)
    return arr

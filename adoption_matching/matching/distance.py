"""
Scaling, distance and score functions for nearest-neighbor matching.

Scaling applies the pretrained StandardScaler parameters:
    scaled[i] = (x[i] - mean[i]) / scale[i]
A zero scale means the feature was constant during training; that
dimension contributes 0 instead of dividing by zero.

Distances are computed with scipy:
- manhattan: sum(|a[i] - b[i]|)
- euclidean: sqrt(sum((a[i] - b[i])^2))

Score transform (distance -> [0, 100], lower distance = higher score):
    score = 100 * exp(-decay * min(d, max_distance) / max_distance)
"""

import logging
import math
from typing import Sequence, Union

import numpy as np
from scipy.spatial import distance as sp_distance

from ..configs.scaler_config import ScalerConfig
from ..exceptions import FeatureShapeError
from ..utils import round_half_up

logger = logging.getLogger(__name__)

# Metric name -> scipy metric name
METRICS = {
    "manhattan": "cityblock",
    "euclidean": "euclidean",
}
DEFAULT_METRIC = "manhattan"

# With 9 standardized features, typical manhattan distances fall in [0, 30]
KNN_MAX_DISTANCE = 30.0
KNN_DECAY = 3.0

ArrayLike = Union[Sequence[float], np.ndarray]


def standard_scale(features: ArrayLike, config: ScalerConfig) -> np.ndarray:
    """
    Standardize one vector (D,) or a matrix of vectors (N x D).

    Args:
        features: Raw feature vector(s)
        config: Scaler configuration

    Returns:
        Scaled array with the same shape as features

    Raises:
        FeatureShapeError: If the feature dimension differs from the config's
    """
    arr = np.asarray(features, dtype=float)
    if arr.ndim not in (1, 2) or arr.shape[-1] != config.n_features:
        raise FeatureShapeError(
            f"standard_scale: expected {config.n_features} features, "
            f"got array of shape {arr.shape}"
        )

    scale = config.scale_array
    scaled = np.zeros(arr.shape, dtype=float)
    np.divide(arr - config.mean_array, scale, out=scaled, where=scale != 0)
    return scaled


def resolve_metric(metric: str) -> str:
    """
    Normalize a metric name.

    Unknown names fall back to manhattan with a warning instead of failing.
    """
    name = (metric or "").strip().lower()
    if name not in METRICS:
        logger.warning(f"Unknown distance metric: {metric!r}, using {DEFAULT_METRIC}")
        return DEFAULT_METRIC
    return name


def manhattan_distance(a: ArrayLike, b: ArrayLike) -> float:
    """Manhattan (L1) distance between two vectors."""
    a, b = _check_pair(a, b, "manhattan_distance")
    return float(sp_distance.cityblock(a, b))


def euclidean_distance(a: ArrayLike, b: ArrayLike) -> float:
    """Euclidean (L2) distance between two vectors."""
    a, b = _check_pair(a, b, "euclidean_distance")
    return float(sp_distance.euclidean(a, b))


def distance(a: ArrayLike, b: ArrayLike, metric: str = DEFAULT_METRIC) -> float:
    """Distance between two vectors under the named metric."""
    if resolve_metric(metric) == "euclidean":
        return euclidean_distance(a, b)
    return manhattan_distance(a, b)


def distances_to_many(query: ArrayLike, candidates: ArrayLike, metric: str = DEFAULT_METRIC) -> np.ndarray:
    """
    Distance from one query vector to every row of a candidate matrix.

    Args:
        query: Query vector (D,)
        candidates: Candidate matrix (N x D)
        metric: Metric name

    Returns:
        Array of distances (N,)
    """
    query = np.asarray(query, dtype=float)
    candidates = np.asarray(candidates, dtype=float)
    if query.ndim != 1 or candidates.ndim != 2 or candidates.shape[1] != query.shape[0]:
        raise FeatureShapeError(
            f"distances_to_many: incompatible shapes {query.shape} and {candidates.shape}"
        )
    if candidates.shape[0] == 0:
        return np.zeros(0, dtype=float)

    scipy_metric = METRICS[resolve_metric(metric)]
    return sp_distance.cdist(query.reshape(1, -1), candidates, metric=scipy_metric)[0]


def distance_to_score(
    dist: float,
    max_distance: float = KNN_MAX_DISTANCE,
    decay: float = KNN_DECAY
) -> float:
    """
    Convert a distance to a score in [0, 100], rounded to one decimal.

    Args:
        dist: Non-negative distance
        max_distance: Distance at which the score stops decreasing
        decay: Exponential decay rate

    Returns:
        Score; 100.0 for a distance of 0
    """
    normalized = min(dist, max_distance) / max_distance
    score = 100 * math.exp(-decay * normalized)
    return round_half_up(score, 1)


def calculate_percentile(value: float, sorted_values: Sequence[float]) -> float:
    """
    Percentage of values less than or equal to value.

    Args:
        value: Value to locate
        sorted_values: Reference values (ascending)

    Returns:
        Percentile in [0, 100]; 0 for an empty reference
    """
    if len(sorted_values) == 0:
        return 0.0
    count = int(np.count_nonzero(np.asarray(sorted_values, dtype=float) <= value))
    return count / len(sorted_values) * 100


def _check_pair(a: ArrayLike, b: ArrayLike, caller: str):
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.ndim != 1 or a.shape != b.shape:
        raise FeatureShapeError(
            f"{caller}: vectors must have the same length ({a.shape} vs {b.shape})"
        )
    return a, b

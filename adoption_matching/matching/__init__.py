"""Matching strategies: nearest-neighbor ranking and weighted compatibility scoring."""

from .base import MatchingStrategy, as_animal, as_animals, as_preferences
from .distance import (
    standard_scale,
    manhattan_distance,
    euclidean_distance,
    distance,
    distances_to_many,
    distance_to_score,
    calculate_percentile,
    resolve_metric,
)
from .distance_ranker import DistanceRanker
from .compatibility_scorer import CompatibilityScorer, CompatibilityWeights
from .strategies import create_strategy

__all__ = [
    "MatchingStrategy",
    "as_animal",
    "as_animals",
    "as_preferences",
    "standard_scale",
    "manhattan_distance",
    "euclidean_distance",
    "distance",
    "distances_to_many",
    "distance_to_score",
    "calculate_percentile",
    "resolve_metric",
    "DistanceRanker",
    "CompatibilityScorer",
    "CompatibilityWeights",
    "create_strategy",
]

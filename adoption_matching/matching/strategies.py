"""
Strategy factory.

Builds a matching strategy by name so callers can select one from
configuration without importing the concrete classes.
"""

import logging
from typing import Optional

from ..configs.scaler_config import ScalerConfig
from .base import MatchingStrategy
from .compatibility_scorer import CompatibilityScorer
from .distance_ranker import DistanceRanker

logger = logging.getLogger(__name__)

STRATEGIES = {
    DistanceRanker.name: DistanceRanker,
    CompatibilityScorer.name: CompatibilityScorer,
}


def create_strategy(name: str, scaler_config: Optional[ScalerConfig] = None, **kwargs) -> MatchingStrategy:
    """
    Create a matching strategy.

    Args:
        name: "knn" or "compatibility"
        scaler_config: Required for "knn"
        **kwargs: Passed to the strategy constructor (k for knn;
            weights / default_top_k for compatibility)

    Returns:
        MatchingStrategy instance

    Raises:
        ValueError: If the name is unknown or knn is requested without a
            scaler configuration
    """
    key = (name or "").strip().lower()
    if key not in STRATEGIES:
        raise ValueError(f"Unknown matching strategy: {name!r}. Available: {sorted(STRATEGIES)}")

    if key == DistanceRanker.name:
        if scaler_config is None:
            raise ValueError("The knn strategy requires a scaler configuration")
        return DistanceRanker(scaler_config, **kwargs)

    return CompatibilityScorer(**kwargs)

"""
Nearest-neighbor ranking of animals for an adopter.

Pipeline per request:
1. Encode the adopter once into the shared feature space
2. Encode every candidate animal
3. Standardize both with the pretrained scaler configuration
4. Compute adopter -> animal distances under the configured metric
5. Convert distances to bounded scores
6. Stable-sort by ascending distance, assign ranks, flag the K nearest

Candidates are independent of each other, so steps 2-5 run as vectorized
numpy operations over the whole candidate matrix; the only ordering step is
the final stable sort.
"""

import logging
from typing import Iterable, List, Optional

import numpy as np

from ..configs.scaler_config import ScalerConfig
from ..evaluation.metrics import MatchingStats, compute_matching_stats
from ..feature_engineering.feature_vectors import encode_adopter, encode_animal, explain_feature_vector
from ..inference.schema import AnimalProfile, MatchExplanation, MatchResult, RankingResult
from ..utils import round_half_up
from .base import (
    AnimalInput,
    MatchingStrategy,
    PreferencesInput,
    as_animal,
    as_animals,
    as_preferences,
    display_name,
)
from .distance import (
    distance,
    distance_to_score,
    distances_to_many,
    resolve_metric,
    standard_scale,
)

logger = logging.getLogger(__name__)


class DistanceRanker(MatchingStrategy):
    """
    K-nearest-neighbor ranker over standardized feature vectors.

    Lower distance is a better match; scores decrease with distance.

    Attributes:
        config: Immutable scaler configuration (shared, never modified)
        metric: Resolved distance metric name
    """

    name = "knn"
    higher_is_better = False

    def __init__(self, config: ScalerConfig, k: Optional[int] = None):
        """
        Initialize the ranker.

        Args:
            config: Scaler configuration loaded at start-up
            k: Number of neighbors; defaults to config.n_neighbors
        """
        self.config = config
        self.metric = resolve_metric(config.metric)
        self._k = _validate_k(k if k is not None else config.n_neighbors)
        logger.info(f"Initialized DistanceRanker with k={self._k}, metric={self.metric}")

    @property
    def k(self) -> int:
        """Current number of neighbors."""
        return self._k

    def set_k(self, k: int) -> None:
        """
        Change the number of neighbors.

        Raises:
            ValueError: If k < 1
        """
        self._k = _validate_k(k)

    def rank(
        self,
        preferences: PreferencesInput,
        animals: Iterable[AnimalInput],
        k: Optional[int] = None
    ) -> RankingResult:
        """
        Rank every candidate animal for an adopter.

        Args:
            preferences: Adopter preferences (should be marked completed)
            animals: Candidate animals
            k: Optional override of the number of neighbors

        Returns:
            RankingResult with all matches ordered by ascending distance and
            the top-k prefix
        """
        prefs = as_preferences(preferences)
        candidates = as_animals(animals)
        k = self._k if k is None else _validate_k(k)

        if not prefs.completed:
            logger.warning("Ranking animals for adopter preferences that are not marked completed")

        if not candidates:
            return RankingResult(
                top_matches=[],
                all_matches=[],
                adopter_vector=[],
                adopter_scaled_vector=[],
                k=k,
                total_count=0
            )

        adopter_vector = encode_adopter(prefs)
        adopter_scaled = standard_scale(adopter_vector, self.config)

        animal_vectors = np.vstack([encode_animal(a) for a in candidates])
        animal_scaled = standard_scale(animal_vectors, self.config)

        distances = distances_to_many(adopter_scaled, animal_scaled, self.metric)

        # Stable sort: equal distances keep input order
        order = np.argsort(distances, kind="stable")

        matches = []
        for position, idx in enumerate(order, start=1):
            matches.append(self._build_match(
                candidates[idx],
                float(distances[idx]),
                animal_vectors[idx],
                animal_scaled[idx],
                rank=position,
                is_top_k=position <= k
            ))

        logger.debug(
            f"Ranked {len(matches)} animals, best distance {matches[0].distance:.3f}, k={k}"
        )

        return RankingResult(
            top_matches=matches[:k],
            all_matches=matches,
            adopter_vector=adopter_vector.tolist(),
            adopter_scaled_vector=adopter_scaled.tolist(),
            k=k,
            total_count=len(candidates)
        )

    def match_one(self, preferences: PreferencesInput, animal: AnimalInput) -> MatchResult:
        """
        Score a single animal for an adopter.

        With no peer set to rank against, the result is always rank 1 and
        inside the top-K.
        """
        prefs = as_preferences(preferences)
        animal = as_animal(animal)

        adopter_scaled = standard_scale(encode_adopter(prefs), self.config)
        animal_vector = encode_animal(animal)
        animal_scaled = standard_scale(animal_vector, self.config)

        dist = distance(adopter_scaled, animal_scaled, self.metric)
        return self._build_match(animal, dist, animal_vector, animal_scaled, rank=1, is_top_k=True)

    def explain(self, preferences: PreferencesInput, animal: AnimalInput) -> MatchExplanation:
        """
        Explain a single match feature by feature.

        Differences are computed on the unscaled vectors so they read in the
        features' own units (months, codes, photos).
        """
        prefs = as_preferences(preferences)
        animal = as_animal(animal)

        match = self.match_one(prefs, animal)
        adopter_vector = encode_adopter(prefs)
        animal_vector = encode_animal(animal)

        names = self.config.feature_names
        differences = {
            name: round_half_up(abs(a - b), 2)
            for name, a, b in zip(names, adopter_vector, animal_vector)
        }

        return MatchExplanation(
            match=match,
            adopter_features=explain_feature_vector(adopter_vector, names),
            animal_features=explain_feature_vector(animal_vector, names),
            feature_differences=differences
        )

    def stats(self, preferences: PreferencesInput, animals: Iterable[AnimalInput]) -> MatchingStats:
        """Summarize the distance and score distribution of a ranking."""
        return compute_matching_stats(self.rank(preferences, animals))

    def evaluate(self, preferences: PreferencesInput, animals: Iterable[AnimalInput]) -> List[MatchResult]:
        return self.rank(preferences, animals).all_matches

    def evaluate_one(self, preferences: PreferencesInput, animal: AnimalInput) -> MatchResult:
        return self.match_one(preferences, animal)

    def _build_match(
        self,
        animal: AnimalProfile,
        dist: float,
        feature_vector: np.ndarray,
        scaled_vector: np.ndarray,
        rank: int,
        is_top_k: bool
    ) -> MatchResult:
        return MatchResult(
            animal_id=animal.id,
            animal_name=display_name(animal),
            distance=dist,
            score=distance_to_score(dist),
            rank=rank,
            is_top_k=is_top_k,
            feature_vector=np.asarray(feature_vector, dtype=float).tolist(),
            scaled_vector=np.asarray(scaled_vector, dtype=float).tolist()
        )


def _validate_k(k: int) -> int:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or k < 1:
        raise ValueError(f"k must be an integer of at least 1, got {k!r}")
    return int(k)

"""
Matching engine built once at process start.

This module provides the facade that:
1. Loads the YAML configuration and the pretrained scaler artifact
2. Builds the nearest-neighbor ranker, the compatibility scorer and the
   application scorer
3. Exposes recommendation, explanation, statistics and application
   scoring to the calling service

The scaler configuration is loaded exactly once and shared read-only by
every request; nothing here performs I/O after construction.
"""

import logging
from typing import Dict, Any, Iterable, List, Optional

from .configs.loader import (
    DEFAULT_CONFIG_PATH,
    get_config_value,
    load_config,
    resolve_config_path,
    validate_config,
)
from .configs.scaler_config import ScalerConfig
from .evaluation.metrics import MatchingStats
from .inference.schema import (
    ApplicationScore,
    CompatibilityResult,
    MatchExplanation,
    MatchResult,
    RankingResult,
)
from .matching.base import AnimalInput, PreferencesInput
from .matching.compatibility_scorer import CompatibilityScorer, CompatibilityWeights
from .matching.distance_ranker import DistanceRanker
from .scoring.application_scorer import (
    DEFAULT_ELIGIBILITY_THRESHOLD,
    AnimalOrAgeClass,
    ApplicationScorer,
    FormInput,
)

logger = logging.getLogger(__name__)


class MatchingEngine:
    """
    Facade over the matching and scoring components.

    Attributes:
        scaler_config: Immutable scaler configuration
        ranker: Nearest-neighbor ranker
        compatibility: Weighted compatibility scorer
        application_scorer: Application rubric scorer
        config: Main configuration dictionary (empty when built directly)
    """

    def __init__(
        self,
        scaler_config: ScalerConfig,
        compatibility_weights: Optional[CompatibilityWeights] = None,
        eligibility_threshold: float = DEFAULT_ELIGIBILITY_THRESHOLD,
        default_top_k: int = 10,
        n_neighbors: Optional[int] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the engine.

        Args:
            scaler_config: Scaler configuration for the ranker
            compatibility_weights: Compatibility scorer weights
            eligibility_threshold: Application eligibility threshold
            default_top_k: Default length of compatibility top matches
            n_neighbors: Override of the scaler configuration's K
            config: Main configuration the engine was built from
        """
        self.scaler_config = scaler_config
        self.ranker = DistanceRanker(scaler_config, k=n_neighbors)
        self.compatibility = CompatibilityScorer(compatibility_weights, default_top_k=default_top_k)
        self.application_scorer = ApplicationScorer(eligibility_threshold)
        self.config = config or {}
        logger.info(
            f"Initialized MatchingEngine (scaler version={scaler_config.version}, "
            f"k={self.ranker.k}, eligibility_threshold={eligibility_threshold})"
        )

    @classmethod
    def from_config_file(cls, config_path: Optional[str] = None) -> "MatchingEngine":
        """
        Build the engine from a YAML configuration file.

        Args:
            config_path: Path to config.yaml; defaults to the packaged one

        Returns:
            MatchingEngine instance

        Raises:
            FileNotFoundError: If the config or scaler artifact is missing
            ScalerConfigError: If the scaler artifact is malformed
        """
        config_path = str(config_path or DEFAULT_CONFIG_PATH)
        config = load_config(config_path)

        issues = validate_config(config)
        for issue in issues:
            logger.warning(f"Config issue: {issue}")

        scaler_path = resolve_config_path(
            get_config_value(config, "knn.scaler_config", "knn_scaler_config.yaml"),
            config_path
        )
        scaler_config = ScalerConfig.load(str(scaler_path))

        return cls(
            scaler_config=scaler_config,
            compatibility_weights=CompatibilityWeights.from_config(config),
            eligibility_threshold=get_config_value(
                config, "application.eligibility_threshold", DEFAULT_ELIGIBILITY_THRESHOLD
            ),
            default_top_k=get_config_value(config, "compatibility.default_top_k", 10),
            n_neighbors=get_config_value(config, "knn.n_neighbors"),
            config=config
        )

    # Nearest-neighbor ranking

    def recommend(
        self,
        preferences: PreferencesInput,
        animals: Iterable[AnimalInput],
        k: Optional[int] = None
    ) -> RankingResult:
        """Rank animals for an adopter by distance (lower is better)."""
        return self.ranker.rank(preferences, animals, k=k)

    def match_one(self, preferences: PreferencesInput, animal: AnimalInput) -> MatchResult:
        return self.ranker.match_one(preferences, animal)

    def explain(self, preferences: PreferencesInput, animal: AnimalInput) -> MatchExplanation:
        return self.ranker.explain(preferences, animal)

    def stats(self, preferences: PreferencesInput, animals: Iterable[AnimalInput]) -> MatchingStats:
        return self.ranker.stats(preferences, animals)

    def set_k(self, k: int) -> None:
        """Change the ranker's number of neighbors."""
        self.ranker.set_k(k)
        logger.info(f"Set k={k}")

    # Weighted compatibility

    def compatibility_scores(
        self,
        preferences: PreferencesInput,
        animals: Iterable[AnimalInput]
    ) -> List[CompatibilityResult]:
        """Score animals by weighted compatibility (higher is better)."""
        return self.compatibility.score(preferences, animals)

    def top_matches(
        self,
        preferences: PreferencesInput,
        animals: Iterable[AnimalInput],
        top_k: Optional[int] = None
    ) -> List[CompatibilityResult]:
        return self.compatibility.top_matches(preferences, animals, top_k=top_k)

    # Applications

    def score_application(self, form: FormInput, animal: AnimalOrAgeClass) -> ApplicationScore:
        """Score an adoption application against the target animal."""
        return self.application_scorer.score(form, animal)

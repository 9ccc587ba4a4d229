"""
Summary statistics and diagnostics for match lists.

Used by support and debug tooling to answer questions such as "how close
was the K-th neighbor?" or "how spread out were the scores?". Nothing here
feeds back into ranking.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Sequence, Union

import numpy as np
import pandas as pd

from ..inference.schema import CompatibilityResult, MatchResult, RankingResult
from ..utils import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_QUANTILES = (0.1, 0.25, 0.5, 0.75, 0.9)

# Score bands: high >= 75, medium in [50, 75), low < 50
HIGH_MATCH_SCORE = 75
MEDIUM_MATCH_SCORE = 50


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    count: int
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 20.0, "p50": 50.0, "p90": 80.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": int(self.count),
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class MatchingStats:
    """
    Summary of a nearest-neighbor ranking.

    Attributes:
        total_animals: Number of candidates ranked
        average_distance: Mean distance (2 decimals)
        average_score: Mean score (1 decimal)
        min_distance: Smallest distance (2 decimals)
        max_distance: Largest distance (2 decimals)
        top_k_threshold: Distance of the last top-K match (2 decimals)
        high_matches: Candidates scoring at least HIGH_MATCH_SCORE
        medium_matches: Candidates scoring in [MEDIUM_MATCH_SCORE, HIGH_MATCH_SCORE)
        low_matches: Candidates scoring below MEDIUM_MATCH_SCORE
        score_quantiles: Score percentiles keyed "p10", "p50", ...
    """
    total_animals: int
    average_distance: float
    average_score: float
    min_distance: float
    max_distance: float
    top_k_threshold: float
    high_matches: int = 0
    medium_matches: int = 0
    low_matches: int = 0
    score_quantiles: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_animals": int(self.total_animals),
            "average_distance": float(self.average_distance),
            "average_score": float(self.average_score),
            "min_distance": float(self.min_distance),
            "max_distance": float(self.max_distance),
            "top_k_threshold": float(self.top_k_threshold),
            "high_matches": int(self.high_matches),
            "medium_matches": int(self.medium_matches),
            "low_matches": int(self.low_matches),
            "score_quantiles": {k: float(v) for k, v in self.score_quantiles.items()}
        }


def compute_score_distribution_stats(
    scores: Sequence[float],
    quantiles: Sequence[float] = DEFAULT_QUANTILES
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Match scores
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance (all zeros for no scores)
    """
    scores = np.asarray(scores, dtype=float)

    if scores.size == 0:
        return ScoreDistributionStats(
            count=0, mean=0.0, std=0.0, min=0.0, max=0.0,
            quantiles={f"p{int(q * 100)}": 0.0 for q in quantiles}
        )

    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        count=int(scores.size),
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


def compute_matching_stats(result: RankingResult) -> MatchingStats:
    """
    Summarize a ranking.

    Args:
        result: Output of DistanceRanker.rank()

    Returns:
        MatchingStats with score bands and percentiles; all zeros when
        nothing was ranked
    """
    if not result.all_matches:
        return MatchingStats(
            total_animals=0,
            average_distance=0.0,
            average_score=0.0,
            min_distance=0.0,
            max_distance=0.0,
            top_k_threshold=0.0,
            score_quantiles=compute_score_distribution_stats([]).quantiles
        )

    distances = np.array([m.distance for m in result.all_matches], dtype=float)
    scores = np.array([m.score for m in result.all_matches], dtype=float)
    threshold = result.top_matches[-1].distance if result.top_matches else 0.0
    distribution = compute_score_distribution_stats(scores)

    return MatchingStats(
        total_animals=result.total_count,
        average_distance=round_half_up(float(np.mean(distances)), 2),
        average_score=round_half_up(float(np.mean(scores)), 1),
        min_distance=round_half_up(float(np.min(distances)), 2),
        max_distance=round_half_up(float(np.max(distances)), 2),
        top_k_threshold=round_half_up(float(threshold), 2),
        high_matches=int(np.sum(scores >= HIGH_MATCH_SCORE)),
        medium_matches=int(np.sum((scores >= MEDIUM_MATCH_SCORE) & (scores < HIGH_MATCH_SCORE))),
        low_matches=int(np.sum(scores < MEDIUM_MATCH_SCORE)),
        score_quantiles={k: round_half_up(v, 1) for k, v in distribution.quantiles.items()}
    )


def check_ranking_consistency(result: RankingResult) -> List[str]:
    """
    Sanity-check a ranking.

    Checks that ranks run 1..N without gaps, distances never decrease with
    rank, top-K flags agree with k, and top_matches is a prefix of
    all_matches.

    Args:
        result: Output of DistanceRanker.rank()

    Returns:
        List of issue descriptions (empty if consistent)
    """
    issues = []
    matches = result.all_matches

    ranks = [m.rank for m in matches]
    if ranks != list(range(1, len(matches) + 1)):
        issues.append(f"Ranks are not 1..{len(matches)}: {ranks}")

    distances = np.array([m.distance for m in matches], dtype=float)
    if distances.size > 1 and np.any(np.diff(distances) < 0):
        issues.append("Distances decrease with rank")

    for m in matches:
        if m.is_top_k != (m.rank <= result.k):
            issues.append(f"Rank {m.rank} has is_top_k={m.is_top_k} with k={result.k}")

    if result.top_matches != matches[:result.k]:
        issues.append("top_matches is not the top-k prefix of all_matches")

    return issues


def matches_to_dataframe(results: Sequence[Union[MatchResult, CompatibilityResult]]) -> pd.DataFrame:
    """
    Tabulate match results for inspection or export.

    Nested fields (vectors, reasons, factors) are flattened into columns;
    feature vectors are left as lists.

    Args:
        results: MatchResult or CompatibilityResult objects

    Returns:
        DataFrame with one row per result, in the given order
    """
    rows = []
    for r in results:
        row = r.to_dict()
        factors = row.pop("compatibility_factors", None)
        if factors:
            for name, value in factors.items():
                row[f"factor_{name}"] = value
        if "match_reasons" in row:
            row["match_reasons"] = "; ".join(row["match_reasons"])
        rows.append(row)

    return pd.DataFrame(rows)

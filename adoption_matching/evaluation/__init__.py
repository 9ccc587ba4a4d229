"""Evaluation module for match list statistics and diagnostics."""

from .metrics import (
    compute_score_distribution_stats,
    compute_matching_stats,
    check_ranking_consistency,
    matches_to_dataframe,
    ScoreDistributionStats,
    MatchingStats,
)

__all__ = [
    "compute_score_distribution_stats",
    "compute_matching_stats",
    "check_ranking_consistency",
    "matches_to_dataframe",
    "ScoreDistributionStats",
    "MatchingStats",
]

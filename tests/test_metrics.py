"""Tests for adoption_matching/evaluation/metrics.py."""

from __future__ import annotations

import pandas as pd
import pytest

from adoption_matching.evaluation import (
    check_ranking_consistency,
    compute_matching_stats,
    compute_score_distribution_stats,
    matches_to_dataframe,
)
from adoption_matching.inference.schema import AnimalProfile, MatchResult, RankingResult
from adoption_matching.matching import CompatibilityScorer, DistanceRanker


class TestScoreDistribution:
    """Tests for compute_score_distribution_stats."""

    def test_stats(self) -> None:
        stats = compute_score_distribution_stats([10.0, 20.0, 30.0, 40.0, 50.0])
        assert stats.count == 5
        assert stats.mean == pytest.approx(30.0)
        assert stats.min == 10.0
        assert stats.max == 50.0
        assert stats.quantiles["p50"] == pytest.approx(30.0)

    def test_empty(self) -> None:
        """Should return zeros without warnings for no scores."""
        stats = compute_score_distribution_stats([])
        assert stats.count == 0
        assert stats.quantiles["p90"] == 0.0


class TestMatchingStats:
    """Tests for compute_matching_stats."""

    def test_empty_ranking(self) -> None:
        result = RankingResult([], [], [], [], k=3, total_count=0)
        assert compute_matching_stats(result).to_dict()["total_animals"] == 0

    def test_threshold_is_kth_distance(self, identity_config, matching_adopter) -> None:
        """The threshold should be the distance of the last top-k match."""
        animals = [AnimalProfile(id=str(i), age_months=36 + 10 * i, size="MEDIUM") for i in range(4)]
        result = DistanceRanker(identity_config).rank(matching_adopter, animals)
        stats = compute_matching_stats(result)
        assert stats.top_k_threshold == result.all_matches[1].distance

    def test_score_bands(self) -> None:
        """Should count 75 as high, 50 as medium and anything lower as low."""
        matches = [
            MatchResult(str(i), "Sin nombre", float(i), score, i + 1, i < 2, [], [])
            for i, score in enumerate([75.0, 74.9, 50.0, 49.9])
        ]
        result = RankingResult(matches[:2], matches, [], [], k=2, total_count=4)
        stats = compute_matching_stats(result)
        assert stats.high_matches == 1
        assert stats.medium_matches == 2
        assert stats.low_matches == 1
        assert stats.to_dict()["medium_matches"] == 2

    def test_score_quantiles(self, identity_config, matching_adopter, matching_animal, distant_animal) -> None:
        """Should report score percentiles of the full ranking."""
        result = DistanceRanker(identity_config).rank(matching_adopter, [matching_animal, distant_animal])
        stats = compute_matching_stats(result)
        assert set(stats.score_quantiles) == {"p10", "p25", "p50", "p75", "p90"}
        assert stats.score_quantiles["p50"] == pytest.approx(52.5)
        assert stats.high_matches == 1
        assert stats.low_matches == 1

    def test_empty_ranking_bands(self) -> None:
        stats = compute_matching_stats(RankingResult([], [], [], [], k=3, total_count=0))
        assert stats.high_matches == stats.medium_matches == stats.low_matches == 0
        assert stats.score_quantiles["p50"] == 0.0


class TestConsistency:
    """Tests for check_ranking_consistency."""

    def test_detects_bad_ranks(self, identity_config, matching_adopter, matching_animal, distant_animal) -> None:
        result = DistanceRanker(identity_config).rank(matching_adopter, [matching_animal, distant_animal])
        result.all_matches[1].rank = 5
        issues = check_ranking_consistency(result)
        assert any("Ranks" in issue for issue in issues)


class TestMatchesToDataFrame:
    """Tests for matches_to_dataframe."""

    def test_knn_results(self, identity_config, matching_adopter, matching_animal, distant_animal) -> None:
        result = DistanceRanker(identity_config).rank(matching_adopter, [matching_animal, distant_animal])
        df = matches_to_dataframe(result.all_matches)
        assert isinstance(df, pd.DataFrame)
        assert list(df["rank"]) == [1, 2]
        assert df.loc[0, "animal_id"] == "animal-1"

    def test_compatibility_results(self, family_adopter, family_friendly_animal) -> None:
        """Should flatten factors and join reasons."""
        results = CompatibilityScorer().score(family_adopter, [family_friendly_animal])
        df = matches_to_dataframe(results)
        assert "factor_coexistence" in df.columns
        assert "compatibility_factors" not in df.columns
        assert "Excelente con niños" in df.loc[0, "match_reasons"]

    def test_empty(self) -> None:
        assert matches_to_dataframe([]).empty

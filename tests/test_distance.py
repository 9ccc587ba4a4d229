"""Tests for adoption_matching/matching/distance.py."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from adoption_matching.configs.scaler_config import DEFAULT_FEATURE_NAMES, ScalerConfig
from adoption_matching.exceptions import FeatureShapeError
from adoption_matching.matching.distance import (
    calculate_percentile,
    distance,
    distance_to_score,
    distances_to_many,
    euclidean_distance,
    manhattan_distance,
    resolve_metric,
    standard_scale,
)


class TestStandardScale:
    """Tests for standard_scale."""

    def test_scales_vector(self) -> None:
        """Should apply (x - mean) / scale per feature."""
        config = ScalerConfig(
            feature_names=DEFAULT_FEATURE_NAMES,
            scaler_mean=[1.0] * 9,
            scaler_scale=[2.0] * 9,
            n_neighbors=1,
        )
        np.testing.assert_allclose(standard_scale([3.0] * 9, config), [1.0] * 9)

    def test_zero_scale_yields_zero(self) -> None:
        """A zero scale should not raise and should give 0 in that dimension."""
        scale = [1.0] * 9
        scale[4] = 0.0
        config = ScalerConfig(
            feature_names=DEFAULT_FEATURE_NAMES,
            scaler_mean=[0.0] * 9,
            scaler_scale=scale,
            n_neighbors=1,
        )
        scaled = standard_scale([5.0] * 9, config)
        assert scaled[4] == 0.0
        assert np.all(np.isfinite(scaled))
        assert scaled[0] == 5.0

    def test_scales_matrix(self, identity_config: ScalerConfig) -> None:
        """Should scale every row of a matrix."""
        X = np.arange(18, dtype=float).reshape(2, 9)
        np.testing.assert_array_equal(standard_scale(X, identity_config), X)

    def test_wrong_length_raises(self, identity_config: ScalerConfig) -> None:
        """Should reject vectors of the wrong dimensionality."""
        with pytest.raises(FeatureShapeError):
            standard_scale([1.0] * 8, identity_config)


class TestDistances:
    """Tests for the distance functions."""

    def test_manhattan(self) -> None:
        """Should sum absolute differences."""
        assert manhattan_distance([0, 0, 0], [1, -2, 3]) == pytest.approx(6.0)

    def test_euclidean(self) -> None:
        """Should take the L2 norm of the difference."""
        assert euclidean_distance([0, 0], [3, 4]) == pytest.approx(5.0)

    @pytest.mark.parametrize("metric", ["manhattan", "euclidean"])
    def test_equal_vectors(self, metric: str) -> None:
        """Equal vectors should be at distance 0 with score 100."""
        v = [36, 2, 2, 1, 1, 1, 1, 0, 5]
        d = distance(v, v, metric)
        assert d == 0.0
        assert distance_to_score(d) == 100.0

    def test_length_mismatch_raises(self) -> None:
        """Should reject vectors of different lengths."""
        with pytest.raises(FeatureShapeError):
            manhattan_distance([1, 2, 3], [1, 2])
        with pytest.raises(FeatureShapeError):
            euclidean_distance([1, 2, 3], [1, 2])

    def test_unknown_metric_falls_back(self, caplog) -> None:
        """Should warn and use manhattan for unknown metrics."""
        with caplog.at_level(logging.WARNING):
            assert resolve_metric("chebyshev") == "manhattan"
            d = distance([0, 0], [3, 4], "chebyshev")
        assert d == pytest.approx(7.0)
        assert "Unknown distance metric" in caplog.text

    def test_metric_name_is_case_insensitive(self) -> None:
        """Should accept metric names in any case."""
        assert resolve_metric("Euclidean") == "euclidean"

    def test_distances_to_many(self) -> None:
        """Should compute one distance per candidate row."""
        query = np.zeros(3)
        candidates = np.array([[1.0, 1.0, 1.0], [0.0, 0.0, 0.0], [3.0, 0.0, 4.0]])
        np.testing.assert_allclose(distances_to_many(query, candidates, "manhattan"), [3.0, 0.0, 7.0])
        np.testing.assert_allclose(distances_to_many(query, candidates, "euclidean"), [np.sqrt(3), 0.0, 5.0])

    def test_distances_to_many_shape_mismatch(self) -> None:
        """Should reject candidates of a different dimensionality."""
        with pytest.raises(FeatureShapeError):
            distances_to_many(np.zeros(3), np.zeros((2, 4)))


class TestDistanceToScore:
    """Tests for distance_to_score."""

    def test_monotonic(self) -> None:
        """Scores should not increase with distance."""
        scores = [distance_to_score(d) for d in [0, 1, 5, 10, 20, 30]]
        assert scores == sorted(scores, reverse=True)

    def test_saturates_at_max_distance(self) -> None:
        """Distances beyond the maximum should give the floor score."""
        floor = distance_to_score(30.0)
        assert distance_to_score(100.0) == floor
        assert floor == pytest.approx(5.0, abs=0.05)

    def test_rounded_to_one_decimal(self) -> None:
        """Should round to one decimal."""
        score = distance_to_score(7.3)
        assert score == round(score, 1)

    def test_custom_transform(self) -> None:
        """Should honor max_distance and decay."""
        assert distance_to_score(15.0, max_distance=15.0, decay=2.2) == pytest.approx(11.1)


class TestCalculatePercentile:
    """Tests for calculate_percentile."""

    def test_percentile(self) -> None:
        """Should count values less than or equal."""
        assert calculate_percentile(2.0, [1.0, 2.0, 3.0, 4.0]) == 50.0

    def test_empty(self) -> None:
        """Should return 0 for an empty reference."""
        assert calculate_percentile(1.0, []) == 0.0

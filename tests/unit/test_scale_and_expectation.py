"""
Unit tests for scale conversion, the expectation model and rating values.
"""

import math

import pytest

from glickotr.glicko import (
    GlickoConstants,
    InternalRating,
    Rating,
    default_rating,
    expected_score,
    reduce_impact,
    to_internal,
    to_public,
)


class TestScale:
    """Tests for to_internal / to_public."""

    def test_default_rating_is_internal_origin(self):
        internal = to_internal(Rating(1500, 173.7178, 0.06))

        assert internal.mu == 0.0
        assert internal.phi == pytest.approx(1.0)
        assert internal.sigma == 0.06

    def test_one_unit_is_scaling_factor(self):
        internal = to_internal(Rating(1500 + 173.7178, 0, 0.06))

        assert internal.mu == pytest.approx(1.0)

    def test_round_trip(self):
        rating = Rating(1834.5, 96.2, 0.071)

        back = to_public(to_internal(rating))

        assert back.rating == pytest.approx(rating.rating)
        assert back.deviation == pytest.approx(rating.deviation)
        assert back.volatility == rating.volatility

    def test_public_rating_clamped(self):
        assert to_public(InternalRating(mu=40.0, phi=1.0, sigma=0.06)).rating == 5000.0
        assert to_public(InternalRating(mu=-40.0, phi=1.0, sigma=0.06)).rating == 0.0

    def test_custom_centre(self):
        constants = GlickoConstants(mu0=1200.0)

        assert to_internal(Rating(1200, 100, 0.06), constants).mu == 0.0


class TestExpectation:
    """Tests for reduce_impact and expected_score."""

    def test_certain_opponent_has_full_impact(self):
        assert reduce_impact(InternalRating(0.0, 0.0, 0.06)) == 1.0

    def test_impact_shrinks_with_deviation(self):
        low = reduce_impact(InternalRating(0.0, 0.5, 0.06))
        high = reduce_impact(InternalRating(0.0, 2.0, 0.06))

        assert 0 < high < low < 1

    def test_impact_formula(self):
        phi = 1.1513
        expected = 1 / math.sqrt(1 + 3 * phi ** 2 / math.pi ** 2)

        assert reduce_impact(InternalRating(0.0, phi, 0.06)) == pytest.approx(expected)

    def test_even_match(self):
        player = InternalRating(0.3, 1.0, 0.06)

        assert expected_score(player, player, reduce_impact(player)) == pytest.approx(0.5)

    def test_favourite_expected_to_win_more(self):
        strong = InternalRating(0.5, 1.0, 0.06)
        weak = InternalRating(-0.5, 1.0, 0.06)

        e_strong = expected_score(strong, weak, reduce_impact(weak))
        e_weak = expected_score(weak, strong, reduce_impact(strong))

        assert e_strong > 0.5 > e_weak
        assert e_strong + e_weak == pytest.approx(1.0)

    def test_clamped(self):
        strong = InternalRating(20.0, 0.1, 0.06)
        weak = InternalRating(-20.0, 0.1, 0.06)

        assert expected_score(strong, weak, reduce_impact(weak)) == pytest.approx(0.9)
        assert expected_score(weak, strong, reduce_impact(strong)) == pytest.approx(0.1)

    def test_overflow_is_clamped(self):
        """A gap large enough to overflow exp() still gives the lower clamp."""
        weak = InternalRating(-1e4, 0.0, 0.06)
        strong = InternalRating(1e4, 0.0, 0.06)

        assert expected_score(weak, strong, 1.0) == pytest.approx(0.1)

    def test_custom_clamp(self):
        constants = GlickoConstants(clamp_epsilon=0.05)
        strong = InternalRating(20.0, 0.1, 0.06)
        weak = InternalRating(-20.0, 0.1, 0.06)

        assert expected_score(strong, weak, 1.0, constants) == pytest.approx(0.95)


class TestRatingValues:
    """Tests for the Rating value type."""

    def test_defaults(self):
        rating = default_rating()

        assert rating == Rating(1500.0, 250.0, 0.06)

    def test_default_overrides(self):
        rating = default_rating(deviation=350.0)

        assert rating.deviation == 350.0
        assert rating.rating == 1500.0

    def test_immutable(self):
        rating = Rating()

        with pytest.raises(AttributeError):
            rating.rating = 1600

    @pytest.mark.parametrize(
        "values",
        [
            (float("nan"), 250, 0.06),
            (1500, float("inf"), 0.06),
            (1500, -1, 0.06),
            (1500, 250, 0),
            (1500, 250, -0.01),
        ],
    )
    def test_invalid_values_rejected(self, values):
        with pytest.raises(ValueError):
            Rating(*values)


class TestConstants:
    """Tests for GlickoConstants validation."""

    def test_defaults(self):
        constants = GlickoConstants()

        assert constants.tau == 0.5
        assert constants.scale == 173.7178
        assert constants.variance_cap == 1e6

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"tau": 0},
            {"scale": -1.0},
            {"clamp_epsilon": 0.5},
            {"min_rating": 10.0, "max_rating": 5.0},
        ],
    )
    def test_invalid_constants_rejected(self, kwargs):
        with pytest.raises(ValueError):
            GlickoConstants(**kwargs)

"""
Unit tests for the GlickoTR calculator.

Tests the rating update end to end to ensure:
- Winners gain, losers drop, and both become more certain
- Zero-weight contests leave ratings untouched
- Swapping the players swaps the results exactly
- Pathological inputs still produce finite ratings
"""

import math

import pytest

from glickotr.glicko import (
    ContestOutcome,
    GlickoCalculator,
    GlickoConstants,
    Rating,
    calculate_glicko_update,
    default_rating,
)


def _is_finite(rating: Rating) -> bool:
    return all(math.isfinite(v) for v in (rating.rating, rating.deviation, rating.volatility))


class TestGlickoCalculator:
    """Tests for GlickoCalculator.update."""

    @pytest.fixture
    def calculator(self):
        """Create a calculator instance for tests."""
        return GlickoCalculator()

    def test_new_players_six_love(self, calculator):
        """
        Two new players, A wins 6-0.

        A must move above 1500 and B below, and both deviations
        must shrink from 250.
        """
        result = calculator.update(default_rating(), default_rating(), 6, 0, ContestOutcome("completed"))

        assert result.player_a_after.rating > 1500
        assert result.player_b_after.rating < 1500
        assert result.player_a_after.deviation < 250
        assert result.player_b_after.deviation < 250
        assert result.weight == 1.0
        assert result.expected_a == pytest.approx(0.5)
        assert result.actual_a == 1.0
        assert result.actual_b == 0.0

    def test_equal_players_changes_mirror(self, calculator):
        """Between identical players the gains and losses are equal and opposite."""
        result = calculator.update(default_rating(), default_rating(), 12, 7)

        assert result.player_a_change == pytest.approx(-result.player_b_change)
        assert result.player_a_after.deviation == pytest.approx(result.player_b_after.deviation)

    def test_default_outcome_is_completed_standard(self, calculator):
        result = calculator.update(default_rating(), default_rating(), 6, 3)

        assert result.outcome == ContestOutcome("completed", "standard", False)
        assert result.weight == 1.0

    def test_dominant_win_moves_more_than_close_win(self, calculator):
        """Games won drive the update, so 12-0 moves ratings more than 13-11."""
        blowout = calculator.update(default_rating(), default_rating(), 12, 0)
        close = calculator.update(default_rating(), default_rating(), 13, 11)

        assert blowout.player_a_change > close.player_a_change > 0

    def test_draw_on_games_pulls_ratings_together(self, calculator):
        """
        6-6 in games gives both players an actual score of 0.5.

        The lower-rated player gains and the higher-rated player loses.
        """
        strong = Rating(1700, 200, 0.06)
        weak = Rating(1500, 200, 0.06)

        result = calculator.update(strong, weak, 6, 6)

        assert result.actual_a == 0.5
        assert result.actual_b == 0.5
        assert result.expected_a > 0.5 > result.expected_b
        assert result.player_a_after.rating < 1700
        assert result.player_b_after.rating > 1500

    def test_upset_gains_more(self, calculator):
        """Beating a stronger opponent is worth more than beating a weaker one."""
        underdog = calculator.update(Rating(1500, 150, 0.06), Rating(1800, 150, 0.06), 12, 0)
        favourite = calculator.update(Rating(1800, 150, 0.06), Rating(1500, 150, 0.06), 12, 0)

        assert underdog.player_a_change > favourite.player_a_change > 0

    def test_symmetry_under_relabelling(self, calculator):
        """Swapping players and their scores swaps the results exactly."""
        rating_a = Rating(1620, 180, 0.07)
        rating_b = Rating(1480, 260, 0.05)
        outcome = ContestOutcome("retired", "standard", True)

        forward = calculator.update(rating_a, rating_b, 9, 5, outcome)
        backward = calculator.update(rating_b, rating_a, 5, 9, outcome)

        assert forward.player_a_after == backward.player_b_after
        assert forward.player_b_after == backward.player_a_after

    def test_pure_function(self, calculator):
        """Repeated calls give identical results and never touch the inputs."""
        rating_a = Rating(1550, 120, 0.06)
        rating_b = Rating(1450, 300, 0.09)

        first = calculator.update(rating_a, rating_b, 7, 9)
        second = calculator.update(rating_a, rating_b, 7, 9)

        assert first.as_pair() == second.as_pair()
        assert rating_a == Rating(1550, 120, 0.06)
        assert rating_b == Rating(1450, 300, 0.09)

    def test_public_match_counts_more(self, calculator):
        private = calculator.update(default_rating(), default_rating(), 12, 5, ContestOutcome(is_public=False))
        public = calculator.update(default_rating(), default_rating(), 12, 5, ContestOutcome(is_public=True))

        assert public.weight == pytest.approx(1.2)
        assert public.player_a_change > private.player_a_change

    def test_retirement_counts_less(self, calculator):
        completed = calculator.update(default_rating(), default_rating(), 6, 3, ContestOutcome("completed"))
        retired = calculator.update(default_rating(), default_rating(), 6, 3, ContestOutcome("retired"))

        assert retired.weight == pytest.approx(0.4)
        assert 0 < retired.player_a_change < completed.player_a_change

    def test_zero_total_games_completed(self, calculator):
        """A completed match with no games recorded counts as an even result."""
        result = calculator.update(default_rating(), default_rating(), 0, 0)

        assert result.actual_a == 0.5
        assert result.player_a_after.rating == pytest.approx(1500)
        assert _is_finite(result.player_a_after)

    def test_negative_score_rejected(self, calculator):
        with pytest.raises(ValueError):
            calculator.update(default_rating(), default_rating(), -1, 6)

    def test_non_finite_score_rejected(self, calculator):
        with pytest.raises(ValueError):
            calculator.update(default_rating(), default_rating(), float("nan"), 6)

    def test_win_probability(self, calculator):
        """Equal players are even; large gaps hit the clamp."""
        assert calculator.win_probability(default_rating(), default_rating()) == pytest.approx(0.5)
        assert calculator.win_probability(Rating(2400, 50, 0.06), Rating(1200, 50, 0.06)) == pytest.approx(0.9)
        assert calculator.win_probability(Rating(1200, 50, 0.06), Rating(2400, 50, 0.06)) == pytest.approx(0.1)


class TestZeroWeightContests:
    """Contests with zero weight must leave both players untouched."""

    @pytest.fixture
    def calculator(self):
        return GlickoCalculator()

    @pytest.mark.parametrize(
        "outcome, score_a, score_b",
        [
            (ContestOutcome("walkover"), 0, 0),
            (ContestOutcome("walkover", is_public=True), 6, 0),
            (ContestOutcome("completed", "tiebreak"), 0, 0),
            (ContestOutcome("walkover", "tiebreak"), 10, 8),
            (ContestOutcome("retired"), 0, 0),
        ],
    )
    def test_identity(self, calculator, outcome, score_a, score_b):
        rating_a = Rating(1612.5, 143.2, 0.0612)
        rating_b = Rating(1433.1, 280.0, 0.0571)

        result = calculator.update(rating_a, rating_b, score_a, score_b, outcome)

        assert result.is_identity
        assert result.player_a_after is rating_a
        assert result.player_b_after is rating_b
        assert result.player_a_change == 0
        assert result.expected_a is None


class TestNumericalRobustness:
    """Extreme inputs must still give finite, valid ratings."""

    @pytest.fixture
    def calculator(self):
        return GlickoCalculator()

    @pytest.mark.parametrize(
        "rating_a, rating_b, score_a, score_b",
        [
            (Rating(5000, 350, 0.06), Rating(0, 350, 0.06), 0, 13),
            (Rating(3000, 30, 0.06), Rating(500, 30, 0.06), 12, 0),
            (Rating(1500, 0, 0.06), Rating(1500, 0, 0.06), 6, 4),
            (Rating(1500, 1e5, 0.06), Rating(1500, 1e5, 0.06), 6, 0),
            (Rating(1500, 250, 1e-6), Rating(1500, 250, 2.0), 0, 6),
            (Rating(1500, 250, 0.06), Rating(1500, 250, 0.06), 1e6, 1),
        ],
    )
    def test_outputs_finite(self, calculator, rating_a, rating_b, score_a, score_b):
        for outcome in (ContestOutcome("completed"), ContestOutcome("retired", is_public=True)):
            result = calculator.update(rating_a, rating_b, score_a, score_b, outcome)

            assert _is_finite(result.player_a_after)
            assert _is_finite(result.player_b_after)
            assert result.player_a_after.volatility > 0
            assert result.player_b_after.volatility > 0

    def test_rating_clamped_at_top(self, calculator):
        result = calculator.update(Rating(4999, 350, 0.06), Rating(4999, 350, 0.06), 12, 0)

        assert result.player_a_after.rating == 5000.0
        assert result.player_b_after.rating < 4999

    def test_rating_clamped_at_bottom(self, calculator):
        result = calculator.update(Rating(1, 350, 0.06), Rating(1, 350, 0.06), 0, 12)

        assert result.player_a_after.rating == 0.0

    def test_alternate_tau(self):
        """Constants are injectable, e.g. a different tau while tuning."""
        calculator = GlickoCalculator(GlickoConstants(tau=0.2))

        result = calculator.update(default_rating(), Rating(1900, 80, 0.06), 12, 1)

        assert calculator.constants.tau == 0.2
        assert _is_finite(result.player_a_after)
        assert result.player_a_change > 0


class TestConvenienceFunction:
    """Tests for the calculate_glicko_update convenience function."""

    def test_calculate_glicko_update(self):
        new_a, new_b = calculate_glicko_update(Rating(1700, 150, 0.06), Rating(1600, 150, 0.06), 12, 4)

        assert new_a.rating > 1700
        assert new_b.rating < 1600
        assert isinstance(new_a, Rating)

    def test_walkover_returns_inputs(self):
        rating_a = Rating(1700, 150, 0.06)
        rating_b = Rating(1600, 150, 0.06)

        assert calculate_glicko_update(rating_a, rating_b, 0, 0, status="walkover") == (rating_a, rating_b)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            calculate_glicko_update(default_rating(), default_rating(), 6, 0, status="forfeit")

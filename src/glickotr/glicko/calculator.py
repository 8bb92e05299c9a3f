"""
GlickoTR rating calculator for tennis matches.

Implements Glicko-2 adapted for score shares instead of plain win/loss:
the "actual score" of a player is the share of games they won, so a
6-4 6-4 win says less than a 6-0 6-0 win.

Per player, against the opponent's pre-match rating:
  g        = 1 / sqrt(1 + 3 phi_opp^2 / pi^2)
  E        = 1 / (1 + exp(-g (mu - mu_opp)))          clamped to [0.1, 0.9]
  S        = own games / total games                   (0.5 if no games)
  v        = 1 / (g^2 E (1 - E))                       capped at 1e6
  delta    = w g (S - E)
  sigma'   = volatility solver(phi, delta, v)
  phi*     = sqrt(phi^2 + sigma'^2)
  phi'     = 1 / sqrt(1 / phi*^2 + w g^2 E (1 - E))
  mu'      = mu + phi'^2 delta

where w is the match weight (see weighting.py). Both players are computed
from the same pre-match snapshot, so the order of the two updates never
matters.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from glickotr.glicko.constants import DEFAULT_CONSTANTS, GlickoConstants
from glickotr.glicko.expectation import expected_score, reduce_impact
from glickotr.glicko.rating import ContestOutcome, InternalRating, Rating
from glickotr.glicko.scale import to_internal, to_public
from glickotr.glicko.solver import determine_volatility
from glickotr.glicko.weighting import calculate_match_weight

logger = logging.getLogger(__name__)


@dataclass
class GlickoUpdate:
    """
    Result of a GlickoTR calculation.

    Contains the new ratings plus the intermediate values that explain
    them. For a zero-weight match the "after" ratings are the very same
    objects as the "before" ratings and the expectations are None.
    """
    # Ratings before the match
    player_a_before: Rating
    player_b_before: Rating

    # Ratings after the match
    player_a_after: Rating
    player_b_after: Rating

    # How much the match counted
    weight: float
    outcome: ContestOutcome

    # Expected and actual score shares (before the match)
    expected_a: Optional[float] = None
    expected_b: Optional[float] = None
    actual_a: Optional[float] = None
    actual_b: Optional[float] = None

    @property
    def player_a_change(self) -> float:
        """Rating change for player A."""
        return self.player_a_after.rating - self.player_a_before.rating

    @property
    def player_b_change(self) -> float:
        """Rating change for player B."""
        return self.player_b_after.rating - self.player_b_before.rating

    @property
    def is_identity(self) -> bool:
        """Whether the match was ignored (zero weight)."""
        return self.weight <= 0

    def as_pair(self) -> tuple[Rating, Rating]:
        """New ratings in input order."""
        return self.player_a_after, self.player_b_after

    def __repr__(self) -> str:
        return (
            f"<GlickoUpdate(A: {self.player_a_before.rating:.0f} -> {self.player_a_after.rating:.0f}, "
            f"B: {self.player_b_before.rating:.0f} -> {self.player_b_after.rating:.0f}, "
            f"weight={self.weight:.2f})>"
        )


@dataclass
class _PlayerStep:
    """Intermediate values for one side of the update."""
    rating: InternalRating
    expected: float
    actual: float


class GlickoCalculator:
    """
    Tennis-specific Glicko-2 calculator.

    Usage:
        calculator = GlickoCalculator()

        result = calculator.update(
            rating_a=Rating(1650, 120, 0.06),
            rating_b=Rating(1500, 250, 0.06),
            score_a=12,          # games won by A
            score_b=7,           # games won by B
            outcome=ContestOutcome("completed"),
        )

        new_a, new_b = result.as_pair()
    """

    def __init__(self, constants: Optional[GlickoConstants] = None):
        """
        Initialize the calculator.

        Args:
            constants: Optional custom constants (e.g. an alternate tau).
                       Defaults to the standard GlickoTR constants.
        """
        self.constants = constants or DEFAULT_CONSTANTS

    @classmethod
    def from_settings(cls, settings=None) -> "GlickoCalculator":
        """Create a calculator using the configured tuning values."""
        if settings is None:
            from glickotr.config import settings
        return cls(GlickoConstants.from_settings(settings))

    def update(
        self,
        rating_a: Rating,
        rating_b: Rating,
        score_a: float,
        score_b: float,
        outcome: Optional[ContestOutcome] = None,
    ) -> GlickoUpdate:
        """
        Calculate new ratings for both players after a match.

        Args:
            rating_a: Player A's rating before the match
            rating_b: Player B's rating before the match
            score_a: Games won by player A (non-negative)
            score_b: Games won by player B (non-negative)
            outcome: How the match ended; defaults to a completed
                     standard match that was not public

        Returns:
            GlickoUpdate with both new ratings

        Raises:
            ValueError: If a score is negative or not finite

        Example:
            # Two new players, A wins 6-0
            result = calc.update(Rating(), Rating(), 6, 0)
            # A moves above 1500, B below, both deviations shrink
        """
        for name, value in (("score_a", score_a), ("score_b", score_b)):
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a non-negative number, got {value!r}")

        if outcome is None:
            outcome = ContestOutcome()

        total = score_a + score_b
        weight = calculate_match_weight(outcome, total, self.constants)

        if weight <= 0:
            logger.debug(
                "Zero-weight contest (status=%s, category=%s, total=%s); ratings unchanged",
                outcome.status, outcome.category, total,
            )
            return GlickoUpdate(
                player_a_before=rating_a,
                player_b_before=rating_b,
                player_a_after=rating_a,
                player_b_after=rating_b,
                weight=weight,
                outcome=outcome,
            )

        internal_a = to_internal(rating_a, self.constants)
        internal_b = to_internal(rating_b, self.constants)

        step_a = self._rate_player(internal_a, internal_b, score_a, total, weight)
        step_b = self._rate_player(internal_b, internal_a, score_b, total, weight)

        return GlickoUpdate(
            player_a_before=rating_a,
            player_b_before=rating_b,
            player_a_after=to_public(step_a.rating, self.constants),
            player_b_after=to_public(step_b.rating, self.constants),
            weight=weight,
            outcome=outcome,
            expected_a=step_a.expected,
            expected_b=step_b.expected,
            actual_a=step_a.actual,
            actual_b=step_b.actual,
        )

    def win_probability(self, rating_a: Rating, rating_b: Rating) -> float:
        """
        Expected share of games for player A against player B.

        Uses the same clamped expectation as the update, so the
        result is always within [0.1, 0.9].
        """
        internal_a = to_internal(rating_a, self.constants)
        internal_b = to_internal(rating_b, self.constants)
        return expected_score(internal_a, internal_b, reduce_impact(internal_b), self.constants)

    def _rate_player(
        self,
        player: InternalRating,
        opponent: InternalRating,
        own_score: float,
        total: float,
        weight: float,
    ) -> _PlayerStep:
        """Run one side of the update against the opponent's pre-match rating."""
        impact = reduce_impact(opponent)
        expected = expected_score(player, opponent, impact, self.constants)
        actual = 0.5 if total <= 0 else own_score / total

        information = impact ** 2 * expected * (1.0 - expected)
        if information > 0:
            variance = min(1.0 / information, self.constants.variance_cap)
        else:
            variance = self.constants.variance_cap
        difference = weight * impact * (actual - expected)

        new_sigma = determine_volatility(player, difference, variance, self.constants)

        phi_star = math.sqrt(player.phi ** 2 + new_sigma ** 2)
        new_phi = 1.0 / math.sqrt(1.0 / phi_star ** 2 + weight * information)
        new_mu = player.mu + new_phi ** 2 * difference

        return _PlayerStep(
            rating=InternalRating(mu=new_mu, phi=new_phi, sigma=new_sigma),
            expected=expected,
            actual=actual,
        )


def calculate_glicko_update(
    rating_a: Rating,
    rating_b: Rating,
    score_a: float,
    score_b: float,
    status: str = "completed",
    category: str = "standard",
    is_public: bool = False,
) -> tuple[Rating, Rating]:
    """
    Simple function to calculate new ratings.

    For when you just need the two new ratings without the details.

    Returns:
        Tuple of (new_rating_a, new_rating_b)
    """
    calc = GlickoCalculator()
    result = calc.update(
        rating_a,
        rating_b,
        score_a,
        score_b,
        ContestOutcome(status=status, category=category, is_public=is_public),
    )
    return result.as_pair()

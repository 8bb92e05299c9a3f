"""
Expected-outcome model.

The Glicko-2 g(phi) function discounts an opponent whose own rating is
uncertain; the expected score is a logistic curve over the impact-weighted
rating gap:

    g(phi) = 1 / sqrt(1 + 3 * phi^2 / pi^2)
    E      = 1 / (1 + exp(-g(phi_opp) * (mu - mu_opp)))

E is clamped to [0.1, 0.9] so that E * (1 - E) never gets close to zero.
"""

import math

from glickotr.glicko.constants import DEFAULT_CONSTANTS, GlickoConstants
from glickotr.glicko.rating import InternalRating


def reduce_impact(opponent: InternalRating) -> float:
    """
    Impact factor g(phi) of an opponent, in (0, 1].

    Equals 1 for a perfectly known opponent and shrinks as the
    opponent's deviation grows.
    """
    return 1.0 / math.sqrt(1.0 + (3.0 * opponent.phi ** 2) / (math.pi ** 2))


def expected_score(
    rating: InternalRating,
    opponent: InternalRating,
    impact: float,
    constants: GlickoConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Expected share of games won by ``rating`` against ``opponent``.

    Args:
        rating: Internal rating of the player whose expectation we want
        opponent: Internal rating of the opponent
        impact: reduce_impact(opponent)
        constants: Supplies the clamp epsilon

    Returns:
        Expected score clamped to [eps, 1 - eps]
    """
    exponent = -impact * (rating.mu - opponent.mu)
    try:
        score = 1.0 / (1.0 + math.exp(exponent))
    except OverflowError:
        # exp() overflows only for a hopeless underdog
        score = 0.0

    low = constants.clamp_epsilon
    return max(low, min(score, 1.0 - low))

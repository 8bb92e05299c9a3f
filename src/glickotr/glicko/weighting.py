"""
Match weighting for rating updates.

Not every result says the same amount about the players. The weight scales
both the rating movement and the information gained from a match:

- Walkover: nothing was played, weight 0 (ratings are left untouched)
- Completed match: full weight 1.0
- Retirement: grows linearly with games played up to 18 games, capped at 0.8
  so an unfinished match never counts as much as a finished one
- Match tiebreak only: fixed 0.6 whenever any points were recorded

Matches played in a public event are then boosted by 1.2, so the largest
possible weight is 1.2.
"""

from glickotr.glicko.constants import DEFAULT_CONSTANTS, GlickoConstants
from glickotr.glicko.rating import ContestOutcome


def calculate_match_weight(
    outcome: ContestOutcome,
    total_score: float,
    constants: GlickoConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Weight of a single contest in [0, public_multiplier].

    Args:
        outcome: Status, category and visibility of the contest
        total_score: Games (or points) won by both players combined
        constants: Weighting thresholds

    Returns:
        Weight to apply to the rating update. 0 means the contest
        must not affect either player.

    Examples:
        calculate_match_weight(ContestOutcome("completed"), 20)       # → 1.0
        calculate_match_weight(ContestOutcome("retired"), 9)          # → 0.4
        calculate_match_weight(ContestOutcome("completed", "tiebreak", True), 18)  # → 0.72
    """
    if outcome.status == "walkover":
        return 0.0

    if outcome.category == "tiebreak":
        base = constants.tiebreak_weight if total_score > 0 else 0.0
    elif outcome.status == "completed":
        base = 1.0
    elif outcome.status == "retired":
        if total_score <= 0:
            return 0.0
        progress = min(1.0, total_score / constants.retirement_threshold_games)
        base = progress * constants.max_retirement_weight
    else:
        base = 0.0

    if outcome.is_public:
        base *= constants.public_multiplier

    return base

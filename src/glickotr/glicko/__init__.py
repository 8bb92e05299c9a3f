"""
GlickoTR rating system module.

Implements a Glicko-2 variant for tennis with:
- Score-share outcomes (games won / games played) instead of win/loss
- Match weighting by completion status, contest category and visibility
- A guarded volatility solver that never returns non-finite values
- Immutable constants so alternate tunings can be run side by side
"""

from glickotr.glicko.calculator import GlickoCalculator, GlickoUpdate, calculate_glicko_update
from glickotr.glicko.constants import DEFAULT_CONSTANTS, GlickoConstants
from glickotr.glicko.expectation import expected_score, reduce_impact
from glickotr.glicko.rating import ContestOutcome, InternalRating, Rating, default_rating
from glickotr.glicko.scale import to_internal, to_public
from glickotr.glicko.solver import RootResult, determine_volatility, illinois_root
from glickotr.glicko.weighting import calculate_match_weight

__all__ = [
    "GlickoCalculator",
    "GlickoUpdate",
    "calculate_glicko_update",
    "GlickoConstants",
    "DEFAULT_CONSTANTS",
    "Rating",
    "InternalRating",
    "ContestOutcome",
    "default_rating",
    "to_internal",
    "to_public",
    "reduce_impact",
    "expected_score",
    "calculate_match_weight",
    "determine_volatility",
    "illinois_root",
    "RootResult",
]

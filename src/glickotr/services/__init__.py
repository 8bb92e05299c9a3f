"""
GlickoTR services - applying ratings to stored data.

Usage:
    from glickotr.services import RatingUpdateService

    with get_session() as session:
        RatingUpdateService.from_settings().apply_match(session, match_id)
"""

from glickotr.services.rating_update import (
    MatchNotReadyError,
    MatchRatingResult,
    RatingUpdateError,
    RatingUpdateService,
)

__all__ = [
    "RatingUpdateService",
    "MatchRatingResult",
    "RatingUpdateError",
    "MatchNotReadyError",
]

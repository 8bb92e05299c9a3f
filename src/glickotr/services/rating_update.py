"""Apply GlickoTR updates to stored player profiles.

The rating calculator is a pure function; this service is the layer around it
that reads a confirmed match and both player profiles, refuses matches with
missing data, and writes both new ratings, the win/loss counters and the
match's processed marker within the caller's transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Query, Session

from glickotr.db.models import Match, Player
from glickotr.glicko.calculator import GlickoCalculator, GlickoUpdate
from glickotr.glicko.rating import ContestOutcome, Rating, default_rating
from glickotr.match_statuses import get_status_group
from glickotr.scoring.score import games_from_structured, parse_score

logger = logging.getLogger(__name__)


class RatingUpdateError(Exception):
    """Base class for errors raised while applying a rating update."""
    pass


class MatchNotReadyError(RatingUpdateError):
    """Raised when a match lacks the data needed to rate it."""
    pass


def lock_players_query(session: Session, player_ids: list[int]) -> Query:
    """
    SELECT ... FOR UPDATE over the given players.

    Rows are locked in the order the database returns them, so the
    ORDER BY fixes that order to ascending id for every caller.
    """
    return (
        session.query(Player)
        .filter(Player.id.in_(player_ids))
        .order_by(Player.id)
        .with_for_update()
    )


@dataclass
class MatchRatingResult:
    match_id: int
    update: GlickoUpdate
    games_a: int
    games_b: int
    winner_id: int


class RatingUpdateService:
    """Rates confirmed matches and records them as processed."""

    def __init__(
        self,
        calculator: Optional[GlickoCalculator] = None,
        new_player_rating: Optional[Rating] = None,
    ):
        self.calculator = calculator or GlickoCalculator()
        self.new_player_rating = new_player_rating or default_rating()

    @classmethod
    def from_settings(cls, settings=None) -> "RatingUpdateService":
        """Build the service from the configured tau and new-player rating."""
        if settings is None:
            from glickotr.config import settings
        return cls(
            GlickoCalculator.from_settings(settings),
            default_rating(settings=settings),
        )

    def register_player(self, session: Session, display_name: str) -> Player:
        """Create a player profile starting at ``new_player_rating``."""
        player = Player(display_name=display_name, wins=0, losses=0)
        player.apply_rating(self.new_player_rating)
        session.add(player)
        session.flush()
        return player

    def record_match(
        self,
        session: Session,
        player_a_id: int,
        player_b_id: int,
        score: str,
        winner_id: Optional[int] = None,
        is_public: bool = False,
    ) -> Match:
        """
        Store a new match result from a score string, status 'pending'.

        The winner is taken from the score unless given explicitly; it must
        be given for walkovers and for retirements where play stopped level.

        Raises:
            ScoreParseError: If the score string cannot be parsed
            ValueError: If the winner cannot be determined
        """
        parsed = parse_score(score)

        if winner_id is None and parsed.winner is not None:
            winner_id = player_a_id if parsed.winner == "A" else player_b_id
        if winner_id not in (player_a_id, player_b_id):
            raise ValueError(f"Cannot determine the winner of '{score}'")

        loser_id = player_b_id if winner_id == player_a_id else player_a_id
        match = Match(
            player_a_id=player_a_id,
            player_b_id=player_b_id,
            status="pending",
            score_structured=parsed.to_structured(),
            winner_id=winner_id,
            retired_player_id=loser_id if parsed.status == "retired" else None,
            is_walkover=parsed.status == "walkover",
            category=parsed.category,
            is_public=is_public,
        )
        session.add(match)
        session.flush()
        return match

    def apply_match(self, session: Session, match_id: int) -> Optional[MatchRatingResult]:
        """
        Apply the rating update for a confirmed match.

        Returns None (and changes nothing) when the match is not in a
        rateable status, e.g. still pending or already rated.

        Raises:
            MatchNotReadyError: If the match, its result or a player
                profile is missing
        """
        match = session.get(Match, match_id, with_for_update=True)
        if match is None:
            raise MatchNotReadyError(f"Match with ID {match_id} not found.")

        if match.status not in get_status_group("rateable"):
            if match.status in get_status_group("terminal"):
                logger.info("Match %s is already %s. Rating update skipped.", match_id, match.status)
            elif match.status in get_status_group("open"):
                logger.info(
                    "Match %s is %s, awaiting confirmation. Rating update skipped.",
                    match_id, match.status,
                )
            else:
                logger.warning(
                    "Match %s has unknown status '%s'. Rating update skipped.",
                    match_id, match.status,
                )
            return None

        outcome, games_a, games_b = self._contest_from_match(match)

        players = lock_players_query(session, [match.player_a_id, match.player_b_id]).all()
        by_id = {p.id: p for p in players}
        player_a = by_id.get(match.player_a_id)
        player_b = by_id.get(match.player_b_id)
        if player_a is None or player_b is None:
            raise MatchNotReadyError(
                f"Could not find both player profiles for IDs: {match.player_a_id}, {match.player_b_id}"
            )

        rating_a = player_a.to_rating()
        rating_b = player_b.to_rating()
        if rating_a is None or rating_b is None:
            raise MatchNotReadyError(f"Match {match_id} has a player without a rating.")

        update = self.calculator.update(rating_a, rating_b, games_a, games_b, outcome)

        player_a.apply_rating(update.player_a_after)
        player_b.apply_rating(update.player_b_after)
        winner, loser = (player_a, player_b) if match.winner_id == player_a.id else (player_b, player_a)
        winner.wins += 1
        loser.losses += 1

        match.rating_pre_player_a = rating_a.rating
        match.rating_pre_player_b = rating_b.rating
        match.rating_post_player_a = update.player_a_after.rating
        match.rating_post_player_b = update.player_b_after.rating
        match.rating_weight = update.weight
        match.rating_processed_at = datetime.utcnow()
        match.status = "rated"
        session.flush()

        logger.info(
            "Rated match %s (weight %.2f): player %s %.1f -> %.1f, player %s %.1f -> %.1f",
            match_id, update.weight,
            player_a.id, rating_a.rating, update.player_a_after.rating,
            player_b.id, rating_b.rating, update.player_b_after.rating,
        )
        return MatchRatingResult(
            match_id=match_id,
            update=update,
            games_a=games_a,
            games_b=games_b,
            winner_id=match.winner_id,
        )

    @staticmethod
    def _contest_from_match(match: Match) -> tuple[ContestOutcome, int, int]:
        """Derive contest metadata and game totals, refusing incomplete results."""
        if match.winner_id is None or match.winner_id not in (match.player_a_id, match.player_b_id):
            raise MatchNotReadyError(f"Match {match.id} is missing required score data (winner).")

        if match.is_walkover:
            status = "walkover"
            games_a, games_b = 0, 0
        else:
            if not match.score_structured:
                raise MatchNotReadyError(f"Match {match.id} is missing required score data (sets).")
            games_a, games_b = games_from_structured(match.score_structured)
            status = "retired" if match.retired_player_id else "completed"

        try:
            outcome = ContestOutcome(status=status, category=match.category, is_public=match.is_public)
        except ValueError as e:
            raise MatchNotReadyError(f"Match {match.id} has invalid contest metadata: {e}") from e

        return outcome, games_a, games_b

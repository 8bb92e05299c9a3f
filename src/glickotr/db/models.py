"""
SQLAlchemy ORM models for GlickoTR.

Only the two tables the rating update touches are defined here:

- players: Player profile with the current Glicko parameters and W/L record
- matches: Recorded matches, their structured score and rating snapshots

A match is rated exactly once. The processed marker (status 'rated' plus
rating_processed_at) is written in the same transaction as both players'
new ratings.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from glickotr.config import get_settings
from glickotr.glicko.rating import Rating, default_rating

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


# New players start from the configured glicko_default_* values
def _new_player_rating() -> Rating:
    return default_rating(settings=get_settings())


def _default_mu() -> float:
    return _new_player_rating().rating


def _default_phi() -> float:
    return _new_player_rating().deviation


def _default_sigma() -> float:
    return _new_player_rating().volatility


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class Player(Base):
    """
    Player profile.

    rating_mu / rating_phi / rating_sigma are the public-scale rating,
    deviation and volatility. They are only ever replaced as a set by the
    rating update service.
    """
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)

    rating_mu: Mapped[float] = mapped_column(Float, nullable=False, default=_default_mu)
    rating_phi: Mapped[float] = mapped_column(Float, nullable=False, default=_default_phi)
    rating_sigma: Mapped[float] = mapped_column(Float, nullable=False, default=_default_sigma)

    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        CheckConstraint("rating_phi >= 0", name="ck_players_phi_non_negative"),
        CheckConstraint("rating_sigma > 0", name="ck_players_sigma_positive"),
    )

    def to_rating(self) -> Optional[Rating]:
        """Current rating as a value object, or None if any field is missing."""
        if self.rating_mu is None or self.rating_phi is None or self.rating_sigma is None:
            return None
        return Rating(self.rating_mu, self.rating_phi, self.rating_sigma)

    def apply_rating(self, rating: Rating) -> None:
        """Store a new rating."""
        self.rating_mu = rating.rating
        self.rating_phi = rating.deviation
        self.rating_sigma = rating.volatility

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, name='{self.display_name}', rating={self.rating_mu})>"


class Match(Base):
    """
    A recorded head-to-head match.

    Score format:
    - score_structured: JSON list of sets, e.g. [{"a": 6, "b": 4}, {"a": 2, "b": 1}]
      where 'a' is player A's games (see glickotr.scoring)

    Match status lifecycle (see glickotr.match_statuses):
    - 'pending': Result entered, awaiting the opponent's confirmation
    - 'disputed': Opponent rejected the entered result
    - 'confirmed': Both players agreed; ready to be rated
    - 'rated': Rating update applied
    - 'cancelled': Will never be rated

    retired_player_id marks a retirement; a walkover is recorded with
    is_walkover and no sets.
    """
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(primary_key=True)

    player_a_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    player_b_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    # Result
    score_structured: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)
    winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    retired_player_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    is_walkover: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Contest metadata used for weighting
    category: Mapped[str] = mapped_column(String(20), nullable=False, default="standard")
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # ==========================================================================
    # Rating snapshots and processing metadata
    # ==========================================================================

    rating_pre_player_a: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rating_pre_player_b: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rating_post_player_a: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rating_post_player_b: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rating_weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rating_processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    player_a: Mapped["Player"] = relationship(foreign_keys=[player_a_id])
    player_b: Mapped["Player"] = relationship(foreign_keys=[player_b_id])

    __table_args__ = (
        CheckConstraint("player_a_id != player_b_id", name="ck_matches_distinct_players"),
        Index("idx_matches_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Match(id={self.id}, status='{self.status}')>"

"""
Value types passed into and out of the rating calculator.

Rating lives on the public scale (1500-centred) and is what gets stored on a
player profile. InternalRating is the same triple on the Glicko-2 scale and
only exists while a single update is being computed.
"""

import math
from dataclasses import dataclass
from typing import Optional

from glickotr.glicko.constants import DEFAULT_DEVIATION, DEFAULT_RATING, DEFAULT_VOLATILITY
from glickotr.match_statuses import normalize_category, normalize_contest_status


@dataclass(frozen=True)
class Rating:
    """
    A player's rating parameters on the public scale.

    Attributes:
        rating: Point estimate of strength (mu)
        deviation: Uncertainty around the estimate (phi, "RD")
        volatility: Expected fluctuation of the rating over time (sigma)
    """
    rating: float = DEFAULT_RATING
    deviation: float = DEFAULT_DEVIATION
    volatility: float = DEFAULT_VOLATILITY

    def __post_init__(self):
        if not all(math.isfinite(v) for v in (self.rating, self.deviation, self.volatility)):
            raise ValueError(f"rating values must be finite, got {self!r}")
        if self.deviation < 0:
            raise ValueError(f"deviation must be >= 0, got {self.deviation}")
        if self.volatility <= 0:
            raise ValueError(f"volatility must be > 0, got {self.volatility}")

    def __repr__(self) -> str:
        return f"<Rating({self.rating:.1f}, RD={self.deviation:.1f}, vol={self.volatility:.4f})>"


@dataclass(frozen=True)
class InternalRating:
    """Rating parameters on the internal Glicko-2 scale."""
    mu: float
    phi: float
    sigma: float


@dataclass(frozen=True)
class ContestOutcome:
    """
    Contest metadata that decides how much a match counts.

    Attributes:
        status: 'completed', 'retired' or 'walkover'
        category: 'standard' for a regular match, 'tiebreak' for a contest
                  decided by a match tiebreak alone
        is_public: Whether the match was played in a public event
    """
    status: str = "completed"
    category: str = "standard"
    is_public: bool = False

    def __post_init__(self):
        # Normalise casing/whitespace; unknown values raise ValueError
        object.__setattr__(self, "status", normalize_contest_status(self.status))
        object.__setattr__(self, "category", normalize_category(self.category))


def default_rating(
    rating: Optional[float] = None,
    deviation: Optional[float] = None,
    volatility: Optional[float] = None,
    settings=None,
) -> Rating:
    """
    Create the rating a brand-new player starts with.

    Values not given explicitly come from ``settings`` (the
    glicko_default_* fields, see glickotr.config) when provided, else
    from the module defaults.
    """
    if settings is not None:
        base = (
            settings.glicko_default_rating,
            settings.glicko_default_deviation,
            settings.glicko_default_volatility,
        )
    else:
        base = (DEFAULT_RATING, DEFAULT_DEVIATION, DEFAULT_VOLATILITY)
    return Rating(
        rating=base[0] if rating is None else rating,
        deviation=base[1] if deviation is None else deviation,
        volatility=base[2] if volatility is None else volatility,
    )

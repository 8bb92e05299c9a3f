"""
Conversion between the public rating scale and the internal Glicko-2 scale.

    mu'  = (rating - 1500) / 173.7178
    phi' = deviation / 173.7178

Volatility is scale-free and passes through unchanged. Converting back clamps
the rating to [0, 5000] so a run of extreme results can never push a stored
rating out of range.
"""

from glickotr.glicko.constants import DEFAULT_CONSTANTS, GlickoConstants
from glickotr.glicko.rating import InternalRating, Rating


def to_internal(rating: Rating, constants: GlickoConstants = DEFAULT_CONSTANTS) -> InternalRating:
    """Scale a public rating down to the internal Glicko-2 scale."""
    return InternalRating(
        mu=(rating.rating - constants.mu0) / constants.scale,
        phi=rating.deviation / constants.scale,
        sigma=rating.volatility,
    )


def to_public(internal: InternalRating, constants: GlickoConstants = DEFAULT_CONSTANTS) -> Rating:
    """Scale an internal rating back up, clamping the rating to its allowed range."""
    rating = internal.mu * constants.scale + constants.mu0
    rating = max(constants.min_rating, min(rating, constants.max_rating))
    return Rating(
        rating=rating,
        deviation=internal.phi * constants.scale,
        volatility=internal.sigma,
    )

"""
GlickoTR rating system constants.

Glicko-2 works on an internal scale where 1500 maps to 0 and one unit is
173.7178 public rating points. All numbers the algorithm depends on are
grouped in a single immutable GlickoConstants value so the calculator can be
run with alternate settings (e.g. a different tau while tuning) without
touching module state.

tau: Constrains how fast volatility can move between matches
  - Higher tau = volatility reacts quickly to surprising results
  - Lower tau = volatility stays close to its previous value

Expected scores are clamped to [0.1, 0.9]. A tennis match scored on games
won almost never ends with a 100% share, and the clamp keeps the variance
term 1 / (g^2 * E * (1 - E)) bounded.
"""

from dataclasses import dataclass

# Defaults for brand-new players (public scale)
DEFAULT_RATING = 1500.0
DEFAULT_DEVIATION = 250.0
DEFAULT_VOLATILITY = 0.06

# Conversion factor between the public and internal scales (400 / ln 10)
SCALING_FACTOR = 173.7178


@dataclass(frozen=True)
class GlickoConstants:
    """
    Every numeric constant used by the rating update.

    Scale:
        mu0: Public rating mapped to 0 on the internal scale
        scale: Public points per internal unit
        min_rating / max_rating: Clamp applied when converting back

    Expected-outcome model:
        clamp_epsilon: Expected scores are kept within [eps, 1 - eps]
        variance_cap: Upper bound on the per-match outcome variance

    Volatility solver:
        tau: System constant (volatility change speed)
        epsilon: Convergence tolerance on the bracket width
        max_iterations: Cap on Illinois refinement steps
        max_bracket_steps: Cap on the k*tau search for the lower bound
        exponent_floor: Lowest x at which f(x) is still evaluated
        degenerate_variance: Variance at or above which a broken bracket
            damps volatility instead of keeping it
        fallback_damping: Factor applied in that damped case

    Match weighting:
        retirement_threshold_games: Games played for a retirement to count fully
        max_retirement_weight: Weight of a retirement at or past the threshold
        tiebreak_weight: Weight of a contest decided by a match tiebreak only
        public_multiplier: Boost applied to public contests
    """
    mu0: float = DEFAULT_RATING
    scale: float = SCALING_FACTOR
    min_rating: float = 0.0
    max_rating: float = 5000.0

    clamp_epsilon: float = 0.1
    variance_cap: float = 1e6

    tau: float = 0.5
    epsilon: float = 1e-6
    max_iterations: int = 100
    max_bracket_steps: int = 100
    exponent_floor: float = -700.0
    degenerate_variance: float = 1e6
    fallback_damping: float = 0.9

    retirement_threshold_games: float = 18.0
    max_retirement_weight: float = 0.8
    tiebreak_weight: float = 0.6
    public_multiplier: float = 1.2

    def __post_init__(self):
        if self.tau <= 0:
            raise ValueError(f"tau must be positive, got {self.tau}")
        if self.scale <= 0:
            raise ValueError(f"scale must be positive, got {self.scale}")
        if not 0 <= self.clamp_epsilon < 0.5:
            raise ValueError(f"clamp_epsilon must be in [0, 0.5), got {self.clamp_epsilon}")
        if self.min_rating > self.max_rating:
            raise ValueError("min_rating must not exceed max_rating")

    @classmethod
    def from_settings(cls, settings) -> "GlickoConstants":
        """
        Build constants from application settings (see glickotr.config).

        Only tau is tunable there. The glicko_default_* settings describe
        new players (see default_rating), not the scale centre mu0.
        """
        return cls(tau=settings.glicko_tau)


DEFAULT_CONSTANTS = GlickoConstants()

"""
Volatility solver for the Glicko-2 update.

The new volatility sigma' is exp(x / 2) where x is the root of

    f(x) = e^x (delta^2 - phi^2 - v - e^x) / (2 (phi^2 + v + e^x)^2)
           - (x - ln(sigma^2)) / tau^2

The root is found with the Illinois variant of regula falsi. The root finder
itself is generic (illinois_root) and reports why it stopped; the
volatility-specific fallbacks live in determine_volatility:

- a non-finite f at a bracket end keeps the current volatility
- a bracket whose ends have the same sign keeps the current volatility,
  or damps it by 0.9 when the outcome variance is already at its cap
- any non-finite or non-positive result keeps the current volatility

so the function always returns a positive finite number.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

from glickotr.glicko.constants import DEFAULT_CONSTANTS, GlickoConstants
from glickotr.glicko.rating import InternalRating

logger = logging.getLogger(__name__)

# Denominators smaller than this are treated as zero
_TINY = 1e-15

# Reasons illinois_root can stop for
CONVERGED = "converged"
FLAT = "flat"
MAX_ITERATIONS = "max_iterations"
NON_FINITE = "non_finite"
INVALID_BRACKET = "invalid_bracket"
STEP_FAILED = "step_failed"


@dataclass
class RootResult:
    """
    Outcome of a bracketed root search.

    Attributes:
        root: Latest estimate (the B end of the bracket)
        other: The opposite end of the bracket (A)
        f_root: f evaluated at root
        f_other: Current (possibly damped) value associated with other
        iterations: Refinement steps taken
        reason: Why the search stopped (see module constants)
    """
    root: float
    other: float
    f_root: float
    f_other: float
    iterations: int
    reason: str

    @property
    def usable(self) -> bool:
        """Whether ``root`` can be trusted as an answer."""
        return self.reason not in (NON_FINITE, INVALID_BRACKET)


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def illinois_root(
    f: Callable[[float], float],
    a: float,
    b: float,
    tolerance: float = 1e-6,
    max_iterations: int = 100,
    f_a: Optional[float] = None,
    f_b: Optional[float] = None,
) -> RootResult:
    """
    Find a root of ``f`` between ``a`` and ``b`` (Illinois method).

    The bracket is checked at the start of every step. Instead of raising,
    the search stops and reports NON_FINITE when f is not finite at a
    bracket end, or INVALID_BRACKET when both ends have the same sign.
    A step whose false-position estimate is not finite falls back to
    bisection.

    Args:
        f: Function to solve
        a, b: Bracket end-points, f(a) and f(b) should differ in sign
        tolerance: Stop once |b - a| or |f(b) - f(a)| drops below this
        max_iterations: Hard cap on refinement steps
        f_a, f_b: Pre-computed f(a) and f(b), if already known

    Returns:
        RootResult with the final bracket and the stop reason
    """
    if f_a is None:
        f_a = f(a)
    if f_b is None:
        f_b = f(b)

    iterations = 0
    reason = CONVERGED

    while abs(b - a) > tolerance:
        if iterations >= max_iterations:
            reason = MAX_ITERATIONS
            break
        if not _finite(f_a, f_b):
            return RootResult(b, a, f_b, f_a, iterations, NON_FINITE)
        if f_a * f_b >= 0:
            return RootResult(b, a, f_b, f_a, iterations, INVALID_BRACKET)

        c = a + (a - b) * f_a / (f_b - f_a)
        if not math.isfinite(c):
            c = (a + b) / 2
        f_c = f(c)

        if not math.isfinite(f_c):
            if abs(b - a) < tolerance * 10:
                reason = STEP_FAILED
                break
            c = (a + b) / 2
            f_c = f(c)
            if not math.isfinite(f_c):
                reason = STEP_FAILED
                break

        if f_c == 0:
            return RootResult(c, b, f_c, f_b, iterations + 1, CONVERGED)

        if f_c * f_b < 0:
            a, f_a = b, f_b
        else:
            # Illinois step: shrink the stale end's value so it gets replaced
            denominator = f_b + f_c
            if abs(denominator) < _TINY:
                f_a *= 0.5
            else:
                f_a *= f_b / denominator
        b, f_b = c, f_c
        iterations += 1

        if abs(f_b - f_a) < tolerance:
            reason = FLAT
            break

    return RootResult(b, a, f_b, f_a, iterations, reason)


def _volatility_function(
    alpha: float,
    phi: float,
    difference: float,
    variance: float,
    tau: float,
) -> Callable[[float], float]:
    """Build f(x) for one player's state; alpha is ln(sigma^2)."""
    phi_sq = phi ** 2
    difference_sq = difference ** 2
    tau_sq = tau ** 2

    def f(x: float) -> float:
        try:
            exp_x = math.exp(x)
        except OverflowError:
            return math.nan
        denominator = phi_sq + variance + exp_x
        if denominator < _TINY:
            return (x - alpha) / tau_sq - 1
        a_term = exp_x * (difference_sq - phi_sq - variance - exp_x) / (2 * denominator * denominator)
        return a_term - (x - alpha) / tau_sq

    return f


def determine_volatility(
    rating: InternalRating,
    difference: float,
    variance: float,
    constants: GlickoConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Compute a player's new volatility after one match.

    Args:
        rating: The player's pre-match internal rating
        difference: Weighted outcome term, weight * g * (actual - expected)
        variance: Estimated outcome variance v (already capped)
        constants: Supplies tau, tolerances and fallback policy

    Returns:
        New volatility, always positive and finite
    """
    sigma = rating.sigma
    phi_sq = rating.phi ** 2
    difference_sq = difference ** 2
    tau = constants.tau

    alpha = math.log(sigma ** 2)
    f = _volatility_function(alpha, rating.phi, difference, variance, tau)

    # Bracket: A = ln(sigma^2), B either closed-form or stepped down by tau
    a = alpha
    if difference_sq > phi_sq + variance:
        b = math.log(difference_sq - phi_sq - variance)
    else:
        k = 1
        while (
            k < constants.max_bracket_steps
            and alpha - k * tau >= constants.exponent_floor
            and f(alpha - k * tau) >= 0
        ):
            k += 1
        b = alpha - k * tau

    result = illinois_root(
        f,
        a,
        b,
        tolerance=constants.epsilon,
        max_iterations=constants.max_iterations,
    )

    if result.reason == NON_FINITE:
        logger.warning(
            "Volatility solver hit non-finite f (phi=%.4f, delta=%.4f, v=%.4f); keeping sigma=%.5f",
            rating.phi, difference, variance, sigma,
        )
        return sigma

    if result.reason == INVALID_BRACKET:
        if variance < constants.degenerate_variance:
            logger.debug("Volatility bracket collapsed (v=%.4f); keeping sigma=%.5f", variance, sigma)
            return sigma
        logger.debug("Volatility bracket collapsed at variance cap; damping sigma=%.5f", sigma)
        return sigma * constants.fallback_damping

    if result.reason == MAX_ITERATIONS:
        logger.warning(
            "Volatility solver reached %d iterations (bracket width %.2e)",
            result.iterations, abs(result.root - result.other),
        )

    try:
        new_sigma = math.exp(result.root / 2)
    except OverflowError:
        return sigma
    if not math.isfinite(new_sigma) or new_sigma <= 0:
        return sigma
    return new_sigma

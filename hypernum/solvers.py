"""
Inverse-function solver shared by every inverse without a closed form.

The search runs in two phases. Bracket acquisition moves one bound outward,
doubling the distance each time, until the forward function brackets the
target. Bisection then halves the bracket until it is as narrow as floats allow
or narrower than the relative tolerance. Forward functions are assumed to be
non-decreasing in their argument over the searched range.

Roots far outside float range are searched on a super-logarithm scale: the
guess g stands for tetrate(10, g), which keeps every Magnitude reachable from
an ordinary float bracket.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
import warnings
from dataclasses import dataclass
from typing import Callable, Literal

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import DecompConf
from .errors import ConfigurationError, PrecisionWarning
from .formatters import fmt_value
from .hyperops import slog, tetrate
from .magnitude import Magnitude
from .numeric import to_magnitude


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class SearchBracket:
    """
    Mutable bracket around the unknown root.

    Attributes:
        lower: Bound with forward(lower) below the target once bracketing is done.
        upper: Bound with forward(upper) at or above the target.
        has_changed_directions_once: Set when bracket acquisition stops, which
            switches the search to bisection.
    """

    lower: float
    upper: float
    has_changed_directions_once: bool = False

    @property
    def midpoint(self) -> float:
        return self.lower + (self.upper - self.lower) / 2

    @property
    def span(self) -> float:
        return self.upper - self.lower

    def is_narrow(self, tolerance: float) -> bool:
        """True when the bracket is within the relative tolerance or cannot be split further."""
        midpoint = self.midpoint
        if midpoint in (self.lower, self.upper):
            return True
        return self.span <= tolerance * max(abs(self.lower), abs(self.upper))


# Methods --------------------------------------------------------------------------------------------------------------

def bracket_search(
        forward: Callable[[float], Magnitude],
        target,
        lower: float,
        upper: float,
        *,
        expand: Literal["up", "down"] | None = None,
        tolerance: float = DecompConf.BISECTION_TOLERANCE,
        max_iterations: int = DecompConf.BISECTION_LIMIT,
) -> float:
    """
    Find x with forward(x) == target for a non-decreasing forward function.

    Args:
        forward: Maps a float guess to a Magnitude.
        target: Value to hit.
        lower, upper: Seed bracket, lower < upper.
        expand: "up" moves the upper bound outward until forward(upper) >= target,
            "down" moves the lower bound outward until forward(lower) <= target,
            and None takes the seed as an established bracket.
        tolerance: Relative bracket width at which bisection stops.
        max_iterations: Budget for both phases together.

    Returns:
        float: The final midpoint. NaN when the forward function becomes NaN
        at a bound, or the bracket runs off to infinity.

    Warns:
        PrecisionWarning: when the budget runs out; the best estimate is returned.
    """
    target = to_magnitude(target)
    if lower >= upper:
        raise ConfigurationError(f"bracket lower bound must be below upper, got {fmt_value(lower)} and {fmt_value(upper)}")
    if expand not in (None, "up", "down"):
        raise ConfigurationError(f"expand must be 'up', 'down' or None, got {fmt_value(expand)}")

    bracket = SearchBracket(lower, upper, has_changed_directions_once=expand is None)
    iterations = 0

    while not bracket.has_changed_directions_once:
        if iterations >= max_iterations:
            return _exhausted(bracket, max_iterations)
        iterations += 1
        if expand == "up":
            value = forward(bracket.upper)
            if value.is_nan():
                return math.nan
            if value >= target:
                bracket.has_changed_directions_once = True
            else:
                bracket.lower, bracket.upper = bracket.upper, bracket.upper + 2 * bracket.span
        else:
            value = forward(bracket.lower)
            if value.is_nan():
                return math.nan
            if value <= target:
                bracket.has_changed_directions_once = True
            else:
                bracket.lower, bracket.upper = bracket.lower - 2 * bracket.span, bracket.lower
        if not math.isfinite(bracket.span):
            return math.nan

    while not bracket.is_narrow(tolerance):
        if iterations >= max_iterations:
            return _exhausted(bracket, max_iterations)
        iterations += 1
        guess = bracket.midpoint
        value = forward(guess)
        if value == target:
            return guess
        if value < target:
            bracket.lower = guess
        else:
            bracket.upper = guess
    return bracket.midpoint


def linear_sroot(value, degree) -> Magnitude:
    """
    Super-root under the linear approximation: x with tetrate(x, degree) == value.

    Only roots of at least one are searched, where tetration grows with its
    base. Values below one give NaN, as do degrees at or below zero.

    Examples:
        >>> linear_sroot(16, 3)  # 2^2^2
        Magnitude(sign=1, layer=0, mag=2.0)
        >>> linear_sroot(27, 2)
        Magnitude(sign=1, layer=0, mag=3.0)
    """
    value = to_magnitude(value)
    degree = to_magnitude(degree).to_float()

    if value.is_nan() or math.isnan(degree) or degree <= 0:
        return Magnitude.NAN
    if degree == 1 or value == Magnitude.ONE:
        return value
    if value == Magnitude.INF:
        return value
    if value < 1:
        return Magnitude.NAN
    if degree < 1:
        return value ** (1 / degree)

    if degree < 2:
        upper = value
    else:
        # x^x >= 10^x once x >= 10, so log10(value) already overshoots the root
        upper = max(value.log10(), Magnitude.TEN)

    def forward(g: float) -> Magnitude:
        return tetrate(tetrate(10, g), degree)

    g = bracket_search(forward, value, 0.0, slog(upper).to_float())
    if math.isnan(g):
        return Magnitude.NAN
    root = tetrate(10, g)
    if root.is_integer() or root.layer > 0:
        return root
    # Snap to an exact integer root when float error only blurs the last digits
    nearest = root.round()
    if tetrate(nearest, degree) == value:
        return nearest
    return root


# Private Methods ------------------------------------------------------------------------------------------------------

def _exhausted(bracket: SearchBracket, max_iterations: int) -> float:
    warnings.warn(
        f"bracket search did not converge within {max_iterations} iterations, "
        f"returning the midpoint of [{bracket.lower}, {bracket.upper}]",
        PrecisionWarning,
        stacklevel=3
    )
    return bracket.midpoint

"""
Rounding a Magnitude to the nearest multiple of a quantum.

A rounding policy is either a fixed quantum or a function computing the quantum
from the value being rounded. The computed form is how every "significant
figures" behavior is expressed: the quantum scales with the value, so relative
precision stays constant across magnitudes.

Examples:
    >>> round_to(2.357, 0.5)
    Magnitude(sign=1, layer=0, mag=2.5)
    >>> round_to(123456, significant_figures(3))
    Magnitude(sign=1, layer=0, mag=123000.0)
    >>> round_to(2.357, 0)  # zero quantum: unchanged
    Magnitude(sign=1, layer=0, mag=2.357)
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Callable, TypeAlias

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import ConfigurationError
from .formatters import fmt_type, fmt_value
from .magnitude import Magnitude
from .numeric import to_magnitude


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class FixedRounding:
    """Round to multiples of a constant quantum; a zero quantum disables rounding."""

    quantum: Magnitude

    def __post_init__(self):
        quantum = to_magnitude(self.quantum)
        if quantum.is_nan() or quantum.sign < 0:
            raise ConfigurationError(f"rounding quantum must be zero or positive, got {fmt_value(self.quantum)}")
        object.__setattr__(self, 'quantum', quantum)

    def quantum_for(self, value: Magnitude) -> Magnitude:
        return self.quantum


@dataclass(frozen=True)
class ComputedRounding:
    """Round to multiples of a quantum computed from the value being rounded."""

    func: Callable[[Magnitude], object]

    def __post_init__(self):
        if not callable(self.func):
            raise ConfigurationError(f"rounding function must be callable, got {fmt_type(self.func)}")

    def quantum_for(self, value: Magnitude) -> Magnitude:
        quantum = to_magnitude(self.func(value))
        if quantum.is_nan() or quantum.sign < 0:
            raise ConfigurationError(
                f"rounding function returned {fmt_value(quantum)} for {value}, expected zero or positive"
            )
        return quantum


Rounding: TypeAlias = FixedRounding | ComputedRounding

NO_ROUNDING = FixedRounding(Magnitude.ZERO)


# Methods --------------------------------------------------------------------------------------------------------------

def as_rounding(policy) -> Rounding:
    """
    Coerce a rounding policy.

    Accepts FixedRounding / ComputedRounding as they are, a callable as a
    ComputedRounding, and any number-like (including 0) as a FixedRounding.
    """
    if isinstance(policy, (FixedRounding, ComputedRounding)):
        return policy
    if callable(policy) and not isinstance(policy, Magnitude):
        return ComputedRounding(policy)
    return FixedRounding(policy)


def round_to(value, rounding=0) -> Magnitude:
    """
    Round `value` to the nearest multiple of the rounding quantum.

    Computes round(value / q) * q with ties away from zero. A zero quantum, an
    infinite quantum and a non-finite value all return `value` unchanged.
    """
    value = to_magnitude(value)
    quantum = as_rounding(rounding).quantum_for(value)
    if not quantum or not quantum.is_finite() or not value.is_finite():
        return value
    return (value / quantum).round() * quantum


def significant_figures(digits: int, base=10) -> ComputedRounding:
    """
    Rounding that keeps `digits` significant digits in `base`.

    The quantum for a value v is base ** (floor(log_base |v|) - digits + 1).
    Zero rounds with a zero quantum, that is not at all.
    """
    if not isinstance(digits, int) or isinstance(digits, bool) or digits < 1:
        raise ConfigurationError(f"significant digits must be a positive int, got {fmt_value(digits)}")
    base = to_magnitude(base)
    if base.cmp(Magnitude.ONE) != 1:
        raise ConfigurationError(f"significant figures base must exceed 1, got {fmt_value(base)}")

    def quantum(value: Magnitude) -> Magnitude:
        if not value or not value.is_finite():
            return Magnitude.ZERO
        return base ** (abs(value).log(base).floor() - (digits - 1))

    return ComputedRounding(quantum)

"""
Engineering steps: quantizing exponents onto a lattice built from allowed increments.

A StepList [s1 > s2 > ... > sn] defines the lattice of values c1*s1 + c2*s2 + ...
where each ci is a non-negative integer and every partial sum of the smaller
steps stays below the next larger one. [1] is the plain integers, [3] is
engineering notation, and [5, 2] allows 0, 2, 4, 5, 7, 9, 10, 12, 14, ...

Coefficient functions work on non-negative values and return one coefficient
per step. Value functions accept any sign and return lattice points; for
negative inputs they mirror the positive lattice so that next and previous stay
inverse to each other under negation.

Examples:
    >>> steps = StepList.of(5, 2)
    >>> current_step_value(8, steps), next_step_value(8, steps), previous_step_value(8, steps)
    (Magnitude(sign=1, layer=0, mag=7.0), Magnitude(sign=1, layer=0, mag=9.0), Magnitude(sign=1, layer=0, mag=5.0))
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Iterable, Iterator

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import ConfigurationError, InvalidInput
from .formatters import fmt_value
from .magnitude import Magnitude
from .numeric import to_magnitude


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class StepList:
    """
    Immutable, normalized list of allowed exponent increments.

    Steps are sorted descending and deduplicated once, on construction, and every
    step must be a finite positive number.

    Steps are stored as binary floats. Fractional steps that are not dyadic, like
    0.1, do not divide evenly, so a value that looks like a lattice point may
    floor onto the point below: current_step_value(0.3, [0.1]) is 0.2. Prefer
    dyadic fractions such as 0.5 or 0.25 when lattice points must be exact.

    Raises:
        ConfigurationError: for an empty list or a step that is not finite and positive.
    """

    steps: tuple[Magnitude, ...]

    def __post_init__(self):
        steps = tuple(to_magnitude(s) for s in self.steps)
        if not steps:
            raise ConfigurationError("step list must not be empty")
        for s in steps:
            if s.sign <= 0 or not s.is_finite():
                raise ConfigurationError(f"steps must be finite and positive, got {fmt_value(s)}")
        unique = []
        for s in sorted(steps, reverse=True):
            if not unique or unique[-1] != s:
                unique.append(s)
        object.__setattr__(self, 'steps', tuple(unique))

    @classmethod
    def of(cls, *steps) -> 'StepList':
        return cls(steps)

    @property
    def smallest(self) -> Magnitude:
        return self.steps[-1]

    def __iter__(self) -> Iterator[Magnitude]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index):
        return self.steps[index]


UNIT_STEPS = StepList.of(1)


# Methods --------------------------------------------------------------------------------------------------------------

def as_step_list(steps) -> StepList:
    """Coerce a StepList, a single number-like, or an iterable of number-likes."""
    if isinstance(steps, StepList):
        return steps
    if isinstance(steps, (str, Magnitude)):
        return StepList.of(steps)
    if isinstance(steps, Iterable):
        return StepList(tuple(steps))
    try:
        return StepList.of(to_magnitude(steps))
    except InvalidInput as e:
        raise ConfigurationError(f"steps must be a number or an iterable of numbers, got {fmt_value(steps)}") from e


def current_step(value, steps) -> tuple[Magnitude, ...]:
    """
    Greedy coefficients of the largest lattice point at or below a non-negative value.

    Raises:
        ValueError: for negative values; use current_step_value for those.
    """
    value, steps = to_magnitude(value), as_step_list(steps)
    if value.sign < 0:
        raise ValueError(f"current_step requires a non-negative value, got {value}")
    if not value:
        return (Magnitude.ZERO,) * len(steps)

    coefficients = []
    remaining = value
    for s in steps:
        portion = (remaining / s).floor()
        if portion.sign < 0:
            portion = Magnitude.ZERO
        remaining = remaining - portion * s
        coefficients.append(portion)
    return tuple(coefficients)


def step_value(coefficients, steps) -> Magnitude:
    """Reconstruct the lattice point sum(c_i * s_i)."""
    steps = as_step_list(steps)
    result = Magnitude.ZERO
    for c, s in zip(coefficients, steps):
        result = result + to_magnitude(c) * s
    return result


def current_step_value(value, steps) -> Magnitude:
    """Largest lattice point at or below value (toward minus infinity for negatives)."""
    value, steps = to_magnitude(value), as_step_list(steps)
    if not value:
        return Magnitude.ZERO
    if value.sign < 0:
        return -upper_current_step_value(-value, steps)
    return step_value(current_step(value, steps), steps)


def next_step(value, steps) -> tuple[Magnitude, ...]:
    """
    Coefficients of the smallest lattice point strictly above a non-negative value.

    Scans the steps from least to most significant, incrementing one coefficient
    and zeroing all less significant ones, and keeps the lowest candidate above value.
    """
    value, steps = to_magnitude(value), as_step_list(steps)
    current = current_step(value, steps)
    best, best_value = current, Magnitude.INF
    for s in reversed(range(len(steps))):
        candidate = current[:s] + (current[s] + 1,) + (Magnitude.ZERO,) * (len(steps) - s - 1)
        candidate_value = step_value(candidate, steps)
        if candidate_value > value and candidate_value < best_value:
            best, best_value = candidate, candidate_value
    return best


def next_step_value(value, steps) -> Magnitude:
    """Smallest lattice point strictly above value; negatives mirror previous_step_value."""
    value, steps = to_magnitude(value), as_step_list(steps)
    if not value:
        return steps.smallest
    if value.sign < 0:
        return -previous_step_value(-value, steps)
    return step_value(next_step(value, steps), steps)


def previous_step(value, steps) -> tuple[Magnitude, ...]:
    """
    Coefficients of the lattice point one step below the current one.

    Decrements one non-zero coefficient, then refills the less significant
    positions with the largest sum that stays strictly below the decremented
    step, and keeps the highest candidate below value.
    """
    value, steps = to_magnitude(value), as_step_list(steps)
    current = current_step(value, steps)
    best, best_value = current, Magnitude.NEG_INF
    for s in reversed(range(len(steps))):
        if current[s].sign <= 0:
            continue
        candidate = list(current[:s]) + [current[s] - 1]
        candidate_value = step_value(candidate, steps)
        difference = steps[s]
        for t in range(s + 1, len(steps)):
            coefficient = (difference / steps[t]).floor()
            if coefficient.sign < 0:
                coefficient = Magnitude.ZERO
            portion = coefficient * steps[t]
            if portion == difference:
                coefficient = coefficient - 1
                portion = portion - steps[t]
            difference = difference - portion
            candidate_value = candidate_value + portion
            candidate.append(coefficient)
        if candidate_value < value and candidate_value > best_value:
            best, best_value = tuple(candidate), candidate_value
    return best


def previous_step_value(value, steps) -> Magnitude:
    """Lattice point one step below the current lattice point of value; negatives mirror next_step_value."""
    value, steps = to_magnitude(value), as_step_list(steps)
    if not value:
        return -steps.smallest
    if value.sign < 0:
        return -next_step_value(-value, steps)
    return step_value(previous_step(value, steps), steps)


def upper_current_step_value(value, steps) -> Magnitude:
    """Smallest lattice point at or above value."""
    value, steps = to_magnitude(value), as_step_list(steps)
    current = current_step_value(value, steps)
    if value == current:
        return current
    return next_step_value(value, steps)

"""
Hypersplit: the four-level cascade mantissa, exponent, tetration, pentation.

A value is rebuilt from its split top-down. Start from the mantissa, multiply by
base ** exponent, raise that payload through a tower of `tetration` bases, and
finally feed the result through `pentation` rounds of tetration of height x.
Each level has a ceiling. A component that reaches its ceiling rolls over into
the next level up.

Examples:
    >>> hypersplit(2357)
    (Magnitude(sign=1, layer=0, mag=2.357), Magnitude(sign=1, layer=0, mag=3.0), Magnitude(sign=0, layer=0, mag=0.0), Magnitude(sign=0, layer=0, mag=0.0))
    >>> hypersplit(1e100)[:3]  # 10^(1 * 10^2)
    (Magnitude(sign=1, layer=0, mag=1.0), Magnitude(sign=1, layer=0, mag=2.0), Magnitude(sign=1, layer=0, mag=1.0))
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
import warnings
from dataclasses import dataclass

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import DecompConf
from .correction import settle
from .errors import ConfigurationError, PrecisionWarning
from .formatters import fmt_value
from .hyperops import iterated_exp_mult, iterated_mult_log, mult_slog
from .hyperscientific import hyperscientifify
from .magnitude import Magnitude
from .numeric import to_magnitude
from .rounding import Rounding, as_rounding, round_to
from .scientific import scientifify
from .sentinels import UNSET, ifnotunset
from .steps import UNIT_STEPS, StepList, as_step_list, next_step_value, previous_step_value

Split = tuple[Magnitude, Magnitude, Magnitude, Magnitude]


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class _Cascade:
    """Normalized hypersplit parameters, shared by every level of roll-over recursion."""

    base: Magnitude
    rounding: Rounding
    steps: StepList
    hyper_steps: StepList
    penta_steps: StepList
    mult: Magnitude
    hypermult: Magnitude
    minnum: Magnitude
    maximums: tuple[Magnitude, Magnitude, Magnitude]
    original_maximums: tuple[Magnitude, Magnitude, Magnitude]
    limits: tuple[Magnitude, Magnitude, Magnitude]
    original_limits: tuple[Magnitude, Magnitude, Magnitude]
    mantissa_removed: bool
    amount_removed: int

    def slog(self, value: Magnitude) -> Magnitude:
        """One pentation step down: the scaled tower height of value."""
        return mult_slog(value, self.base, self.mult) * self.hypermult

    def slog_times(self, value: Magnitude, count: Magnitude) -> Magnitude:
        for _ in range(math.ceil(count.to_float())):
            value = self.slog(value)
        return value


# Methods --------------------------------------------------------------------------------------------------------------

def hypersplit(
        value,
        base=10,
        maximums=UNSET,
        original_maximums=UNSET,
        minnum=1,
        rounding=0,
        steps=UNIT_STEPS,
        hyper_steps=UNIT_STEPS,
        penta_steps=UNIT_STEPS,
        exp_multiplier=1,
        hyperexp_multiplier=1,
        pentaexp_multiplier=1,
) -> Split:
    """
    Decompose a value into (mantissa, exponent, tetration, pentation).

    Args:
        value: Any number-like.
        base: Base shared by every level; base ** (1 / exp_multiplier) must exceed e^(1/e).
        maximums: Ceilings for the mantissa, exponent and tetration levels,
            default [base, base, base]. Shorter lists repeat their last entry.
            A mantissa ceiling of 0 removes the mantissa. An exponent ceiling at
            or below exp_multiplier disables the exponent level, and a
            tetration ceiling at or below hyperexp_multiplier on top of that
            disables the tetration level, forcing the value upward.
        original_maximums: Ceilings applied while the next level up is still
            zero, default `maximums`. Lets the first use of a level be larger.
        minnum: Values with minnum <= |value| < original_maximums[0] are
            returned as plain mantissas.
        rounding: Rounding policy for the lowest level present.
        steps, hyper_steps, penta_steps: Step lattices of the three upper levels.
        exp_multiplier, hyperexp_multiplier, pentaexp_multiplier: Scale the
            exponent, tetration and pentation components respectively.

    Returns:
        Split: Four Magnitudes. Disabled levels are reported as zero. NaN splits
        into NaN for every component, and +-inf into (+-inf, 0, 0, inf).

    Raises:
        ConfigurationError: for a convergent effective base or a negative ceiling.

    Warns:
        PrecisionWarning: when roll-over recursion exceeds DecompConf.RECURSION_LIMIT
            or a correction loop exceeds DecompConf.CORRECTION_LIMIT.
    """
    value, base = to_magnitude(value), to_magnitude(base)
    mult, hypermult = to_magnitude(exp_multiplier), to_magnitude(hyperexp_multiplier)
    pentamult = to_magnitude(pentaexp_multiplier)

    effective = base ** mult.recip() if mult else Magnitude.NAN
    if effective.is_nan() or effective.cmp(DecompConf.CONVERGENCE_BASE) != 1:
        raise ConfigurationError(
            f"hypersplit does not support convergent tetrations, "
            f"got base {fmt_value(base)} with multiplier {fmt_value(mult)}"
        )

    maximums = _ceilings(ifnotunset(maximums, default=[base]), base)
    original_maximums = _ceilings(ifnotunset(original_maximums, default=maximums), base)
    cascade = _cascade(
        base, as_rounding(rounding),
        as_step_list(steps), as_step_list(hyper_steps), as_step_list(penta_steps),
        mult, hypermult, to_magnitude(minnum),
        maximums, original_maximums
    )

    mantissa, exponent, tetration, pentation = _split(value, cascade, 0)
    return mantissa, exponent, tetration, pentation * pentamult


# Private Methods ------------------------------------------------------------------------------------------------------

def _ceilings(values, base: Magnitude) -> list[Magnitude]:
    ceilings = [to_magnitude(v) for v in values] or [base]
    for c in ceilings:
        if c.is_nan() or c.sign < 0:
            raise ConfigurationError(f"hypersplit ceilings must be zero or positive, got {fmt_value(c)}")
    while len(ceilings) < 3:
        ceilings.append(ceilings[-1])
    return ceilings[:3]


def _cascade(base, rounding, steps, hyper_steps, penta_steps, mult, hypermult, minnum,
             maximums, original_maximums) -> _Cascade:
    maximums = list(maximums)
    mantissa_removed = not maximums[0]
    amount_removed = 0
    if maximums[1] <= mult:
        amount_removed = 1
        maximums[1] = Magnitude.ONE
        if maximums[2] <= hypermult:
            amount_removed = 2
            maximums[2] = Magnitude.ONE

    def level_limits(ceilings, payload_limit=None):
        if mantissa_removed:
            first = iterated_exp_mult(base, ceilings[1], 1, mult)
        else:
            first = iterated_exp_mult(base, previous_step_value(ceilings[1], steps), 1, mult) * maximums[0]
            first = max(first, ceilings[0])
        payload = first if payload_limit is None else payload_limit
        height = previous_step_value(ceilings[2] / hypermult, hyper_steps)
        second = max(iterated_exp_mult(base, payload, height, mult), first)
        return ceilings[0], first, second

    limits = level_limits(maximums)
    # The tetration level always stacks on the steady-state exponent limit
    original_limits = level_limits(original_maximums, payload_limit=limits[1])

    return _Cascade(
        base=base, rounding=rounding,
        steps=steps, hyper_steps=hyper_steps, penta_steps=penta_steps,
        mult=mult, hypermult=hypermult, minnum=minnum,
        maximums=tuple(maximums), original_maximums=tuple(original_maximums),
        limits=limits, original_limits=original_limits,
        mantissa_removed=mantissa_removed, amount_removed=amount_removed,
    )


def _split(value: Magnitude, c: _Cascade, depth: int) -> Split:
    zero = Magnitude.ZERO

    if value.is_nan():
        return Magnitude.NAN, Magnitude.NAN, Magnitude.NAN, Magnitude.NAN
    if not value.is_finite():
        return value, zero, zero, Magnitude.INF
    if not value and c.amount_removed == 0:
        return zero, zero, zero, zero
    if not c.mantissa_removed and c.minnum.sign >= 0 and c.minnum <= abs(value) < c.original_maximums[0]:
        return value, zero, zero, zero

    if value < 1 and c.amount_removed == 1:
        if c.mantissa_removed:
            return zero, zero, round_to(c.slog(value), c.rounding), zero
        tetration = previous_step_value(zero, c.hyper_steps)
        while value.sign < 0 and tetration > -2:
            tetration = previous_step_value(tetration, c.hyper_steps)
        mantissa = iterated_mult_log(value, c.base, tetration, c.mult)
        return mantissa, zero, tetration * c.hypermult, zero

    if value < 1 and c.amount_removed == 2:
        # No better choice than reading the tower height as the pentation
        if c.mantissa_removed:
            return zero, zero, zero, round_to(c.slog(value), c.rounding)
        pentation = next_step_value(zero, c.penta_steps)
        return c.slog_times(value, pentation), zero, zero, pentation

    if value.sign < 0:
        mantissa, exponent, tetration, pentation = _split(-value, c, depth)
        return -mantissa, exponent, tetration, pentation
    if value < 1 and c.amount_removed < 1 and value.recip() >= c.original_limits[1]:
        mantissa, exponent, tetration, pentation = _split(value.recip(), c, depth)
        if not exponent and not c.mantissa_removed:
            # The exponent sign marks the reciprocal, so it must not be zero
            shift = c.steps.smallest
            mantissa, exponent = mantissa / c.base ** shift, shift * c.mult
        return mantissa, -exponent, tetration, pentation

    original = value
    pentation = zero

    if c.mantissa_removed and c.amount_removed > 1:
        for _ in range(DecompConf.CORRECTION_LIMIT):
            if value < c.base:
                break
            value = c.slog(value)
            pentation = pentation + 1
        else:
            _warn_exhausted("pentation descent", value)
        pentation = round_to((pentation + value.log(c.base)) * c.hypermult, c.rounding)
        return zero, zero, zero, pentation

    if value >= c.original_limits[2]:
        for _ in range(DecompConf.CORRECTION_LIMIT):
            if value < c.limits[2]:
                break
            increase = next_step_value(pentation, c.penta_steps) - pentation
            value = c.slog_times(value, increase)
            pentation = pentation + increase
        else:
            _warn_exhausted("pentation descent", value)

    hypermantissa, tetration = value, zero

    if c.mantissa_removed and c.amount_removed > 0:
        tetration = round_to(c.slog(value), c.rounding)
        if tetration >= c.maximums[2]:
            rolled = _roll_over(original, pentation, c, depth)
            if rolled is not None:
                return rolled
        return zero, zero, tetration, pentation

    if c.amount_removed > 1:
        hypermantissa = round_to(hypermantissa, c.rounding)
    elif value >= (c.limits[1] if pentation else c.original_limits[1]):
        hypermantissa, tetration = _tower(value, c)

    mantissa, exponent, tetration = _scientific_levels(hypermantissa, tetration, c)

    tetration = tetration * c.hypermult
    if tetration >= (c.maximums[2] if pentation else c.original_maximums[2]):
        rolled = _roll_over(original, pentation, c, depth)
        if rolled is not None:
            return rolled

    exponent = exponent * c.mult
    if c.amount_removed > 0:
        exponent = zero
    if c.amount_removed > 1:
        tetration = zero
    return mantissa, exponent, tetration, pentation


def _tower(value: Magnitude, c: _Cascade) -> tuple[Magnitude, Magnitude]:
    """Tetration level: the tallest tower whose payload stays below the exponent limit."""
    power = mult_slog(c.limits[1], c.base, c.mult)
    hypermantissa, tetration = hyperscientifify(value, c.base, 0, power, c.hyper_steps, c.mult)

    for _ in range(DecompConf.CORRECTION_LIMIT):
        previous = hypermantissa
        if hypermantissa >= c.limits[1]:
            target = next_step_value(tetration, c.hyper_steps)
            hypermantissa = iterated_mult_log(hypermantissa, c.base, target - tetration, c.mult)
            tetration = target
        else:
            target = previous_step_value(tetration, c.hyper_steps)
            lifted = iterated_exp_mult(c.base, hypermantissa, tetration - target, c.mult)
            if lifted >= c.limits[1]:
                break
            hypermantissa, tetration = lifted, target
        if hypermantissa == previous:
            break
    else:
        _warn_exhausted("tower correction", hypermantissa)
    return hypermantissa, tetration


def _scientific_levels(hypermantissa: Magnitude, tetration: Magnitude, c: _Cascade
                       ) -> tuple[Magnitude, Magnitude, Magnitude]:
    """Mantissa and exponent of the tower payload, pushing rounding overflow into the tower."""
    base, steps = c.base, c.steps

    for _ in range(DecompConf.CORRECTION_LIMIT):
        mantissa, exponent = hypermantissa, Magnitude.ZERO
        if c.mantissa_removed:
            mantissa, exponent = Magnitude.ZERO, round_to(hypermantissa.log(base), c.rounding)
        elif c.amount_removed < 1 and mantissa >= c.original_maximums[0]:
            # Only a first guess, the correction below moves it onto the ceiling
            power = c.limits[0].log(base) - steps.smallest
            mantissa, exponent = scientifify(hypermantissa, base, 0, power, steps)

        unrounded = mantissa
        mantissa = round_to(mantissa, c.rounding)
        if c.amount_removed < 1 and not c.mantissa_removed:
            def upper(e: Magnitude) -> Magnitude:
                return c.limits[0] if e else c.original_limits[0]

            def lower(e: Magnitude) -> Magnitude:
                return upper(e) / base ** (e - previous_step_value(e, steps))

            def violation(m: Magnitude, e: Magnitude) -> int:
                return 1 if m >= upper(e) else -1 if m < lower(e) else 0

            def step_up(m: Magnitude, e: Magnitude) -> tuple[Magnitude, Magnitude]:
                target = next_step_value(e, steps)
                return m * base ** (e - target), target

            def step_down(m: Magnitude, e: Magnitude) -> tuple[Magnitude, Magnitude]:
                target = previous_step_value(e, steps)
                return m * base ** (e - target), target

            mantissa, exponent = settle(
                mantissa, unrounded, exponent,
                violation=violation,
                step_up=step_up,
                step_down=step_down,
                clamp=lower,
                rounding=c.rounding,
            )

        # Rounding can carry the exponent over its ceiling
        if exponent < (c.maximums[1] if tetration else c.original_maximums[1]):
            return mantissa, exponent, tetration
        target = next_step_value(tetration, c.hyper_steps)
        hypermantissa = iterated_mult_log(hypermantissa, base, target - tetration, c.mult)
        tetration = target

    _warn_exhausted("exponent roll-over", hypermantissa)
    return mantissa, exponent, tetration


def _roll_over(value: Magnitude, pentation: Magnitude, c: _Cascade, depth: int) -> Split | None:
    """Redo the split one pentation step higher, or None once recursion is exhausted."""
    if depth >= DecompConf.RECURSION_LIMIT:
        warnings.warn(
            f"hypersplit roll-over exceeded {DecompConf.RECURSION_LIMIT} levels, "
            f"returning the split without further roll-over",
            PrecisionWarning,
            stacklevel=4
        )
        return None
    increase = next_step_value(pentation, c.penta_steps) - pentation
    mantissa, exponent, tetration, inner = _split(c.slog_times(value, increase), c, depth + 1)
    return mantissa, exponent, tetration, inner + increase


def _warn_exhausted(stage: str, estimate: Magnitude):
    warnings.warn(
        f"hypersplit {stage} did not settle within {DecompConf.CORRECTION_LIMIT} passes, "
        f"continuing from {estimate}",
        PrecisionWarning,
        stacklevel=4
    )

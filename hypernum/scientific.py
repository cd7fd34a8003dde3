"""
Scientific decomposition: value = mantissa * base ** exponent with the exponent on a step lattice.
"""

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import DecompConf
from .correction import settle
from .errors import ConfigurationError
from .formatters import fmt_value
from .magnitude import Magnitude
from .numeric import to_magnitude
from .rounding import as_rounding, round_to
from .steps import UNIT_STEPS, as_step_list, current_step_value, next_step_value, previous_step_value


# Methods --------------------------------------------------------------------------------------------------------------

def scientifify(
        value,
        base=10,
        rounding=0,
        mantissa_power=0,
        steps=UNIT_STEPS,
        exp_multiplier=1,
) -> tuple[Magnitude, Magnitude]:
    """
    Split a value into (mantissa, exponent) with value = mantissa * base ** exponent.

    Args:
        value: Any number-like.
        base: Positive, not one. Bases below one invert the ordering of the
            mantissa range but are otherwise supported.
        rounding: Rounding policy for the mantissa, see `as_rounding`.
        mantissa_power: Shifts the canonical mantissa range to
            [base ** mantissa_power, base ** (mantissa_power + gap)), where gap is
            the lattice spacing at the chosen exponent.
        steps: Allowed exponent increments; [3] gives engineering notation.
        exp_multiplier: Scales the returned exponent, so that the relation
            becomes value = mantissa * base ** (exponent / exp_multiplier).

    Returns:
        tuple[Magnitude, Magnitude]: The rounded mantissa and the lattice exponent.
        Degenerate inputs map as follows:

        - 0 gives (0, -inf)
        - inf gives (inf, inf) and -inf gives (-inf, inf)
        - NaN gives (NaN, NaN)
        - negative values give the negated mantissa of their absolute value

    Raises:
        ConfigurationError: for a base that is zero, negative, NaN or one.

    Examples:
        >>> scientifify(2357)
        (Magnitude(sign=1, layer=0, mag=2.357), Magnitude(sign=1, layer=0, mag=3.0))
        >>> scientifify(23570, steps=[3])
        (Magnitude(sign=1, layer=0, mag=23.57), Magnitude(sign=1, layer=0, mag=3.0))
    """
    value, base = to_magnitude(value), to_magnitude(base)
    mantissa_power, exp_multiplier = to_magnitude(mantissa_power), to_magnitude(exp_multiplier)
    rounding, steps = as_rounding(rounding), as_step_list(steps)

    if base.is_nan() or base.sign <= 0 or base == Magnitude.ONE:
        raise ConfigurationError(f"scientific base must be positive and not one, got {fmt_value(base)}")

    if value.is_nan():
        return Magnitude.NAN, Magnitude.NAN
    if not value:
        return Magnitude.ZERO, Magnitude.NEG_INF
    if not value.is_finite():
        return value, Magnitude.INF
    if value.sign < 0:
        mantissa, exponent = scientifify(-value, base, rounding, mantissa_power, steps, exp_multiplier)
        return -mantissa, exponent

    exponent = current_step_value(value.log(base) - mantissa_power, steps)
    unrounded = value / base ** exponent
    mantissa = round_to(unrounded, rounding)

    lower = base ** mantissa_power
    if abs(exponent).to_float() > DecompConf.MAX_SAFE_INTEGER:
        mantissa = lower
    else:
        ascending = base.cmp(Magnitude.ONE) > 0

        def violation(m: Magnitude, e: Magnitude) -> int:
            upper = base ** (next_step_value(e, steps) - current_step_value(e, steps) + mantissa_power)
            if ascending:
                return 1 if m >= upper else -1 if m < lower else 0
            # Below one, a larger exponent means a larger mantissa
            return 1 if m <= upper else -1 if m > lower else 0

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
            clamp=lambda e: lower,
            rounding=rounding,
        )

    return mantissa, exponent * exp_multiplier

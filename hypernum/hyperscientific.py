"""
Hyper-scientific decomposition: value = tetrate(base, hyperexponent, mantissa).

The mantissa is the payload at the top of a power tower of `base` and the
hyperexponent its height, quantized on a step lattice. With the default
settings the mantissa lies in [1, base).
"""

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import DecompConf
from .correction import settle
from .errors import ConfigurationError
from .formatters import fmt_value
from .hyperops import iterated_exp_mult, iterated_mult_log, mult_slog
from .magnitude import Magnitude
from .numeric import to_magnitude
from .rounding import as_rounding, round_to
from .steps import UNIT_STEPS, as_step_list, current_step_value, next_step_value, previous_step_value


# Methods --------------------------------------------------------------------------------------------------------------

def hyperscientifify(
        value,
        base=10,
        rounding=0,
        hyper_mantissa_power=0,
        steps=UNIT_STEPS,
        exp_multiplier=1,
        hyperexp_multiplier=1,
) -> tuple[Magnitude, Magnitude]:
    """
    Split a value into (mantissa, hyperexponent) with value = base↑↑hyperexponent↑mantissa.

    Args:
        value: Any number-like.
        base: Tower base. Together with exp_multiplier it must give a divergent
            tower, that is base ** (1 / exp_multiplier) > e ** (1 / e).
        rounding: Rounding policy for the mantissa, see `as_rounding`.
        hyper_mantissa_power: Shifts the mantissa range to
            [base↑↑p, base↑↑(p + gap)), where gap is the lattice spacing.
        steps: Allowed hyperexponent increments.
        exp_multiplier: Every exponentiation in the tower is base ** (x / exp_multiplier).
        hyperexp_multiplier: Scales the returned hyperexponent.

    Returns:
        tuple[Magnitude, Magnitude]: inf gives (inf, inf), -inf gives (-inf, -2)
        and NaN gives (NaN, NaN). Values below one are reached with negative
        hyperexponents, since each step down the tower is one exponentiation.

    Raises:
        ConfigurationError: for a convergent effective base.

    Examples:
        >>> hyperscientifify(1e100)
        (Magnitude(sign=1, layer=0, mag=2.0), Magnitude(sign=1, layer=0, mag=2.0))
        >>> hyperscientifify("1e1e10")  # 10↑↑3
        (Magnitude(sign=1, layer=0, mag=1.0), Magnitude(sign=1, layer=0, mag=3.0))
    """
    value, base = to_magnitude(value), to_magnitude(base)
    power = to_magnitude(hyper_mantissa_power)
    mult, hypermult = to_magnitude(exp_multiplier), to_magnitude(hyperexp_multiplier)
    rounding, steps = as_rounding(rounding), as_step_list(steps)

    effective = base ** mult.recip() if mult else Magnitude.NAN
    if effective.is_nan() or effective.cmp(DecompConf.CONVERGENCE_BASE) != 1:
        raise ConfigurationError(
            f"hyperscientific base must exceed e^(1/e) after applying the exponent multiplier, "
            f"got base {fmt_value(base)} with multiplier {fmt_value(mult)}"
        )

    if value.is_nan():
        return Magnitude.NAN, Magnitude.NAN
    if value == Magnitude.INF:
        return Magnitude.INF, Magnitude.INF
    if value == Magnitude.NEG_INF:
        return Magnitude.NEG_INF, Magnitude.from_float(-2.0)

    # Towers shorter than the band are unwound by the correction loop alone
    band = steps.smallest * DecompConf.SMALL_BAND_HEIGHT
    low = iterated_exp_mult(base, Magnitude.ONE, -band, mult)
    high = iterated_exp_mult(base, Magnitude.ONE, band, mult)
    if value > low and value < high:
        exponent = Magnitude.ZERO
        unrounded = value
    else:
        exponent = current_step_value(mult_slog(value, base, mult) - power, steps)
        unrounded = iterated_mult_log(value, base, exponent, mult)
    mantissa = round_to(unrounded, rounding)

    lower = iterated_exp_mult(base, Magnitude.ONE, power, mult)
    if abs(exponent).to_float() > DecompConf.MAX_SAFE_INTEGER:
        mantissa = lower
    else:
        def violation(m: Magnitude, e: Magnitude) -> int:
            gap = next_step_value(e, steps) - current_step_value(e, steps)
            upper = iterated_exp_mult(base, Magnitude.ONE, gap + power, mult)
            return 1 if m >= upper else -1 if m < lower else 0

        def step_up(m: Magnitude, e: Magnitude) -> tuple[Magnitude, Magnitude]:
            target = next_step_value(e, steps)
            return iterated_mult_log(m, base, target - e, mult), target

        def step_down(m: Magnitude, e: Magnitude) -> tuple[Magnitude, Magnitude]:
            target = previous_step_value(e, steps)
            return iterated_exp_mult(base, m, e - target, mult), target

        mantissa, exponent = settle(
            mantissa, unrounded, exponent,
            violation=violation,
            step_up=step_up,
            step_down=step_down,
            clamp=lambda e: lower,
            rounding=rounding,
        )

    return mantissa, exponent * hypermult

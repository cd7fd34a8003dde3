"""
Iterated factorials, their inverses and the factorial notations built on them.

Factorials here are the gamma-function generalization, so non-integer
arguments are fine. The curve x! has a local minimum of about 0.8856 at
x = DecompConf.FACTORIAL_MINIMUM. Inverses are only defined above it and give
NaN below.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import DecompConf
from .correction import settle
from .errors import ConfigurationError
from .formatters import fmt_value
from .hyperops import factorial, slog, tetrate
from .magnitude import Magnitude
from .numeric import to_magnitude
from .rounding import as_rounding, round_to
from .solvers import bracket_search, linear_sroot
from .steps import UNIT_STEPS, as_step_list, current_step_value, next_step_value, previous_step_value

_ITERATION_BAIL = 10000

# Past 10^MAX_SAFE_INTEGER, x! and 10^x differ by less than float resolution in slog
_TOWER_THRESHOLD = Magnitude.from_float(DecompConf.MAX_SAFE_INTEGER).pow10()
_SCIENTIFIC_CEILING = Magnitude.from_float(9e15).pow10()
_SLOG_HANDOFF_HEIGHT = 1e17

_INVERSE_TOLERANCE = DecompConf.EQ_TOLERANCE


# Methods --------------------------------------------------------------------------------------------------------------

def iterated_factorial(value, iterations=1) -> Magnitude:
    """
    Apply the factorial `iterations` times.

    A fractional part of the count is applied first, as the geometric
    interpolation value * (value! / value) ** fraction. Negative counts invert.
    Fractional counts below the factorial minimum have no meaning and give NaN.

    Examples:
        >>> iterated_factorial(3, 2)
        Magnitude(sign=1, layer=0, mag=720.0)
        >>> iterated_factorial(720, -2)
        Magnitude(sign=1, layer=0, mag=3.0)
    """
    value = to_magnitude(value)
    iterations = to_magnitude(iterations).to_float()

    if math.isnan(iterations) or value.is_nan():
        return Magnitude.NAN
    if iterations == 0:
        return value
    if iterations == 1:
        return factorial(value)
    if not iterations.is_integer() and value < DecompConf.FACTORIAL_MINIMUM:
        return Magnitude.NAN
    if iterations < 0:
        return inverse_factorial(value, -iterations)

    whole = math.floor(iterations)
    fraction = iterations - whole
    payload = value
    if fraction:
        payload = payload * (factorial(value) / value) ** fraction

    for i in range(whole):
        # 1 and 2 are fixed points of the factorial
        if payload == Magnitude.ONE or payload == Magnitude.TWO:
            return payload
        if payload > _TOWER_THRESHOLD:
            return tetrate(10, whole - i, payload)
        payload = factorial(payload)
        if i > _ITERATION_BAIL:
            return payload
    return payload


def inverse_factorial(value, iterations=1) -> Magnitude:
    """
    The x above the factorial minimum with iterated_factorial(x, iterations) == value.

    Returns NaN for values below the iterated factorial of the minimum, and for
    searches that do not land within DecompConf.EQ_TOLERANCE of the target.

    Examples:
        >>> inverse_factorial(120)
        Magnitude(sign=1, layer=0, mag=5.0)
    """
    value = to_magnitude(value)
    iterations = to_magnitude(iterations).to_float()

    if value.is_nan() or math.isnan(iterations):
        return Magnitude.NAN
    if value == Magnitude.ONE or value == Magnitude.TWO:
        return value
    if iterations == 0:
        return value
    if iterations < 0:
        return iterated_factorial(value, -iterations)
    if value == Magnitude.INF:
        return value
    if value < iterated_factorial(DecompConf.FACTORIAL_MINIMUM, iterations):
        return Magnitude.NAN

    # x! is bounded below by (x / 2)^^2
    upper = Magnitude.TWO
    if value > 2:
        upper = linear_sroot(value, math.floor(iterations + 1)) * 2

    def forward(g: float) -> Magnitude:
        return iterated_factorial(tetrate(10, g), iterations)

    lower_height = slog(DecompConf.FACTORIAL_MINIMUM).to_float()
    g = bracket_search(forward, value, lower_height, slog(upper).to_float())
    if math.isnan(g):
        return Magnitude.NAN

    root = tetrate(10, g)
    if not forward(g).eq_tolerance(value, _INVERSE_TOLERANCE):
        return Magnitude.NAN
    nearest = root.round()
    if root.layer == 0 and nearest != root and iterated_factorial(nearest, iterations) == value:
        return nearest
    return root


def factorial_slog(value, base=3) -> Magnitude:
    """
    How many factorials turn `base` into `value`: the h with iterated_factorial(base, h) == value.

    Raises:
        ConfigurationError: for bases at or below 2, where iterating the
            factorial does not grow.

    Examples:
        >>> round(factorial_slog(720).to_float(), 9)
        2.0
    """
    value, base = to_magnitude(value), to_magnitude(base)
    if base.is_nan() or base <= 2:
        raise ConfigurationError(f"factorial_slog base must exceed 2, got {fmt_value(base)}")

    if value.is_nan() or value < 2:
        return Magnitude.NAN
    if value == Magnitude.TWO:
        return Magnitude.NEG_INF
    if value == base:
        return Magnitude.ZERO
    if value >= tetrate(base, _SLOG_HANDOFF_HEIGHT):
        # At this scale factorial and exponentiation towers agree to float precision
        return slog(value, base)

    def forward(h: float) -> Magnitude:
        return iterated_factorial(base, h)

    if value < base:
        h = bracket_search(forward, value, -2e-18, -1e-18, expand="down")
    else:
        h = bracket_search(forward, value, 1e-18, 2e-18, expand="up")
    return Magnitude.from_float(h)


def factorial_scientifify(value, rounding=0, mantissa_power=0, steps=UNIT_STEPS) -> tuple[Magnitude, Magnitude]:
    """
    Split a value into (b, e) with value = b * e!.

    With the default mantissa power, b lies in [1, e + 1). A mantissa power p
    moves that range to [(e + p)! / e!, (next(e) + p)! / e!), so 15! gives
    [1, 15], [15, 14] with p = 1 and [210, 13] with p = 2. Values below one
    use a negative e, meaning value = b / |e|!.

    Returns:
        tuple[Magnitude, Magnitude]: 0 gives (0, 0), 1 gives (1, 1), inf gives
        (inf, inf), -inf gives (-inf, inf), NaN gives (NaN, NaN), and negative
        values negate the mantissa of their absolute value.

    Examples:
        >>> factorial_scientifify(720)
        (Magnitude(sign=1, layer=0, mag=1.0), Magnitude(sign=1, layer=0, mag=6.0))
    """
    value, power = to_magnitude(value), to_magnitude(mantissa_power)
    rounding, steps = as_rounding(rounding), as_step_list(steps)

    if value.is_nan():
        return Magnitude.NAN, Magnitude.NAN
    if not value:
        return Magnitude.ZERO, Magnitude.ZERO
    if value == Magnitude.ONE:
        return Magnitude.ONE, Magnitude.ONE
    if not value.is_finite():
        return value, Magnitude.INF
    if value.sign < 0:
        mantissa, exponent = factorial_scientifify(-value, rounding, mantissa_power, steps)
        return -mantissa, exponent

    if value < 1:
        return _reciprocal_factorial_scientifify(value, power, rounding, steps)

    exponent = current_step_value(inverse_factorial(value) - power, steps)
    unrounded = value / factorial(exponent)
    mantissa = round_to(unrounded, rounding)

    def lower(e: Magnitude) -> Magnitude:
        return factorial(e + power) / factorial(e)

    if value >= _SCIENTIFIC_CEILING:
        return lower(exponent), exponent

    def violation(m: Magnitude, e: Magnitude) -> int:
        reconstructed = m * factorial(e)
        if reconstructed >= factorial(next_step_value(e, steps) + power):
            return 1
        if e.sign > 0 and reconstructed < factorial(e + power):
            return -1
        return 0

    def rescale(m: Magnitude, e: Magnitude, target: Magnitude) -> tuple[Magnitude, Magnitude]:
        return m * factorial(e) / factorial(target), target

    return settle(
        mantissa, unrounded, exponent,
        violation=violation,
        step_up=lambda m, e: rescale(m, e, next_step_value(e, steps)),
        step_down=lambda m, e: rescale(m, e, previous_step_value(e, steps)),
        clamp=lower,
        rounding=rounding,
    )


def factorial_hyperscientifify(value, limit=3, rounding=0, steps=UNIT_STEPS) -> tuple[Magnitude, Magnitude]:
    """
    Split a value into (b, e) with value = iterated_factorial(b, e).

    b is kept in [limit, limit!) by moving e along its step lattice. Values at
    or below 2, and limits at or below 2, are returned as (value, 0) since
    repeated factorials do not grow there.

    Examples:
        >>> b, e = factorial_hyperscientifify(720)
        >>> round(b.to_float(), 9), e
        (3.0, Magnitude(sign=1, layer=0, mag=2.0))
    """
    value, limit = to_magnitude(value), to_magnitude(limit)
    rounding, steps = as_rounding(rounding), as_step_list(steps)

    if value == Magnitude.INF:
        return Magnitude.INF, Magnitude.INF
    if value <= 2 or limit <= 2:
        return value, Magnitude.ZERO
    if not value.is_finite():
        return Magnitude.NAN, Magnitude.NAN

    exponent = current_step_value(factorial_slog(value, limit), steps)
    unrounded = inverse_factorial(value, exponent)
    mantissa = round_to(unrounded, rounding)

    if abs(exponent).to_float() > DecompConf.MAX_SAFE_INTEGER:
        return limit, exponent
    if exponent.sign < 0:
        return mantissa, exponent

    def violation(m: Magnitude, e: Magnitude) -> int:
        gap = next_step_value(e, steps) - current_step_value(e, steps)
        if m >= iterated_factorial(limit, gap):
            return 1
        return -1 if m < limit else 0

    def unwind(target: Magnitude) -> tuple[Magnitude, Magnitude]:
        return inverse_factorial(value, target), target

    return settle(
        mantissa, unrounded, exponent,
        violation=violation,
        step_up=lambda m, e: unwind(next_step_value(e, steps)),
        step_down=lambda m, e: unwind(previous_step_value(e, steps)),
        clamp=lambda e: limit,
        rounding=rounding,
    )


# Private Methods ------------------------------------------------------------------------------------------------------

def _reciprocal_factorial_scientifify(value: Magnitude, power: Magnitude, rounding, steps) -> tuple[Magnitude, Magnitude]:
    """Values below one: value = b / e! with e counted on the lattice, returned negated."""
    exponent = current_step_value(inverse_factorial(value.recip()) + power, steps)
    unrounded = value * factorial(exponent)
    mantissa = round_to(unrounded, rounding)

    def lower(e: Magnitude) -> Magnitude:
        return factorial(e) / factorial(e - power)

    if value <= _SCIENTIFIC_CEILING.recip():
        return lower(exponent), -exponent

    def violation(m: Magnitude, e: Magnitude) -> int:
        reconstructed = m / factorial(e)
        if e.sign > 0 and reconstructed >= factorial(previous_step_value(e, steps) - power).recip():
            return -1
        if reconstructed < factorial(e - power).recip():
            return 1
        return 0

    def rescale(m: Magnitude, e: Magnitude, target: Magnitude) -> tuple[Magnitude, Magnitude]:
        return m * factorial(target) / factorial(e), target

    mantissa, exponent = settle(
        mantissa, unrounded, exponent,
        violation=violation,
        step_up=lambda m, e: rescale(m, e, next_step_value(e, steps)),
        step_down=lambda m, e: rescale(m, e, previous_step_value(e, steps)),
        clamp=lower,
        rounding=rounding,
    )
    return mantissa, -exponent

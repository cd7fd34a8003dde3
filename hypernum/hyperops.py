"""
Hyperoperators on Magnitude: tetration, iterated logarithms and the super-logarithm.

Fractional heights use the linear approximation throughout: on the segment
between heights -1 and 0 tetration is taken to be linear in its height, which
makes `slog` the exact inverse of `tetrate` rather than a numerical fit. The
`*_mult` variants scale each single exponentiation by a multiplier, which is
the same as replacing the base with base ** (1 / multiplier).
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import DecompConf
from .magnitude import Magnitude
from .numeric import to_magnitude

# Past this many layers above the base, one more exponentiation only adds a layer.
_LAYER_SHORTCUT = 3
_HEIGHT_BAIL = 10000

# lgamma keeps full precision well past the float limit of gamma itself
_GAMMA_LIMIT = 171.0


# Methods --------------------------------------------------------------------------------------------------------------

def tetrate(base, height=2.0, payload=Magnitude.ONE) -> Magnitude:
    """
    Iterated exponentiation: base^base^...^payload with `height` copies of base.

    Args:
        base: Base of every exponentiation.
        height: Number of exponentiations, any real. Negative heights take
            iterated logarithms instead; the fractional part is applied first,
            through the linear approximation.
        payload: Value at the top of the tower.

    Examples:
        >>> tetrate(10, 2)
        Magnitude(sign=1, layer=0, mag=10000000000.0)
        >>> tetrate(10, 3)
        Magnitude(sign=1, layer=1, mag=10000000000.0)
        >>> tetrate(2, 3)
        Magnitude(sign=1, layer=0, mag=16.0)
        >>> tetrate(10, 0.5).to_float()  # 10 ** 0.5
        3.1622776601683795
    """
    base, payload = to_magnitude(base), to_magnitude(payload)
    height = _height(height)

    if math.isnan(height):
        return Magnitude.NAN
    if height == 1:
        return base ** payload
    if height == 0:
        return payload
    if base == Magnitude.ONE:
        return Magnitude.ONE
    if height < 0:
        return iterated_log(payload, base, -height)
    if math.isinf(height):
        return Magnitude.INF if base.cmp(DecompConf.CONVERGENCE_BASE) == 1 else Magnitude.NAN

    whole = math.trunc(height)
    fraction = height - whole
    if fraction:
        if payload == Magnitude.ONE:
            payload = base ** fraction
        else:
            payload = layer_add(payload, fraction, base)

    for i in range(whole):
        payload = base ** payload
        if not payload.is_finite():
            return payload
        if payload.layer - base.layer > _LAYER_SHORTCUT and payload.mag > 0:
            return Magnitude(payload.sign, payload.layer + (whole - i - 1), payload.mag)
        if i > _HEIGHT_BAIL:
            return payload
    return payload


iterated_exp = tetrate


def iterated_log(value, base=10, times=1.0) -> Magnitude:
    """
    Take the base-`base` logarithm of `value`, `times` times.

    The inverse of `tetrate` with respect to its payload. Whole logarithms are
    taken first; a remaining fraction moves the value down the super-logarithm
    scale by that amount. Layers far above the base are stripped directly, since
    there every logarithm only removes one layer.
    """
    value, base = to_magnitude(value), to_magnitude(base)
    times = _height(times)
    if times < 0:
        return tetrate(base, -times, value)

    whole = math.trunc(times)
    fraction = times - whole

    result = value
    if result.sign > 0 and result.mag > 0 and result.layer - base.layer > _LAYER_SHORTCUT:
        layer_loss = min(whole, result.layer - base.layer - _LAYER_SHORTCUT)
        whole -= layer_loss
        result = Magnitude(result.sign, result.layer - layer_loss, result.mag)

    for i in range(whole):
        result = result.log(base)
        if not result.is_finite():
            return result
        if i > _HEIGHT_BAIL:
            return result

    if 0 < fraction < 1:
        result = layer_add(result, -fraction, base)
    return result


def slog(value, base=10, iterations: int = DecompConf.SLOG_ITERATIONS) -> Magnitude:
    """
    Super-logarithm: the height h with tetrate(base, h) == value.

    Uses the linear approximation, where slog(x) = x - 1 for 0 < x <= 1 and each
    logarithm taken above that adds one. `iterations` caps the number of
    logarithms taken after the layer shortcut.

    Returns NaN for bases at or below zero and for base one. Zero and tiny
    positive values give -1; negative values give heights below -1, down to -2
    for negative infinity.

    Examples:
        >>> slog(10)
        Magnitude(sign=1, layer=0, mag=1.0)
        >>> round(slog(tetrate(10, 3.25)).to_float(), 12)
        3.25
    """
    value, base = to_magnitude(value), to_magnitude(base)
    if base.sign <= 0 or base == Magnitude.ONE or value.is_nan() or base.is_nan():
        return Magnitude.NAN
    if value == Magnitude.INF:
        return Magnitude.INF
    if base.cmp(Magnitude.ONE) < 0:
        if value == Magnitude.ONE:
            return Magnitude.ZERO
        if not value:
            return Magnitude.from_float(-1.0)
        return Magnitude.NAN

    if not value or (value.sign > 0 and value.layer > 0 and value.mag < 0):
        return Magnitude.from_float(-1.0)

    result = 0.0
    copy = value
    if copy.sign > 0 and copy.layer - base.layer > _LAYER_SHORTCUT:
        layer_loss = copy.layer - base.layer - _LAYER_SHORTCUT
        result += layer_loss
        copy = Magnitude(copy.sign, copy.layer - layer_loss, copy.mag)

    for _ in range(iterations):
        if copy.sign < 0:
            copy = base ** copy
            result -= 1
        elif copy <= Magnitude.ONE:
            return Magnitude.from_float(result + copy.to_float() - 1)
        else:
            result += 1
            copy = copy.log(base)
    return Magnitude.from_float(result)


def layer_add(value, diff: float, base=10) -> Magnitude:
    """
    Move `value` by `diff` along the super-logarithm scale of `base`.

    layer_add(x, 1, b) is b ** x, layer_add(x, -1, b) is log_b(x), and
    fractional amounts interpolate linearly in slog.
    """
    value, base = to_magnitude(value), to_magnitude(base)
    slog_dest = slog(value, base).to_float() + diff
    if slog_dest >= 0:
        return tetrate(base, slog_dest)
    if not math.isfinite(slog_dest):
        return Magnitude.NAN
    if slog_dest >= -1:
        return tetrate(base, slog_dest + 1).log(base)
    return tetrate(base, slog_dest + 2).log(base).log(base)


def factorial(value) -> Magnitude:
    """
    Gamma-function factorial, x! = gamma(x + 1), valid for non-integers.

    Large arguments go through lgamma and, on layer 1 and above, through
    Stirling's leading term in log space, so the result keeps climbing layers
    instead of overflowing. Poles at negative integers give NaN.
    """
    value = to_magnitude(value)
    if value.is_nan():
        return value
    if value == Magnitude.INF:
        return value
    if value.layer == 0 or value.mag < 0:
        x = value.to_float() + 1
        if x < _GAMMA_LIMIT:
            try:
                return Magnitude.from_float(math.gamma(x))
            except (ValueError, OverflowError):
                return Magnitude.NAN
        return Magnitude.from_float(math.lgamma(x)).exp()
    if value.sign < 0:
        return Magnitude.NAN
    if value.layer == 1:
        return (value * (value.ln() - 1)).exp()
    return value.exp()


def iterated_exp_mult(base, payload, height, mult) -> Magnitude:
    """tetrate() where each exponentiation is base ** (x / mult)."""
    base, mult = to_magnitude(base), to_magnitude(mult)
    return tetrate(base ** mult.recip(), height, payload)


def iterated_mult_log(value, base, times, mult) -> Magnitude:
    """iterated_log() where each logarithm's result is multiplied by mult."""
    base, mult = to_magnitude(base), to_magnitude(mult)
    return iterated_log(value, base ** mult.recip(), times)


def mult_slog(value, base, mult) -> Magnitude:
    """slog() matching iterated_exp_mult and iterated_mult_log."""
    base, mult = to_magnitude(base), to_magnitude(mult)
    return slog(value, base ** mult.recip())


# Private Methods ------------------------------------------------------------------------------------------------------

def _height(height) -> float:
    if isinstance(height, Magnitude):
        return height.to_float()
    return float(height)

"""
Polygonal numbers and their repeated applications.

polygon(n, s) is the n-th s-gonal number: s = 3 gives the triangular numbers
and s = 4 the squares. bi_polygon applies it repeatedly and grows double
exponentially, while tri_polygon applies bi_polygon repeatedly and grows
tetrationally. Each has inverses for the count (roots) and for the payload.

Fractional counts are interpolated. For bi_polygon the nested polygon quickly
approaches A * B^(2^n) + C, with A and C fixed by the number of sides and B
fitted from the orbit of the payload, and fractions interpolate n in that
formula. For tri_polygon they interpolate linearly in slog.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import DecompConf
from .errors import ConfigurationError
from .formatters import fmt_value
from .hyperops import iterated_log, slog, tetrate
from .magnitude import Magnitude
from .numeric import to_magnitude
from .solvers import bracket_search

_ORBIT_LIMIT = 10000

# Payloads above this have so many safe square roots that the details no longer matter
_ROOT_SHORTCUT = 1e100

_TOWER_THRESHOLD = Magnitude.from_float(DecompConf.MAX_SAFE_INTEGER).pow10()
_TRI_SHORTCUT = tetrate(10, 3, DecompConf.MAX_SAFE_INTEGER)


# Methods --------------------------------------------------------------------------------------------------------------

def polygon(value, sides) -> Magnitude:
    """
    The value-th polygonal number with `sides` sides: ((n - 1)(s - 2) + 2) * n / 2.

    Examples:
        >>> polygon(4, 3)
        Magnitude(sign=1, layer=0, mag=10.0)
        >>> polygon(5, 4)
        Magnitude(sign=1, layer=0, mag=25.0)
    """
    value, sides = to_magnitude(value), to_magnitude(sides)
    return ((value - 1) * (sides - 2) + 2) * value / 2


def polygon_root(value, sides) -> Magnitude:
    """The n with polygon(n, sides) == value; square root is the four-sided case."""
    value, sides = to_magnitude(value), to_magnitude(sides)
    if sides == Magnitude.TWO:
        return value
    discriminant = (sides - 2) * 8 * value + sides * sides - sides * 8 + 16
    return (discriminant.sqrt() + sides - 4) / (sides * 2 - 4)


def polygon_log(value, base) -> Magnitude:
    """The s with polygon(base, s) == value."""
    value, base = to_magnitude(value), to_magnitude(base)
    return (value + base * (base - 2)) / ((base * base - base) / 2)


def bi_polygon(value, sides, payload=2) -> Magnitude:
    """
    Apply polygon(x, sides) to `payload`, `value` times.

    Negative counts take polygon roots instead. For payloads below one and six
    or more sides the orbit is chaotic, so only whole counts are supported and
    fractional ones give NaN.

    Raises:
        ConfigurationError: for fewer than two sides or a negative payload.

    Examples:
        >>> bi_polygon(3, 4)  # ((2^2)^2)^2
        Magnitude(sign=1, layer=0, mag=256.0)
    """
    value, sides, payload = to_magnitude(value), to_magnitude(sides), to_magnitude(payload)
    _check_sides(sides)
    if sides == Magnitude.TWO:
        return payload
    if payload == Magnitude.ONE or not payload:
        return payload
    if payload.sign < 0:
        raise ConfigurationError(f"repeated polygonal functions need a non-negative payload, got {fmt_value(payload)}")
    if value.is_nan():
        return Magnitude.NAN
    if value.sign < 0:
        return iterated_polygon_root(payload, -value, sides)

    if payload > 1:
        return _bi_polygon_above_one(value, sides, payload)
    if sides == 4:
        return payload ** (Magnitude.TWO ** value)
    if sides < 6:
        return _bi_polygon_shrinking(value, sides, payload)
    return _bi_polygon_chaotic(value, sides, payload)


def iterated_polygon_root(payload, iterations, sides) -> Magnitude:
    """
    Take polygon_root of `payload`, `iterations` times: bi_polygon with a negative count.

    Raises:
        ConfigurationError: for fewer than two sides or a negative payload.
    """
    payload, iterations, sides = to_magnitude(payload), to_magnitude(iterations), to_magnitude(sides)
    _check_sides(sides)
    if sides == Magnitude.TWO:
        return payload
    if payload == Magnitude.ONE or not payload:
        return payload
    if payload.sign < 0:
        raise ConfigurationError(f"repeated polygonal functions need a non-negative payload, got {fmt_value(payload)}")
    if iterations.sign < 0:
        return bi_polygon(-iterations, sides, payload)

    original = payload
    a = ((sides - 2) / 2).recip()

    if payload < 1 and sides == 4:
        return payload.root(Magnitude.TWO ** iterations)
    if payload < 1 and sides > 4 and payload < (sides - 4) / (sides - 2):
        # Chaotic region, only whole counts
        if not iterations.is_integer():
            return Magnitude.NAN
        for _ in range(int(iterations.to_float())):
            payload = polygon_root(payload, sides)
            if not payload:
                return payload
        return payload

    done = Magnitude.ZERO
    if payload > 1:
        ceiling = max(Magnitude.from_float(_ROOT_SHORTCUT), sides * sides)
        if payload > ceiling:
            safe = (payload.root(ceiling).log(2) - 1).floor()
            safe = min(max(safe, Magnitude.ZERO), iterations.ceil())
            if safe.sign > 0:
                # Each square root also halves the exponent of the 1/a factor
                payload = payload.root(Magnitude.TWO ** safe) * a ** (1 - Magnitude.TWO ** -safe)
                done = safe

    for _ in range(_ORBIT_LIMIT):
        if done >= iterations:
            break
        payload = polygon_root(payload, sides)
        done = done + 1
        if payload == Magnitude.ONE:
            return payload
    if done > iterations:
        payload = bi_polygon(done - iterations, sides, payload)
    if not payload.is_finite():
        return payload

    # The estimate above is close, bisection makes fractional counts exact
    if original > 1:
        def forward(g: float) -> Magnitude:
            return bi_polygon(iterations, sides, tetrate(10, g))

        g = bracket_search(forward, original, 0.0, slog(payload * 2).to_float(), expand="up")
        return tetrate(10, g) if not math.isnan(g) else Magnitude.NAN

    def forward_small(u: float) -> Magnitude:
        return bi_polygon(iterations, sides, tetrate(10, -u).recip())

    lower = min(-slog((payload * 2).recip()).to_float(), -1.0)
    u = bracket_search(forward_small, original, lower, 0.0, expand="down")
    return tetrate(10, -u).recip() if not math.isnan(u) else Magnitude.NAN


def bi_polygon_root(value, sides, zero_value=2) -> Magnitude:
    """
    The count n with bi_polygon(n, sides, zero_value) == value.

    Returns -inf for 1, NaN below 1, and NaN for two sides or a zero value of
    one, where the count is not determined.

    Examples:
        >>> bi_polygon_root(256, 4)
        Magnitude(sign=1, layer=0, mag=3.0)
    """
    value, sides, zero_value = to_magnitude(value), to_magnitude(sides), to_magnitude(zero_value)
    _check_sides(sides)
    if sides == Magnitude.TWO or zero_value == Magnitude.ONE:
        return Magnitude.NAN
    if value == Magnitude.ONE:
        return Magnitude.NEG_INF
    if value.is_nan() or value < 1:
        return Magnitude.NAN
    if value == zero_value:
        return Magnitude.ZERO

    orbit, a, b, c = _asymptote(zero_value, sides)
    if value >= orbit[-1]:
        return ((value - c) / a).log(b).log(2)

    def forward(n: float) -> Magnitude:
        return bi_polygon(n, sides, zero_value)

    if value > zero_value:
        n = bracket_search(forward, value, 0.0, float(len(orbit)), expand="up")
    else:
        n = bracket_search(forward, value, -1.0, 0.0, expand="down")
    return Magnitude.from_float(n)


def tri_polygon(value, sides, base=2, payload=2) -> Magnitude:
    """
    Apply bi_polygon(x, sides, base) to `payload`, `value` times.

    Fractions of a step interpolate linearly between the slogs of the payload
    and of its first image. Negative counts take iterated bi-polygon roots.

    Examples:
        >>> tri_polygon(1, 4)  # bi_polygon(2, 4, 2) == (2^2)^2
        Magnitude(sign=1, layer=0, mag=16.0)
    """
    value = to_magnitude(value).to_float()
    sides, base, payload = to_magnitude(sides), to_magnitude(base), to_magnitude(payload)
    _check_sides(sides)
    if sides == Magnitude.TWO:
        return payload
    if math.isnan(value):
        return Magnitude.NAN
    if value < 0:
        return iterated_bi_polygon_root(payload, -value, sides, base)

    whole = math.floor(value)
    fraction = value - whole
    if fraction:
        floor_height = slog(payload).to_float()
        ceiling_height = slog(bi_polygon(payload, sides, base)).to_float()
        payload = tetrate(10, ceiling_height * fraction + floor_height * (1 - fraction))

    for i in range(whole):
        payload = bi_polygon(payload, sides, base)
        if payload > _TOWER_THRESHOLD:
            # Up here each application adds two exponentiations
            return tetrate(10, (whole - i - 1) * 2, payload)
    return payload


def iterated_bi_polygon_root(payload, iterations, sides, zero_value=2) -> Magnitude:
    """Take bi_polygon_root of `payload`, `iterations` times: tri_polygon with a negative count."""
    payload, sides, zero_value = to_magnitude(payload), to_magnitude(sides), to_magnitude(zero_value)
    iterations = to_magnitude(iterations).to_float()
    _check_sides(sides)
    if sides == Magnitude.TWO:
        return payload
    if payload.is_nan() or payload < 1 or math.isnan(iterations):
        return Magnitude.NAN

    original = payload
    done = 0
    if payload > _TRI_SHORTCUT:
        safe = math.floor((slog(payload) - slog(_TRI_SHORTCUT)).to_float() / 2 + 1)
        if safe > 0:
            payload = iterated_log(payload, 10, safe * 2)
            done = safe

    while iterations > done:
        if payload < 1:
            return Magnitude.NAN
        payload = bi_polygon_root(payload, sides, zero_value)
        done += 1
    if not payload.is_finite():
        return Magnitude.NAN
    if done != iterations:
        payload = tri_polygon(done - iterations, sides, zero_value, payload)

    def forward(g: float) -> Magnitude:
        return tri_polygon(iterations, sides, zero_value, tetrate(10, g))

    upper = max(slog(payload).to_float() * 2, 5.0)
    g = bracket_search(forward, original, -1.0, upper, expand="up")
    return tetrate(10, g) if not math.isnan(g) else Magnitude.NAN


def tri_polygon_root(value, sides, base=2, zero_value=2) -> Magnitude:
    """
    The count n with tri_polygon(n, sides, base, zero_value) == value.

    NaN when repeated bi-polygon roots stop shrinking the value, which happens
    for side counts whose orbits have not settled into growth.
    """
    value, sides = to_magnitude(value), to_magnitude(sides)
    base, zero_value = to_magnitude(base), to_magnitude(zero_value)
    _check_sides(sides)
    if sides == Magnitude.TWO or value.is_nan():
        return Magnitude.NAN
    if value == zero_value:
        return Magnitude.ZERO

    original = value
    count = 0
    if value > _TRI_SHORTCUT:
        safe = math.floor((slog(value) - slog(_TRI_SHORTCUT)).to_float() / 2 + 1)
        if safe > 0:
            value = iterated_log(value, 10, safe * 2)
            count = safe

    for _ in range(_ORBIT_LIMIT):
        if not value > zero_value:
            break
        count += 1
        shrunk = bi_polygon_root(value, sides, base)
        if shrunk.is_nan() or shrunk >= value:
            return Magnitude.NAN
        value = shrunk

    def forward(n: float) -> Magnitude:
        return tri_polygon(n, sides, base, zero_value)

    if count == 0:
        n = bracket_search(forward, original, -1.0, 0.0, expand="down")
    else:
        n = bracket_search(forward, original, 0.0, count * 2.0, expand="up")
    return Magnitude.from_float(n)


# Private Methods ------------------------------------------------------------------------------------------------------

def _check_sides(sides: Magnitude):
    if sides.is_nan() or sides < 2:
        raise ConfigurationError(f"repeated polygonal functions need at least two sides, got {fmt_value(sides)}")


def _asymptote(payload: Magnitude, sides: Magnitude) -> tuple[list[Magnitude], Magnitude, Magnitude, Magnitude]:
    """Orbit of payload until float addition stops registering, plus A, B, C of A * B^(2^n) + C."""
    # max(1) keeps the four-sided orbit from stopping at once
    step = max(4 - sides, Magnitude.ONE)
    orbit = [payload]
    for _ in range(_ORBIT_LIMIT):
        last = orbit[-1]
        if last + step == last or not last.is_finite():
            break
        orbit.append(polygon(last, sides))
    final = polygon(orbit[-1], sides)

    a = ((sides - 2) / 2).recip()
    c = (sides - 4) / ((sides - 2) * 2)
    b = ((final - c) / a).root(Magnitude.TWO ** len(orbit))
    orbit.append(final)
    return orbit, a, b, c


def _bi_polygon_above_one(value: Magnitude, sides: Magnitude, payload: Magnitude) -> Magnitude:
    orbit, a, b, c = _asymptote(payload, sides)
    n = value.to_float()
    if n.is_integer() and n < len(orbit):
        return orbit[int(n)]
    if n < len(orbit) - 1:
        lower, upper = orbit[math.floor(n)], orbit[math.ceil(n)]
        fraction = n % 1
        lower_n = ((lower - c) / a).log(b).log(2).to_float()
        upper_n = ((upper - c) / a).log(b).log(2).to_float()
        if not (math.isfinite(lower_n) and math.isfinite(upper_n)):
            # Too small for the double exponential, interpolate square roots instead
            root = upper.sqrt() * fraction + lower.sqrt() * (1 - fraction)
            return root * root
        n = upper_n * fraction + lower_n * (1 - fraction)
    return b ** (Magnitude.TWO ** n) * a + c


def _bi_polygon_shrinking(value: Magnitude, sides: Magnitude, payload: Magnitude) -> Magnitude:
    """Payloads below one for fewer than six sides, where each polygon roughly multiplies by (4 - s) / 2."""
    added = 4 - sides
    orbit = [payload]
    for _ in range(_ORBIT_LIMIT):
        if orbit[-1] + added == added:
            break
        orbit.append(polygon(orbit[-1], sides))
    orbit.append(polygon(orbit[-1], sides))

    n = value.to_float()
    if n.is_integer() and n < len(orbit):
        return orbit[int(n)]
    if n < len(orbit) - 1:
        lower, upper = orbit[math.floor(n)], orbit[math.ceil(n)]
        if lower.sign < 0 or upper.sign < 0:
            # The interpolation would be complex
            return Magnitude.NAN
        fraction = n % 1
        return upper ** fraction * lower ** (1 - fraction)
    # NaN for negative multipliers with fractional counts, the result would be complex
    return orbit[-1] * (added / 2) ** (value - (len(orbit) - 1))


def _bi_polygon_chaotic(value: Magnitude, sides: Magnitude, payload: Magnitude) -> Magnitude:
    if not value.is_integer():
        return Magnitude.NAN
    count = value.to_float()
    done = 0
    while done < count:
        done += 1
        previous = payload
        payload = polygon(payload, sides)
        if not payload or not payload.is_finite():
            return payload
        if payload == previous * previous:
            # Settled into plain squaring
            return payload ** (Magnitude.TWO ** (count - done))
        if done > _ORBIT_LIMIT:
            break
    return payload

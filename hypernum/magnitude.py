"""
Layered numbers reaching from tiny reciprocals up to towers of exponents.

A Magnitude stores a sign, a layer count and a float. Layer 0 is an ordinary
float; each further layer means the stored float has already had "10 to the
power of" applied that many times. This keeps every stored float inside
ordinary double range while the represented value can be 10^10^10^... many
levels high, which is the scale at which tetration-based decompositions
operate.

Representation:
    layer 0:  value = sign * mag, with 1/9e15 <= mag < 9e15 (or exactly 0)
    layer L:  value = sign * T(L, |mag|) ** (+1 if mag > 0 else -1)

where T(L, m) is a tower of L tens topped by m. A negative `mag` on layer
L >= 1 stands for the reciprocal of the tower, so very small magnitudes keep
full range as well.

The arithmetic here is float-precision throughout. It is accurate enough to
locate a value on a tetration scale and to render leading digits. It is not an
arbitrary-precision library.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
import operator
from dataclasses import dataclass
from typing import Any, ClassVar

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import InvalidInput
from .formatters import fmt_value

EXP_LIMIT = 9e15
LAYER_DOWN = math.log10(9e15)
FIRST_NEG_LAYER = 1 / 9e15

_LN10 = math.log(10)
_LOG10_E = math.log10(math.e)

# Past this many orders of magnitude an addend cannot change the larger term.
_ADD_CUTOFF = 17


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Magnitude:
    """
    Immutable signed number stored as (sign, layer, mag).

    Instances are normalized on construction, so every finite value has exactly
    one representation and equality is a field comparison. Comparison is total
    across layers; NaN compares unequal to everything, like float NaN.

    Attributes:
        sign: -1, 0 or 1. Zero and NaN carry sign 0.
        layer: How many times 10** has been pre-applied to `mag`.
        mag: The stored float, see the module docstring for its meaning.

    Examples:
        >>> Magnitude.from_float(2357.0)
        Magnitude(sign=1, layer=0, mag=2357.0)
        >>> str(Magnitude.from_float(1e300) * 1e300)
        '1e600'
        >>> Magnitude(1, 2, 10)  # 10^10^10 fits on layer 1
        Magnitude(sign=1, layer=1, mag=10000000000.0)
    """

    sign: int
    layer: int
    mag: float

    ZERO: ClassVar['Magnitude']
    ONE: ClassVar['Magnitude']
    TWO: ClassVar['Magnitude']
    TEN: ClassVar['Magnitude']
    INF: ClassVar['Magnitude']
    NEG_INF: ClassVar['Magnitude']
    NAN: ClassVar['Magnitude']

    def __post_init__(self):
        try:
            layer = operator.index(self.layer)
        except TypeError:
            raise ValueError(f"layer must be an int, got {fmt_value(self.layer)}") from None
        if layer < 0:
            raise ValueError(f"layer must be non-negative, got {fmt_value(self.layer)}")
        if self.sign not in (-1, 0, 1):
            raise ValueError(f"sign must be -1, 0 or 1, got {fmt_value(self.sign)}")

        sign, mag = int(self.sign), float(self.mag)
        sign, layer, mag = _normalize(sign, layer, mag)

        object.__setattr__(self, 'sign', sign)
        object.__setattr__(self, 'layer', layer)
        object.__setattr__(self, 'mag', mag)

    # Construction -------------------------------------------------------------------------------------------------

    @classmethod
    def from_float(cls, value: float) -> 'Magnitude':
        """Build a Magnitude from a float, preserving sign, infinities and NaN."""
        value = float(value)
        if math.isnan(value):
            return cls(0, 0, math.nan)
        if value == 0:
            return cls(0, 0, 0.0)
        return cls(1 if value > 0 else -1, 0, abs(value))

    # Predicates ---------------------------------------------------------------------------------------------------

    def is_nan(self) -> bool:
        return math.isnan(self.mag)

    def is_finite(self) -> bool:
        return math.isfinite(self.mag)

    def is_integer(self) -> bool:
        """True for integer values; every finite value beyond 9e15 counts as one."""
        if not self.is_finite():
            return False
        if self.layer == 0:
            return self.mag.is_integer()
        return self.mag > 0

    def __bool__(self) -> bool:
        return not (self.sign == 0 and self.mag == 0)

    # Conversion ---------------------------------------------------------------------------------------------------

    def to_float(self) -> float:
        """Nearest float; overflows to +-inf and underflows to +-0.0."""
        if self.is_nan():
            return math.nan
        if self.layer == 0:
            return self.sign * self.mag
        if self.layer == 1:
            try:
                return self.sign * math.pow(10.0, self.mag)
            except OverflowError:
                return self.sign * math.inf
        return self.sign * (math.inf if self.mag > 0 else 0.0)

    def __float__(self) -> float:
        return self.to_float()

    def __int__(self) -> int:
        return int(self.to_float())

    def __str__(self) -> str:
        if self.is_nan():
            return "nan"
        prefix = "-" if self.sign < 0 else ""
        if self.layer == 0:
            return prefix + repr(self.mag)
        if self.layer == 1:
            return prefix + _fmt_exponential(self.mag)
        towers = "e-" + "e" * (self.layer - 2) if self.mag < 0 else "e" * (self.layer - 1)
        return prefix + towers + _fmt_exponential(abs(self.mag))

    # Comparison ---------------------------------------------------------------------------------------------------

    def cmpabs(self, other) -> int:
        """Compare absolute values: -1, 0 or 1. NaN operands are not supported here."""
        other = _coerce(other)
        a_zero, b_zero = not self, not other
        if a_zero or b_zero:
            return int(b_zero) - int(a_zero) if a_zero != b_zero else 0
        if math.isinf(self.mag) or math.isinf(other.mag):
            return int(math.isinf(self.mag)) - int(math.isinf(other.mag))

        layer_a = self.layer if self.mag > 0 else -self.layer
        layer_b = other.layer if other.mag > 0 else -other.layer
        if layer_a != layer_b:
            return 1 if layer_a > layer_b else -1
        if self.mag != other.mag:
            return 1 if self.mag > other.mag else -1
        return 0

    def cmp(self, other) -> int | None:
        """Compare values: -1, 0 or 1, or None when either side is NaN."""
        other = _coerce(other)
        if self.is_nan() or other.is_nan():
            return None
        if self.sign != other.sign:
            return 1 if self.sign > other.sign else -1
        if self.sign == 0:
            return 0
        return self.sign * self.cmpabs(other)

    def eq_tolerance(self, other, tolerance: float = 1e-7) -> bool:
        """
        True when both values agree within a relative tolerance.

        Values on adjacent layers are compared one logarithm down, so the
        tolerance is relative to the stored floats rather than to the values
        themselves once either side leaves layer 0.
        """
        other = _coerce(other)
        if self.is_nan() or other.is_nan():
            return False
        if self == other:
            return True
        if self.sign != other.sign or abs(self.layer - other.layer) > 1:
            return False
        mag_a, mag_b = self.mag, other.mag
        if self.layer > other.layer:
            mag_b = _maglog10(mag_b)
        elif self.layer < other.layer:
            mag_a = _maglog10(mag_a)
        if not (math.isfinite(mag_a) and math.isfinite(mag_b)):
            return False
        return abs(mag_a - mag_b) <= tolerance * max(abs(mag_a), abs(mag_b))

    def neq_tolerance(self, other, tolerance: float = 1e-7) -> bool:
        return not self.eq_tolerance(other, tolerance)

    def __eq__(self, other: Any) -> bool:
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        if self.is_nan() or other.is_nan():
            return False
        return (self.sign, self.layer, self.mag) == (other.sign, other.layer, other.mag)

    def __hash__(self) -> int:
        if self.layer == 0:
            return hash(self.sign * self.mag)
        return hash((self.sign, self.layer, self.mag))

    def __lt__(self, other):
        return self._ordered(other, lambda c: c < 0)

    def __le__(self, other):
        return self._ordered(other, lambda c: c <= 0)

    def __gt__(self, other):
        return self._ordered(other, lambda c: c > 0)

    def __ge__(self, other):
        return self._ordered(other, lambda c: c >= 0)

    def _ordered(self, other, test) -> bool:
        try:
            c = self.cmp(other)
        except InvalidInput:
            return NotImplemented
        return c is not None and test(c)

    # Sign ---------------------------------------------------------------------------------------------------------

    def __neg__(self) -> 'Magnitude':
        return Magnitude(-self.sign, self.layer, self.mag)

    def __pos__(self) -> 'Magnitude':
        return self

    def __abs__(self) -> 'Magnitude':
        if self.sign >= 0:
            return self
        return Magnitude(1, self.layer, self.mag)

    def recip(self) -> 'Magnitude':
        """Return 1/self. Raises ZeroDivisionError for zero, like float."""
        if self.is_nan():
            return self
        if not self:
            raise ZeroDivisionError("reciprocal of zero Magnitude")
        if math.isinf(self.mag):
            return Magnitude.ZERO
        if self.layer == 0:
            return Magnitude.from_float(1 / (self.sign * self.mag))
        return Magnitude(self.sign, self.layer, -self.mag)

    # Arithmetic ---------------------------------------------------------------------------------------------------

    def __add__(self, other) -> 'Magnitude':
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        return _add(self, other)

    __radd__ = __add__

    def __sub__(self, other) -> 'Magnitude':
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        return _add(self, -other)

    def __rsub__(self, other) -> 'Magnitude':
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        return _add(other, -self)

    def __mul__(self, other) -> 'Magnitude':
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        return _mul(self, other)

    __rmul__ = __mul__

    def __truediv__(self, other) -> 'Magnitude':
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        if self.is_nan() or other.is_nan():
            return Magnitude.NAN
        if self.layer == 0 and other.layer == 0 and other and self.is_finite() and other.is_finite():
            quotient = self.mag / other.mag
            if math.isfinite(quotient) and quotient != 0:
                return Magnitude.from_float(self.sign * other.sign * quotient)
        return _mul(self, other.recip())

    def __rtruediv__(self, other) -> 'Magnitude':
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        return other / self

    def __pow__(self, other) -> 'Magnitude':
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        return _pow(self, other)

    def __rpow__(self, other) -> 'Magnitude':
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        return _pow(other, self)

    def __mod__(self, other) -> 'Magnitude':
        """Floored modulo with the sign of the divisor, like float."""
        try:
            other = _coerce(other)
        except InvalidInput:
            return NotImplemented
        if self.is_nan() or other.is_nan() or not other or not self.is_finite():
            return Magnitude.NAN
        if not other.is_finite():
            return self if self.sign * other.sign >= 0 else other
        if self.layer == 0 and other.layer == 0:
            return Magnitude.from_float(self.to_float() % other.to_float())
        if self.cmpabs(other) < 0:
            return self if self.sign * other.sign >= 0 else self + other
        # Beyond float resolution of the quotient every remainder is noise
        return Magnitude.ZERO

    # Logarithms and exponentials ----------------------------------------------------------------------------------

    def log10(self) -> 'Magnitude':
        """Base-10 logarithm; -inf for zero, NaN for negative values."""
        if self.is_nan() or self.sign < 0:
            return Magnitude.NAN
        if self.sign == 0:
            return Magnitude.NEG_INF
        if math.isinf(self.mag):
            return Magnitude.INF
        if self.layer == 0:
            return Magnitude.from_float(math.log10(self.mag))
        return Magnitude(1 if self.mag > 0 else -1, self.layer - 1, abs(self.mag))

    def abslog10(self) -> 'Magnitude':
        return abs(self).log10()

    def log(self, base) -> 'Magnitude':
        """Logarithm in an arbitrary base."""
        base = _coerce(base)
        return self.log10() / base.log10()

    def ln(self) -> 'Magnitude':
        return self.log10() * _LN10

    def pow10(self) -> 'Magnitude':
        """Return 10 ** self."""
        if self.is_nan():
            return self
        if self.layer == 0:
            return Magnitude(1, 1, self.sign * self.mag)
        if self.mag > 0:
            return Magnitude(1, self.layer + 1, self.sign * self.mag)
        # |self| is below 1e-15, 10 ** self is 1 to float precision
        return Magnitude.from_float(math.pow(10.0, self.to_float()))

    def exp(self) -> 'Magnitude':
        return (self * _LOG10_E).pow10()

    def sqrt(self) -> 'Magnitude':
        if self.layer == 0 and self.sign >= 0:
            return Magnitude.from_float(math.sqrt(self.mag))
        return self ** 0.5

    def root(self, degree) -> 'Magnitude':
        return self ** (1 / _coerce(degree))

    # Rounding -----------------------------------------------------------------------------------------------------

    def floor(self) -> 'Magnitude':
        if not self.is_finite():
            return self
        if self.layer == 0:
            return Magnitude.from_float(math.floor(self.sign * self.mag))
        if self.mag > 0:
            return self
        return Magnitude.ZERO if self.sign > 0 else Magnitude.from_float(-1.0)

    def ceil(self) -> 'Magnitude':
        if not self.is_finite():
            return self
        if self.layer == 0:
            return Magnitude.from_float(math.ceil(self.sign * self.mag))
        if self.mag > 0:
            return self
        return Magnitude.ONE if self.sign > 0 else Magnitude.ZERO

    def trunc(self) -> 'Magnitude':
        if not self.is_finite():
            return self
        if self.layer == 0:
            return Magnitude.from_float(math.trunc(self.sign * self.mag))
        return self if self.mag > 0 else Magnitude.ZERO

    def round(self) -> 'Magnitude':
        """Round to the nearest integer, ties away from zero."""
        if not self.is_finite():
            return self
        if self.layer == 0:
            whole = math.floor(self.mag)
            if self.mag - whole >= 0.5:
                whole += 1
            return Magnitude.from_float(self.sign * whole)
        return self if self.mag > 0 else Magnitude.ZERO


# Private Methods ------------------------------------------------------------------------------------------------------

def _coerce(value) -> Magnitude:
    if isinstance(value, Magnitude):
        return value
    # numeric imports this module, so the import is deferred
    from .numeric import to_magnitude
    return to_magnitude(value)


def _normalize(sign: int, layer: int, mag: float) -> tuple[int, int, float]:
    """Bring (sign, layer, mag) to its unique representation."""
    if math.isnan(mag):
        return 0, 0, math.nan
    if sign == 0 or (mag == 0 and layer == 0) or (mag == -math.inf and layer > 0):
        return 0, 0, 0.0
    if layer == 0 and mag < 0:
        sign, mag = -sign, -mag
    if math.isinf(mag):
        return sign, 0, math.inf
    if mag == 0:
        # 10^0 == 1 one layer down
        return _normalize(sign, layer - 1, 1.0)

    if layer == 0 and mag < FIRST_NEG_LAYER:
        layer, mag = 1, math.log10(mag)

    absmag, signmag = abs(mag), math.copysign(1.0, mag)
    if absmag >= EXP_LIMIT:
        layer, mag = layer + 1, signmag * math.log10(absmag)
    else:
        while absmag < LAYER_DOWN and layer > 0:
            layer -= 1
            if layer == 0:
                mag = math.pow(10.0, mag)
            else:
                mag = signmag * math.pow(10.0, absmag)
                absmag, signmag = abs(mag), math.copysign(1.0, mag)
    return sign, layer, mag


def _maglog10(x: float) -> float:
    return math.copysign(math.log10(abs(x)), x) if x else 0.0


def _fmt_exponential(log_value: float) -> str:
    """Render 10 ** log_value as mantissa 'e' exponent."""
    exponent = math.floor(log_value)
    mantissa = math.pow(10.0, log_value - exponent)
    if round(mantissa, 12) >= 10:
        mantissa, exponent = mantissa / 10, exponent + 1
    mantissa_str = f"{mantissa:.12g}"
    return f"{mantissa_str}e{exponent}"


def _abs_log10_float(x: Magnitude) -> float:
    """log10(|x|) as a float for x on layer 0 or 1."""
    return math.log10(x.mag) if x.layer == 0 else x.mag


def _add(a: Magnitude, b: Magnitude) -> Magnitude:
    if a.is_nan() or b.is_nan():
        return Magnitude.NAN
    if not a:
        return b
    if not b:
        return a
    if math.isinf(a.mag) or math.isinf(b.mag):
        if math.isinf(a.mag) and math.isinf(b.mag) and a.sign != b.sign:
            return Magnitude.NAN
        return a if math.isinf(a.mag) else b
    if a.layer == 0 and b.layer == 0:
        return Magnitude.from_float(a.sign * a.mag + b.sign * b.mag)
    if a.sign != b.sign and a.cmpabs(b) == 0:
        return Magnitude.ZERO

    big, small = (a, b) if a.cmpabs(b) >= 0 else (b, a)
    if big.layer >= 2 or small.layer >= 2:
        # A layer-2 term dwarfs or is dwarfed by anything it could meet here
        return big
    log_big = _abs_log10_float(big)
    diff = _abs_log10_float(small) - log_big
    if diff < -_ADD_CUTOFF:
        return big
    if big.sign == small.sign:
        return Magnitude(big.sign, 1, log_big + math.log10(1 + math.pow(10.0, diff)))
    remainder = 1 - math.pow(10.0, diff)
    if remainder <= 0:
        return Magnitude.ZERO
    return Magnitude(big.sign, 1, log_big + math.log10(remainder))


def _mul(a: Magnitude, b: Magnitude) -> Magnitude:
    if a.is_nan() or b.is_nan():
        return Magnitude.NAN
    if not a or not b:
        if math.isinf(a.mag) or math.isinf(b.mag):
            return Magnitude.NAN
        return Magnitude.ZERO
    sign = a.sign * b.sign
    if math.isinf(a.mag) or math.isinf(b.mag):
        return Magnitude(sign, 0, math.inf)
    if a.layer == 0 and b.layer == 0:
        product = a.mag * b.mag
        if math.isfinite(product):
            return Magnitude.from_float(sign * product)
    product = (a.abslog10() + b.abslog10()).pow10()
    return product if sign > 0 else -product


def _pow(a: Magnitude, b: Magnitude) -> Magnitude:
    if not b:
        return Magnitude.ONE
    if a.is_nan() or b.is_nan():
        return Magnitude.NAN
    if a == Magnitude.ONE:
        return Magnitude.ONE
    if not a:
        if b.sign < 0:
            raise ZeroDivisionError("zero Magnitude raised to a negative power")
        return Magnitude.ZERO

    if a.layer == 0 and b.layer == 0 and math.isfinite(a.mag) and math.isfinite(b.mag):
        try:
            result = math.pow(a.to_float(), b.to_float())
        except OverflowError:
            pass
        except ValueError:
            # negative base, fractional exponent
            return Magnitude.NAN
        else:
            # zero here is underflow, a is non-zero
            if result != 0:
                return Magnitude.from_float(result)

    if a.sign < 0:
        if not b.is_integer():
            return Magnitude.NAN
        odd = b.layer == 0 and math.isfinite(b.mag) and int(b.mag) % 2 == 1
        result = _pow(abs(a), b)
        return -result if odd else result

    return (a.log10() * b).pow10()


# Constants ------------------------------------------------------------------------------------------------------------

Magnitude.ZERO = Magnitude(0, 0, 0.0)
Magnitude.ONE = Magnitude(1, 0, 1.0)
Magnitude.TWO = Magnitude(1, 0, 2.0)
Magnitude.TEN = Magnitude(1, 0, 10.0)
Magnitude.INF = Magnitude(1, 0, math.inf)
Magnitude.NEG_INF = Magnitude(-1, 0, math.inf)
Magnitude.NAN = Magnitude(0, 0, math.nan)

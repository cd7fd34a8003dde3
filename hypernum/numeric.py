"""
Normalize numeric inputs from Python stdlib and third-party libraries to Magnitude.

Every public operation in hypernum accepts "number-like" arguments and funnels
them through `to_magnitude`, so floats, arbitrary-size ints, Decimal, Fraction,
NumPy scalars, SymPy numbers and strings such as "1e1e10" or "10^^3" are all
interchangeable with Magnitude.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
import operator
from decimal import Decimal
from fractions import Fraction

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import InvalidInput
from .formatters import fmt_type, fmt_value
from .magnitude import Magnitude


def to_magnitude(value, *, allow_bool: bool = False) -> Magnitude:
    """
    Convert a number-like value to Magnitude without loss beyond what it implies.

    Parameters
    ----------
    value : various
        Magnitude, int (any size), float, str, Decimal, Fraction, or any type
        implementing __index__, .item(), .value (with .unit), or __float__.

    allow_bool : bool, default False
        If True, convert bool to 0/1. If False, bools are rejected since a bool
        reaching a numeric argument is almost always a bug.

    Returns
    -------
    Magnitude
        Ints and Decimal/Fraction beyond float range keep their magnitude via
        their own logarithms, so 10**400 and Decimal('1e-400') survive exactly
        to float precision instead of overflowing or underflowing.

    Raises
    ------
    InvalidInput
        For None, unsupported types, and strings that do not parse.

    Behavior Notes
    --------------
    **Strings** accept everything float() does plus:

    - chained exponents, right-associative: "1e1e10" is 10^(10^10), "ee10" too
    - exponents beyond float range: "2.5e400", "1e-400"
    - tetration "b^^h" with fractional heights via linear approximation
    - powers "b^x"

    **Detection Priority:**
    1. Magnitude passthrough
    2. bool (rejected unless allow_bool)
    3. int / float fast path
    4. str parsing
    5. pandas.NA / numpy.ma.masked → NaN
    6. __index__() → int (NumPy integers, SymPy Integer)
    7. .item() → scalar (array scalars)
    8. .value with .unit (Astropy Quantity)
    9. Decimal / Fraction (exact magnitude when out of float range)
    10. __float__() (general fallback)

    Examples
    --------
    >>> to_magnitude(2357)
    Magnitude(sign=1, layer=0, mag=2357.0)
    >>> to_magnitude(10 ** 400)
    Magnitude(sign=1, layer=1, mag=400.0)
    >>> to_magnitude("ee10") == to_magnitude("1e1e10")
    True
    >>> to_magnitude(None)
    Traceback (most recent call last):
        ...
    hypernum.errors.InvalidInput: unsupported numeric type: NoneType...
    """
    if isinstance(value, Magnitude):
        return value

    if isinstance(value, bool):
        if allow_bool:
            return Magnitude.ONE if value else Magnitude.ZERO
        raise InvalidInput(
            f"boolean values not supported, got {value}. "
            f"Set allow_bool=True to convert booleans to 0/1"
        )

    # Standard Python numeric types - fast path
    if isinstance(value, float):
        return Magnitude.from_float(value)
    if isinstance(value, int):
        return _from_int(value)

    if isinstance(value, str):
        return _from_str(value)

    # pandas.NA and numpy.ma.masked without importing either library
    cls = value.__class__
    cls_name = getattr(cls, "__name__", "")
    cls_module = getattr(cls, "__module__", "") or ""
    if (cls_name == "NAType" and "pandas" in cls_module) or \
            (cls_name == "MaskedConstant" and cls_module.startswith("numpy.ma")):
        return Magnitude.NAN

    # Exact integers: NumPy integer scalars, SymPy Integer
    if hasattr(value, '__index__'):
        try:
            return _from_int(operator.index(value))
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"cannot convert {fmt_type(value)} to int via __index__: {e}") from e

    # Array/tensor scalars
    if hasattr(value, 'item') and callable(value.item):
        try:
            result = value.item()
        except (TypeError, ValueError, AttributeError):
            pass
        else:
            if isinstance(result, (bool, int, float)):
                return to_magnitude(result, allow_bool=allow_bool)

    # Physical quantities with units
    if hasattr(value, 'value') and hasattr(value, 'unit'):
        try:
            magnitude = value.value
        except (TypeError, ValueError, AttributeError):
            pass
        else:
            return to_magnitude(magnitude, allow_bool=allow_bool)

    if isinstance(value, Decimal):
        return _from_decimal(value)
    if isinstance(value, Fraction):
        return _from_fraction(value)

    if hasattr(value, '__float__'):
        try:
            return Magnitude.from_float(float(value))
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidInput(f"cannot convert {fmt_type(value)} to float: {e}") from e

    raise InvalidInput(
        f"unsupported numeric type: {fmt_type(value)}. "
        f"Expected Magnitude, int, float, str, Decimal, Fraction, or types implementing "
        f"__index__, __float__, .item(), or having .value attribute"
    )


def multabs(value) -> Magnitude:
    """
    Multiplicative absolute value: the reciprocal of values strictly between -1 and 1.

    Zero stays zero and the sign is kept, so multabs(-0.25) is -4 and multabs(8) is 8.
    Notations that measure distance from one in both directions use it to treat
    x and 1/x alike.
    """
    value = to_magnitude(value)
    if not value:
        return Magnitude.ZERO
    if value.cmpabs(Magnitude.ONE) < 0:
        return value.recip()
    return value


# Private Methods ------------------------------------------------------------------------------------------------------

def _from_int(value: int) -> Magnitude:
    try:
        return Magnitude.from_float(float(value))
    except OverflowError:
        sign = 1 if value > 0 else -1
        return Magnitude(sign, 1, math.log10(abs(value)))


def _from_decimal(value: Decimal) -> Magnitude:
    if value.is_nan():
        return Magnitude.NAN
    f = float(value)
    if value.is_zero() or (f != 0 and math.isfinite(f)) or value.is_infinite():
        return Magnitude.from_float(f)
    sign = -1 if value.is_signed() else 1
    return Magnitude(sign, 1, float(abs(value).log10()))


def _from_fraction(value: Fraction) -> Magnitude:
    try:
        f = float(value)
    except OverflowError:
        f = math.inf
    if value == 0 or (f != 0 and math.isfinite(f)):
        return Magnitude.from_float(f)
    sign = 1 if value > 0 else -1
    log_value = math.log10(abs(value.numerator)) - math.log10(value.denominator)
    return Magnitude(sign, 1, log_value)


def _from_str(text: str) -> Magnitude:
    s = text.strip().lower().replace("_", "")
    if not s:
        raise InvalidInput("cannot parse empty string as a number")

    negative = s.startswith("-")
    if s[0] in "+-":
        s = s[1:]

    try:
        result = _parse_unsigned(s)
    except ValueError as e:
        raise InvalidInput(f"cannot parse {fmt_value(text)} as a number: {e}") from e
    return -result if negative else result


def _parse_unsigned(s: str) -> Magnitude:
    if "^^" in s:
        # hyperops builds on numeric, so the import is deferred
        from .hyperops import tetrate
        base, height = s.split("^^", 1)
        return tetrate(_parse_unsigned(base), float(height))
    if "^" in s:
        base, exponent = s.split("^", 1)
        return _parse_unsigned(base) ** _parse_unsigned(exponent)

    if s in ("inf", "infinity"):
        return Magnitude.INF
    if s == "nan":
        return Magnitude.NAN

    parts = s.split("e")
    if len(parts) <= 2:
        f = float(s)
        if math.isfinite(f) and (f != 0 or float(parts[0] or "1") == 0):
            return Magnitude.from_float(f)

    # Right-associative chain: "AeBeC" is A * 10^(B * 10^C), an empty part reads as 1
    result = _parse_part(parts[-1])
    for part in reversed(parts[:-1]):
        result = _parse_part(part) * result.pow10()
    return result


def _parse_part(part: str) -> Magnitude:
    if part == "":
        return Magnitude.ONE
    return Magnitude.from_float(float(part))

"""
Formatting of types and values for exception and warning messages.

Every ConfigurationError, InvalidInput and PrecisionWarning raised by hypernum
builds its message through these helpers, so offending arguments read the same
way everywhere, e.g. "base must be positive and not 1, got float=0.5".
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any

MAX_REPR = 120


# Methods --------------------------------------------------------------------------------------------------------------

def class_name(obj: Any) -> str:
    """
    Get the class name of an object or a class.

    Examples:
        >>> class_name(Magnitude.ONE)
        'Magnitude'
        >>> class_name(int)
        'int'
    """
    cls = obj if isinstance(obj, type) else obj.__class__
    return cls.__name__


def fmt_type(obj: Any) -> str:
    """Format type information for exception messages.

    Examples:
        >>> fmt_type(42)
        'int'
        >>> fmt_type(list)
        'list'
    """
    return _fmt_truncate(class_name(obj), MAX_REPR)


def fmt_value(obj: Any) -> str:
    """
    Format a single value as a type-value pair for exception and warning messages.

    Handles broken __repr__ and very long representations gracefully.

    Examples:
        >>> fmt_value(0.5)
        'float=0.5'
    """
    return f"{type(obj).__name__}={_fmt_truncate(_safe_repr(obj), MAX_REPR)}"


# Private Methods ------------------------------------------------------------------------------------------------------

def _fmt_truncate(repr_: str, max_len: int, ellipsis: str = "…") -> str:
    """Truncate repr_ to at most max_len characters, then append the ellipsis in full."""
    if len(repr_) <= max_len:
        return repr_
    return repr_[:max_len] + ellipsis


def _safe_repr(obj) -> str:
    """repr() that survives broken __repr__ methods."""
    try:
        return repr(obj)
    except Exception as e:
        return f"<{type(obj).__name__} object (repr failed: {type(e).__name__})>"

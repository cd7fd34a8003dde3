"""
Exception and warning types raised by hypernum.

All of them subclass the builtin a caller would otherwise expect, so existing
`except TypeError` / `except ValueError` handlers and warning filters on
RuntimeWarning keep working.
"""


class InvalidInput(TypeError):
    """A value could not be interpreted as a Magnitude."""


class ConfigurationError(ValueError):
    """
    A decomposition or solver was called with parameters it cannot honor.

    Raised for bases at or below zero, equal to one, or too small for tetration
    to diverge; for empty or non-positive step lists; for negative level
    ceilings; and for NaN or negative rounding quanta.
    """


class PrecisionWarning(RuntimeWarning):
    """
    A correction loop or bisection search ran out of its iteration budget.

    The result returned alongside the warning is the best estimate reached. It is
    usually fine for display, but the warning means a rounding quantum, step list
    and base produced a case that does not settle on its own.
    """

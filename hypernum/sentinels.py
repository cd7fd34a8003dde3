"""
Sentinel for distinguishing an unprovided argument from None or any real value.

UNSET is used where a parameter's default depends on another argument, such as
hypersplit's `original_maximums`, which defaults to whatever `maximums` is.

Example:
    >>> def hypersplit(value, maximums=None, original_maximums=UNSET): ...
    ...     original_maximums = ifnotunset(original_maximums, default=maximums)
"""

from typing import Any, Final

__all__ = [
    'UNSET',
    'UnsetType',
    'ifnotunset',
]


# Sentinel Types -------------------------------------------------------------------------------------------------------

class UnsetType:
    """
    Singleton type of UNSET.

    Compares by identity, is falsy, and survives pickling as the same instance.
    """
    __slots__ = ()
    _instance: 'UnsetType | None' = None

    def __new__(cls) -> 'UnsetType':
        """Ensures singleton behavior."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return '<UNSET>'

    def __eq__(self, other: Any) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple:
        """Ensure pickling returns the singleton instance."""
        return (self.__class__, ())


# Sentinel Objects -----------------------------------------------------------------------------------------------------

UNSET: Final[UnsetType] = UnsetType()
"""Sentinel representing an unprovided optional argument."""


# Helpers --------------------------------------------------------------------------------------------------------------

def ifnotunset(value: Any, *, default: Any = None) -> Any:
    """Return value if it's not UNSET, otherwise return default."""
    return default if value is UNSET else value

#
# Boundary correction loop
#

# Standard library -----------------------------------------------------------------------------------------------------
import warnings

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from hypernum.conf import LoopState
from hypernum.correction import settle
from hypernum.errors import PrecisionWarning
from hypernum.magnitude import Magnitude
from hypernum.rounding import as_rounding


def step_up(m: Magnitude, e: Magnitude) -> tuple[Magnitude, Magnitude]:
    return m / 10, e + 1


def step_down(m: Magnitude, e: Magnitude) -> tuple[Magnitude, Magnitude]:
    return m * 10, e - 1


def run(violation, limit=100, up=step_up, down=step_down):
    mantissa = Magnitude.from_float(5.0)
    return settle(
        mantissa, mantissa, Magnitude.ZERO,
        violation=violation,
        step_up=up,
        step_down=down,
        clamp=lambda e: Magnitude.ONE,
        rounding=as_rounding(0),
        limit=limit,
    )


# Tests ----------------------------------------------------------------------------------------------------------------

class TestSettle:
    """Settling, clamping and the iteration budget."""

    def test_already_in_bounds(self):
        assert run(lambda m, e: 0) == (5, 0)

    def test_moves_until_in_bounds(self):
        """Mantissa 5 with an upper bound of 1 moves up one exponent at a time."""
        assert run(lambda m, e: 1 if m >= 1 else 0) == (0.5, 1)

    def test_reversal_clamps(self):
        """Up, then down, then a further violation clamps to the boundary."""
        mantissa, exponent = run(lambda m, e: 1 if e == 0 else -1)
        assert (mantissa, exponent) == (1, 1)

    def test_unchanged_mantissa_settles(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert run(lambda m, e: 1, up=lambda m, e: (m, e + 1)) == (5, 1)

    def test_budget_exhausted(self):
        with pytest.warns(PrecisionWarning, match="did not settle within 5 passes"):
            mantissa, exponent = run(lambda m, e: 1, limit=5)
        assert exponent == 5

    def test_loop_states(self):
        assert [state.value for state in LoopState] == ["seeking", "direction_reversed", "settled"]

#
# Scientific decomposition: value = mantissa * base ** exponent
#

# Standard library -----------------------------------------------------------------------------------------------------
import math
import warnings

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from hypernum.errors import ConfigurationError
from hypernum.magnitude import Magnitude
from hypernum.rounding import significant_figures
from hypernum.scientific import scientifify
from hypernum.steps import StepList, current_step_value


def recompose(mantissa: Magnitude, exponent: Magnitude, base=10) -> Magnitude:
    return mantissa * Magnitude.from_float(base) ** exponent


# Tests ----------------------------------------------------------------------------------------------------------------

class TestScientififyScenarios:
    """Known decompositions."""

    def test_plain(self):
        assert scientifify(2357) == (2.357, 3)

    def test_engineering_no_change(self):
        """An exponent already on the lattice stays there."""
        mantissa, exponent = scientifify(2357, 10, 0, 0, [3])
        assert exponent == 3
        assert mantissa == 2.357

    def test_engineering_moves_exponent(self):
        """Exponent 4 is off the [3] lattice and becomes 3."""
        assert scientifify(23570, steps=[3]) == (23.57, 3)

    def test_small_value(self):
        mantissa, exponent = scientifify(0.002357)
        assert exponent == -3
        assert mantissa.to_float() == pytest.approx(2.357)

    def test_negative_value(self):
        assert scientifify(-2357) == (-2.357, 3)

    def test_base_two(self):
        assert scientifify(1024, base=2) == (1, 10)

    def test_base_below_one(self):
        """Bases below one use negative exponents for values above one."""
        assert scientifify(8, base=0.5) == (1, -3)

    def test_exp_multiplier(self):
        mantissa, exponent = scientifify(2357, exp_multiplier=2)
        assert (mantissa, exponent) == (2.357, 6)

    def test_mantissa_power(self):
        """A mantissa power of 1 moves the mantissa into [10, 100)."""
        assert scientifify(2357, mantissa_power=1) == (23.57, 2)

    def test_beyond_float_range(self):
        mantissa, exponent = scientifify("2.5e400")
        assert exponent == 400
        assert mantissa.to_float() == pytest.approx(2.5)

    def test_exponent_beyond_safe_integer(self):
        """Exponents past float resolution report the lower mantissa boundary."""
        mantissa, exponent = scientifify("1e1e20")
        assert mantissa == 1
        assert exponent == Magnitude(1, 1, 20.0)


class TestScientififyDegenerate:
    """Zero, infinities, NaN and invalid bases."""

    @pytest.mark.parametrize(
        "value, expected_mantissa, expected_exponent",
        [
            pytest.param(0, Magnitude.ZERO, Magnitude.NEG_INF, id="zero"),
            pytest.param(math.inf, Magnitude.INF, Magnitude.INF, id="inf"),
            pytest.param(-math.inf, Magnitude.NEG_INF, Magnitude.INF, id="neg-inf"),
        ],
    )
    def test_special_values(self, value, expected_mantissa, expected_exponent):
        assert scientifify(value) == (expected_mantissa, expected_exponent)

    def test_nan(self):
        mantissa, exponent = scientifify(math.nan)
        assert mantissa.is_nan() and exponent.is_nan()

    @pytest.mark.parametrize(
        "base",
        [
            pytest.param(0, id="zero"),
            pytest.param(-10, id="negative"),
            pytest.param(1, id="one"),
            pytest.param(math.nan, id="nan"),
        ],
    )
    def test_invalid_base(self, base):
        with pytest.raises(ConfigurationError, match="base"):
            scientifify(2357, base=base)


class TestScientififyRounding:
    """Rounding overflow moves the exponent instead of leaving a mantissa of 10."""

    def test_rounds_up_into_next_exponent(self):
        assert scientifify(9.9996, rounding=0.001) == (1, 1)

    def test_rounds_up_on_engineering_lattice(self):
        assert scientifify(999.96, rounding=0.1, steps=[3]) == (1, 3)

    def test_significant_figures(self):
        mantissa, exponent = scientifify(123456, rounding=significant_figures(3))
        assert mantissa.to_float() == pytest.approx(1.23)
        assert exponent == 5

    @pytest.mark.parametrize(
        "value",
        [
            pytest.param(9.9995, id="half-quantum"),
            pytest.param(999.95, id="engineering-boundary"),
            pytest.param(0.99995, id="below-one"),
        ],
    )
    def test_boundary_deterministic(self, value):
        """Identical boundary inputs give identical outputs."""
        first = scientifify(value, rounding=0.001, steps=[1])
        for _ in range(5):
            assert scientifify(value, rounding=0.001, steps=[1]) == first

    def test_boundary_no_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            scientifify(9.9995, rounding=0.001)


class TestScientififyProperties:
    """Round trip, mantissa range and lattice membership over many magnitudes."""

    def test_round_trip(self, log_uniform):
        """Recompose within float tolerance over 45 orders of magnitude."""
        for value in log_uniform(-20.0, 25.0, 200):
            mantissa, exponent = scientifify(value)
            assert recompose(mantissa, exponent).eq_tolerance(value, 1e-9)
            assert 1 <= mantissa < 10

    @pytest.mark.parametrize(
        "steps",
        [
            pytest.param(StepList.of(1), id="unit"),
            pytest.param(StepList.of(3), id="engineering"),
            pytest.param(StepList.of(5, 2), id="five-two"),
        ],
    )
    def test_lattice_membership(self, steps, log_uniform):
        for value in log_uniform(-15.0, 30.0, 100):
            mantissa, exponent = scientifify(value, 10, 0, 0, steps)
            assert current_step_value(exponent, steps) == exponent
            assert recompose(mantissa, exponent).eq_tolerance(value, 1e-9)

    def test_round_trip_other_base(self, log_uniform):
        for value in log_uniform(-10.0, 10.0, 100):
            mantissa, exponent = scientifify(value, base=3)
            assert recompose(mantissa, exponent, base=3).eq_tolerance(value, 1e-9)
            assert 1 <= mantissa < 3

    def test_negative_mirror(self, log_uniform):
        for value in log_uniform(-5.0, 5.0, 50):
            mantissa, exponent = scientifify(value)
            assert scientifify(-value) == (-mantissa, exponent)

#
# Hyper-scientific decomposition: value = tetrate(base, hyperexponent, mantissa)
#

# Standard library -----------------------------------------------------------------------------------------------------
import math

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from hypernum.errors import ConfigurationError
from hypernum.hyperops import iterated_exp_mult, tetrate
from hypernum.hyperscientific import hyperscientifify
from hypernum.magnitude import Magnitude


# Tests ----------------------------------------------------------------------------------------------------------------

class TestHyperscientififyScenarios:
    """Known decompositions."""

    def test_googol(self):
        """1e100 is 10^10^2."""
        assert hyperscientifify(1e100) == (2, 2)

    def test_tower_of_three_tens(self):
        assert hyperscientifify("1e1e10") == (1, 3)
        assert hyperscientifify(tetrate(10, 3)) == (1, 3)

    def test_within_mantissa_range(self):
        assert hyperscientifify(5) == (5, 0)

    def test_tall_tower(self):
        """Beyond the small band the height comes from the super-logarithm."""
        mantissa, exponent = hyperscientifify(tetrate(10, 12.5))
        assert exponent == 12
        assert mantissa.to_float() == pytest.approx(10 ** 0.5)

    def test_below_one(self):
        """Each step down the tower is one exponentiation."""
        mantissa, exponent = hyperscientifify(0.5)
        assert exponent == -1
        assert mantissa.to_float() == pytest.approx(10 ** 0.5)

    def test_zero(self):
        assert hyperscientifify(0) == (1, -1)

    def test_negative(self):
        mantissa, exponent = hyperscientifify(-5)
        assert exponent == -2
        assert mantissa.to_float() == pytest.approx(10 ** 1e-5)

    def test_mantissa_power(self):
        """A hyper mantissa power of 1 moves the mantissa into [10, 1e10)."""
        assert hyperscientifify(1e100, hyper_mantissa_power=1) == (100, 1)

    def test_hyperexp_multiplier(self):
        assert hyperscientifify(1e100, hyperexp_multiplier=2) == (2, 4)

    def test_steps(self):
        assert hyperscientifify(1e100, steps=[2]) == (2, 2)
        assert hyperscientifify("1e1e10", steps=[2]) == (10, 2)

    def test_exp_multiplier(self):
        """A multiplier of 2 is a tower of sqrt(10)."""
        mantissa, exponent = hyperscientifify(1e100, exp_multiplier=2)
        assert 1 <= mantissa < 10 ** 0.5
        assert iterated_exp_mult(10, mantissa, exponent, 2).eq_tolerance(1e100, 1e-9)


class TestHyperscientififyDegenerate:
    """Infinities, NaN and convergent bases."""

    def test_infinities(self):
        assert hyperscientifify(math.inf) == (Magnitude.INF, Magnitude.INF)
        assert hyperscientifify(-math.inf) == (Magnitude.NEG_INF, -2)

    def test_nan(self):
        mantissa, exponent = hyperscientifify(math.nan)
        assert mantissa.is_nan() and exponent.is_nan()

    @pytest.mark.parametrize(
        "base, exp_multiplier",
        [
            pytest.param(1.4, 1, id="below-convergence"),
            pytest.param(1, 1, id="one"),
            pytest.param(0.5, 1, id="below-one"),
            pytest.param(10, 10, id="multiplied-below-convergence"),
            pytest.param(10, 0, id="zero-multiplier"),
        ],
    )
    def test_convergent_base(self, base, exp_multiplier):
        with pytest.raises(ConfigurationError, match="e\\^\\(1/e\\)"):
            hyperscientifify(1e100, base=base, exp_multiplier=exp_multiplier)


class TestHyperscientififyRounding:
    """Rounding overflow climbs the tower."""

    def test_rounds_up_into_next_height(self):
        assert hyperscientifify(9.9996, rounding=0.001) == (1, 1)

    def test_deterministic(self):
        first = hyperscientifify(9.9995, rounding=0.001)
        for _ in range(5):
            assert hyperscientifify(9.9995, rounding=0.001) == first


class TestHyperscientififyProperties:
    """Round trip over fractional tower heights."""

    def test_round_trip(self, rng):
        for _ in range(100):
            height = rng.uniform(0.0, 5.0)
            value = tetrate(10, height)
            mantissa, exponent = hyperscientifify(value)
            assert 1 <= mantissa < 10
            assert tetrate(10, exponent, mantissa).eq_tolerance(value, 1e-9)

    def test_round_trip_base_three(self, rng):
        for _ in range(50):
            height = rng.uniform(0.0, 4.0)
            value = tetrate(3, height)
            mantissa, exponent = hyperscientifify(value, base=3)
            assert 1 <= mantissa < 3
            assert tetrate(3, exponent, mantissa).eq_tolerance(value, 1e-9)

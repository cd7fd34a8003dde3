#
# Hypersplit: mantissa, exponent, tetration and pentation levels
#

# Standard library -----------------------------------------------------------------------------------------------------
import math

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from hypernum.errors import ConfigurationError
from hypernum.hyperops import tetrate
from hypernum.hypersplit import hypersplit
from hypernum.magnitude import Magnitude
from hypernum.numeric import to_magnitude


def recompose(mantissa, exponent, tetration, pentation, base=10) -> Magnitude:
    """Rebuild a value top-down from its split, for whole pentation counts."""
    value = to_magnitude(mantissa) * to_magnitude(base) ** exponent
    value = tetrate(base, tetration, value)
    for _ in range(int(to_magnitude(pentation).to_float())):
        value = tetrate(base, value)
    return value


# Tests ----------------------------------------------------------------------------------------------------------------

class TestHypersplitScenarios:
    """Known splits with the default ceilings of [10, 10, 10]."""

    def test_plain_value(self):
        assert hypersplit(2357) == (2.357, 3, 0, 0)

    def test_below_ceiling(self):
        """Values in [minnum, ceiling) are plain mantissas."""
        assert hypersplit(5) == (5, 0, 0, 0)

    def test_zero(self):
        assert hypersplit(0) == (0, 0, 0, 0)

    def test_googol(self):
        """1e100 is 10^(1 * 10^2): one tetration on top of 1e2."""
        assert hypersplit(1e100) == (1, 2, 1, 0)

    def test_exponent_ceiling_rolls_into_tower(self):
        """An exponent of 10 would reach the ceiling, so 1e10 becomes 10^(1 * 10^1)."""
        assert hypersplit(1e10) == (1, 1, 1, 0)

    def test_tower(self):
        mantissa, exponent, tetration, pentation = hypersplit(tetrate(10, 4, 100))
        assert (mantissa, exponent, tetration, pentation) == (1, 2, 4, 0)

    def test_pentation(self):
        """10^^12 is one pentation step above 12 = 1.2 * 10^1."""
        mantissa, exponent, tetration, pentation = hypersplit(tetrate(10, 12))
        assert (exponent, tetration, pentation) == (1, 0, 1)
        assert mantissa.to_float() == pytest.approx(1.2)

    def test_tall_pentation(self):
        assert hypersplit(tetrate(10, 100)) == (1, 2, 0, 1)

    def test_negative(self):
        assert hypersplit(-2357) == (-2.357, 3, 0, 0)

    def test_small_value(self):
        """Values below one take negative exponents."""
        assert hypersplit(0.5) == (5, -1, 0, 0)

    def test_reciprocal_of_tower(self):
        """Values far below one split their reciprocal and negate the exponent."""
        assert hypersplit(1e-100) == (1, -2, 1, 0)

    def test_reciprocal_keeps_exponent_sign(self):
        """A reciprocal whose tower payload needs no exponent still gets a negative one."""
        kwargs = dict(steps=[3], maximums=[1000, 30, 10])
        large = hypersplit(2.153e147, **kwargs)
        small = hypersplit(4.645e-148, **kwargs)
        assert large[1:] == (0, 1, 0)
        assert small[1:] == (-3, 1, 0)
        assert small[0].to_float() == pytest.approx(large[0].to_float() / 1000)


class TestHypersplitDegenerate:
    """NaN, infinities and invalid configurations."""

    def test_nan(self):
        assert all(component.is_nan() for component in hypersplit(math.nan))

    def test_infinities(self):
        assert hypersplit(math.inf) == (Magnitude.INF, 0, 0, Magnitude.INF)
        assert hypersplit(-math.inf) == (Magnitude.NEG_INF, 0, 0, Magnitude.INF)

    @pytest.mark.parametrize(
        "base, exp_multiplier",
        [
            pytest.param(1.4, 1, id="below-convergence"),
            pytest.param(10, 10, id="multiplied-below-convergence"),
        ],
    )
    def test_convergent_base(self, base, exp_multiplier):
        with pytest.raises(ConfigurationError, match="convergent"):
            hypersplit(2357, base=base, exp_multiplier=exp_multiplier)

    def test_negative_ceiling(self):
        with pytest.raises(ConfigurationError, match="ceilings"):
            hypersplit(2357, maximums=[10, -1, 10])

    def test_nan_ceiling(self):
        with pytest.raises(ConfigurationError, match="ceilings"):
            hypersplit(2357, original_maximums=[math.nan])


class TestHypersplitConfiguration:
    """Ceilings, removed levels, multipliers and rounding."""

    def test_larger_mantissa_ceiling(self):
        assert hypersplit(2357, maximums=[100]) == (23.57, 2, 0, 0)

    def test_short_ceiling_list_repeats(self):
        assert hypersplit(2357, maximums=[100]) == hypersplit(2357, maximums=[100, 100, 100])

    def test_mantissa_removed(self):
        """A mantissa ceiling of zero reports the exponent as a real number."""
        mantissa, exponent, tetration, pentation = hypersplit(2357, maximums=[0, 10, 10])
        assert mantissa == 0
        assert exponent.to_float() == pytest.approx(math.log10(2357))
        assert (tetration, pentation) == (0, 0)

    def test_exponent_removed(self):
        """Without an exponent level the split matches hyperscientifify."""
        assert hypersplit(1e100, maximums=[10, 1, 10]) == (2, 0, 2, 0)

    def test_exponent_removed_small_value(self):
        mantissa, exponent, tetration, pentation = hypersplit(0.5, maximums=[10, 1, 10])
        assert (exponent, tetration, pentation) == (0, -1, 0)
        assert mantissa.to_float() == pytest.approx(10 ** 0.5)

    def test_minnum(self):
        """Values below minnum go through the full cascade."""
        assert hypersplit(5, minnum=6) == (5, 0, 0, 0)
        assert hypersplit(0.5, minnum=0.1) == (0.5, 0, 0, 0)

    def test_rounding(self):
        mantissa, exponent, tetration, pentation = hypersplit(2357, rounding=0.1)
        assert mantissa.to_float() == pytest.approx(2.4)
        assert (exponent, tetration, pentation) == (3, 0, 0)

    def test_exponent_multiplier(self):
        assert hypersplit(2357, exp_multiplier=2)[1] == 6

    def test_pentation_multiplier(self):
        assert hypersplit(tetrate(10, 100), pentaexp_multiplier=3)[3] == 3

    def test_lower_tetration_ceiling_moves_to_pentation(self):
        assert hypersplit(tetrate(10, 100), maximums=[10, 10, 3]) == (1, 2, 0, 1)


class TestHypersplitProperties:
    """Recomposing a split reproduces the input."""

    def test_conservation_plain(self, log_uniform):
        for value in log_uniform(0.0, 300.0, 100):
            split = hypersplit(value)
            assert recompose(*split).eq_tolerance(value, 1e-9)
            assert 1 <= split[0] < 10

    def test_conservation_towers(self, rng):
        for _ in range(50):
            value = tetrate(10, rng.uniform(2.0, 9.0))
            assert recompose(*hypersplit(value)).eq_tolerance(value, 1e-9)

    def test_conservation_pentation(self, rng):
        """Every level enabled: a pentation step on top of a scientific mantissa."""
        for _ in range(30):
            value = tetrate(10, rng.uniform(12.0, 30.0))
            split = hypersplit(value)
            assert split[3] == 1
            assert recompose(*split).eq_tolerance(value, 1e-9)

    def test_conservation_reciprocal(self, log_uniform):
        """Below 1e-30 these ceilings split the reciprocal, marked by a negative exponent."""
        for value in log_uniform(31.0, 300.0, 100):
            mantissa, exponent, tetration, pentation = hypersplit(1 / value, steps=[3], maximums=[1000, 30, 10])
            assert exponent < 0
            assert tetration > 0
            rebuilt = recompose(mantissa, -exponent, tetration, pentation).recip()
            assert rebuilt.eq_tolerance(1 / value, 1e-9)

    def test_deterministic(self):
        value = tetrate(10, 6.7)
        first = hypersplit(value, rounding=0.01)
        for _ in range(5):
            assert hypersplit(value, rounding=0.01) == first

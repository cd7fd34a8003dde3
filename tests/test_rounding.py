#
# Rounding policies: fixed quanta, computed quanta and significant figures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from hypernum.errors import ConfigurationError
from hypernum.magnitude import Magnitude
from hypernum.rounding import (
    NO_ROUNDING, ComputedRounding, FixedRounding, as_rounding, round_to, significant_figures,
)


# Tests ----------------------------------------------------------------------------------------------------------------

class TestRoundTo:
    """Rounding to the nearest multiple of a quantum."""

    @pytest.mark.parametrize(
        "value, quantum, expected",
        [
            pytest.param(2.357, 0.5, 2.5, id="half"),
            pytest.param(2.357, 1, 2.0, id="unit"),
            pytest.param(2357, 100, 2400.0, id="hundreds"),
            pytest.param(2.5, 1, 3.0, id="tie-up"),
            pytest.param(-2.5, 1, -3.0, id="tie-away-from-zero"),
            pytest.param(2.357, 0, 2.357, id="zero-quantum"),
        ],
    )
    def test_fixed_quantum(self, value, quantum, expected):
        assert round_to(value, quantum) == expected

    def test_infinite_quantum(self):
        """An infinite quantum leaves the value unchanged."""
        assert round_to(2.357, "inf") == 2.357

    def test_non_finite_value(self):
        assert round_to(Magnitude.INF, 1) == Magnitude.INF
        assert round_to(Magnitude.NAN, 1).is_nan()

    def test_beyond_float_range(self):
        """Values far beyond the quantum are already multiples of it."""
        value = Magnitude(1, 1, 400.0)
        assert round_to(value, 1) == value

    def test_idempotent(self, rng):
        """Rounding an already rounded value changes nothing."""
        for quantum in (0.1, 0.25, 0.5, 1, 10):
            for _ in range(50):
                x = rng.uniform(-1000.0, 1000.0)
                once = round_to(x, quantum)
                assert round_to(once, quantum) == once

    def test_default_is_no_rounding(self):
        assert round_to(2.357) == 2.357
        assert round_to(2.357, NO_ROUNDING) == 2.357


class TestRoundingPolicies:
    """Coercion and validation of rounding policies."""

    def test_as_rounding_number(self):
        policy = as_rounding(0.5)
        assert isinstance(policy, FixedRounding)
        assert policy.quantum == 0.5

    def test_as_rounding_callable(self):
        policy = as_rounding(lambda v: 0.5)
        assert isinstance(policy, ComputedRounding)
        assert round_to(2.357, policy) == 2.5

    def test_as_rounding_passthrough(self):
        policy = FixedRounding(1)
        assert as_rounding(policy) is policy

    def test_computed_quantum_follows_value(self):
        """The quantum can depend on the value being rounded."""
        policy = as_rounding(lambda v: 1 if v < 100 else 100)
        assert round_to(2.357, policy) == 2
        assert round_to(2357, policy) == 2400

    @pytest.mark.parametrize(
        "quantum",
        [
            pytest.param(-1, id="negative"),
            pytest.param("nan", id="nan"),
        ],
    )
    def test_invalid_fixed_quantum(self, quantum):
        with pytest.raises(ConfigurationError, match="quantum"):
            FixedRounding(quantum)

    def test_invalid_computed_quantum(self):
        """Validate computed quanta when they are used."""
        policy = ComputedRounding(lambda v: -1)
        with pytest.raises(ConfigurationError, match="rounding function"):
            round_to(2.357, policy)

    def test_non_callable_function(self):
        with pytest.raises(ConfigurationError, match="callable"):
            ComputedRounding(3)

    def test_policies_are_frozen(self):
        policy = FixedRounding(1)
        with pytest.raises(AttributeError):
            policy.quantum = Magnitude.TWO


class TestSignificantFigures:
    """Computed rounding that keeps a number of significant digits."""

    @pytest.mark.parametrize(
        "value, digits, expected",
        [
            pytest.param(123456, 3, 123000.0, id="three"),
            pytest.param(123456, 1, 100000.0, id="one"),
            pytest.param(-987, 2, -990.0, id="negative"),
            pytest.param(0, 3, 0.0, id="zero"),
        ],
    )
    def test_values(self, value, digits, expected):
        assert round_to(value, significant_figures(digits)) == expected

    def test_small_values(self):
        result = round_to(0.0012345, significant_figures(2))
        assert result.to_float() == pytest.approx(0.0012)

    def test_other_base(self):
        """Significant binary digits."""
        assert round_to(13, significant_figures(2, base=2)) == 12

    @pytest.mark.parametrize(
        "digits",
        [
            pytest.param(0, id="zero"),
            pytest.param(-1, id="negative"),
            pytest.param(2.5, id="float"),
            pytest.param(True, id="bool"),
        ],
    )
    def test_invalid_digits(self, digits):
        with pytest.raises(ConfigurationError):
            significant_figures(digits)

    def test_invalid_base(self):
        with pytest.raises(ConfigurationError, match="base"):
            significant_figures(3, base=1)

#
# Exception and warning types
#

# Standard library -----------------------------------------------------------------------------------------------------
import warnings

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from hypernum.conf import DecompConf
from hypernum.errors import ConfigurationError, InvalidInput, PrecisionWarning
from hypernum.numeric import to_magnitude
from hypernum.scientific import scientifify
from hypernum.solvers import bracket_search


# Tests ----------------------------------------------------------------------------------------------------------------

class TestHierarchy:
    """Library errors are catchable as the builtins they specialize."""

    @pytest.mark.parametrize(
        ("error", "builtin"),
        [
            pytest.param(InvalidInput, TypeError, id="invalid-input"),
            pytest.param(ConfigurationError, ValueError, id="configuration"),
            pytest.param(PrecisionWarning, RuntimeWarning, id="precision"),
        ],
    )
    def test_subclass(self, error, builtin):
        assert issubclass(error, builtin)

    def test_invalid_input_as_type_error(self):
        with pytest.raises(TypeError):
            to_magnitude(object())

    def test_configuration_as_value_error(self):
        with pytest.raises(ValueError):
            scientifify(2357, base=-2)

    def test_precision_warning_filterable(self):
        """An ignore filter on RuntimeWarning silences the budget warning."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            warnings.simplefilter("ignore", RuntimeWarning)
            bracket_search(lambda x: to_magnitude(x), 3.3, 0.0, 4.0, max_iterations=2)


class TestDecompConf:
    def test_constants(self):
        assert DecompConf.MAX_SAFE_INTEGER == 9007199254740991
        assert DecompConf.CONVERGENCE_BASE == pytest.approx(2.718281828459045 ** (1 / 2.718281828459045))
        assert DecompConf.BISECTION_TOLERANCE < DecompConf.EQ_TOLERANCE

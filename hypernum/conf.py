"""
Tunable constants and loop states shared by the decomposition and solver modules.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from enum import StrEnum, unique


# @formatter:off

class DecompConf:
    """
    Default configuration constants for decompositions and inverse solvers.

    Attributes:
        MAX_SAFE_INTEGER: Largest integer a float holds exactly. Exponents beyond it
            are treated as effectively infinite and skip boundary correction.

        CONVERGENCE_BASE: e^(1/e). Tetration converges for bases at or below it, so
            hyperoperator decompositions reject such (effective) bases.

        FACTORIAL_MINIMUM: Location of the local minimum of x! on the positive axis.
            Inverse factorials below the curve's value there are undefined.

        SLOG_ITERATIONS: Iteration budget handed to the super-logarithm.

        CORRECTION_LIMIT: Hard cap on boundary correction loop passes. Reaching it
            emits PrecisionWarning and keeps the best estimate.

        BISECTION_TOLERANCE: Relative bracket width at which bisection stops.

        BISECTION_LIMIT: Hard cap on bracket expansion plus bisection steps.

        RECURSION_LIMIT: Maximum hypersplit roll-over depth.

        SMALL_BAND_HEIGHT: Hyperscientific values closer to one than the tetration
            of height `smallest_step * SMALL_BAND_HEIGHT` skip the super-logarithm.

        EQ_TOLERANCE: Relative tolerance used by inverse solvers to accept a root.

    Examples:
        >>> scientifify(x, base=DecompConf.CONVERGENCE_BASE)  # fine, plain powers
        >>> hyperscientifify(x, base=DecompConf.CONVERGENCE_BASE)  # ConfigurationError
    """

    MAX_SAFE_INTEGER = 2 ** 53 - 1

    CONVERGENCE_BASE = 1.44466786100976613366
    FACTORIAL_MINIMUM = 0.461632144968362341262659542325

    SLOG_ITERATIONS = 100

    CORRECTION_LIMIT = 1000
    BISECTION_TOLERANCE = 1e-15
    BISECTION_LIMIT = 2000
    RECURSION_LIMIT = 16

    SMALL_BAND_HEIGHT = 10
    EQ_TOLERANCE = 1e-9

# @formatter:on


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class LoopState(StrEnum):
    """
    States of a boundary correction loop.

    Attributes:
        SEEKING: Still moving the exponent in a single direction.
        DIRECTION_REVERSED: Has moved down after having moved up, or the reverse.
            A further violation means the mantissa sits on a rounding/lattice
            conflict, so the loop clamps to the boundary and settles.
        SETTLED: Mantissa is within bounds, clamped, or no longer changing.
    """
    SEEKING = "seeking"
    DIRECTION_REVERSED = "direction_reversed"
    SETTLED = "settled"

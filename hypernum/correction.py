"""
Boundary correction loop shared by every decomposition.

After an exponent estimate is snapped to its lattice and the mantissa rounded,
the mantissa can land just outside its canonical range: 9.9996 rounds to 10.0,
or float error leaves 0.99999999 below 1. The loop shifts the exponent one
lattice point at a time until the rounded mantissa fits.

Once the loop has moved in both directions, the mantissa is sitting on a
conflict between the rounding quantum and the lattice. The next violation then
clamps the mantissa to the lower boundary value and stops, so a boundary input
always produces the same output instead of oscillating.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import warnings
from typing import Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .conf import DecompConf, LoopState
from .errors import PrecisionWarning
from .magnitude import Magnitude
from .rounding import Rounding, round_to

Move = Callable[[Magnitude, Magnitude], tuple[Magnitude, Magnitude]]


def settle(
        mantissa: Magnitude,
        unrounded: Magnitude,
        exponent: Magnitude,
        *,
        violation: Callable[[Magnitude, Magnitude], int],
        step_up: Move,
        step_down: Move,
        clamp: Callable[[Magnitude], Magnitude],
        rounding: Rounding,
        limit: int = DecompConf.CORRECTION_LIMIT,
) -> tuple[Magnitude, Magnitude]:
    """
    Run the correction loop and return the settled (mantissa, exponent).

    Args:
        mantissa: Rounded mantissa of the initial estimate.
        unrounded: The same mantissa before rounding.
        exponent: The initial lattice exponent.
        violation: Given (mantissa, exponent), returns 1 when the exponent must
            move to the next lattice point, -1 for the previous one, 0 when the
            mantissa is within bounds.
        step_up: Maps (unrounded, exponent) to the rescaled pair one lattice
            point up.
        step_down: Same, one lattice point down.
        clamp: Boundary mantissa for a given exponent, used when the loop
            would otherwise oscillate.
        rounding: Policy applied to every rescaled mantissa.
        limit: Iteration budget. Exhausting it emits PrecisionWarning and
            returns the latest estimate.
    """
    state = LoopState.SEEKING
    last_direction = 0

    for _ in range(limit):
        direction = violation(mantissa, exponent)
        if direction == 0:
            state = LoopState.SETTLED
        elif state is LoopState.DIRECTION_REVERSED:
            if direction > 0:
                unrounded, exponent = step_up(unrounded, exponent)
            mantissa = round_to(clamp(exponent), rounding)
            state = LoopState.SETTLED
        else:
            previous = unrounded
            move = step_up if direction > 0 else step_down
            unrounded, exponent = move(unrounded, exponent)
            mantissa = round_to(unrounded, rounding)
            if last_direction and direction != last_direction:
                state = LoopState.DIRECTION_REVERSED
            last_direction = direction
            if unrounded == previous:
                state = LoopState.SETTLED

        if state is LoopState.SETTLED:
            return mantissa, exponent

    warnings.warn(
        f"boundary correction did not settle within {limit} passes, "
        f"returning mantissa {mantissa} with exponent {exponent}",
        PrecisionWarning,
        stacklevel=3
    )
    return mantissa, exponent

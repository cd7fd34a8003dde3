#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import random

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

SEED = 20240917


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def rng() -> random.Random:
    """Seeded generator so property checks are reproducible."""
    return random.Random(SEED)


@pytest.fixture
def log_uniform(rng):
    """Draw positive floats spread evenly over decades in [10^low, 10^high)."""

    def _draw(low: float, high: float, count: int) -> list[float]:
        return [10 ** rng.uniform(low, high) for _ in range(count)]

    return _draw

import numpy as np
import pytest

from groupstats import StatsContext


@pytest.fixture
def rng():
    """Seeded generator for property-style checks."""
    return np.random.default_rng(42)


@pytest.fixture
def example_vector():
    """Five observations with known summary statistics."""
    return np.array([3.0, 7.0, 1.0, 9.0, 2.0])


@pytest.fixture
def padded_vector():
    """The example group embedded between observations of other groups."""
    return np.array([100.0, 3.0, 7.0, 1.0, 9.0, 2.0, -50.0])


@pytest.fixture
def strict_ctx():
    """Context that raises on caller precondition violations."""
    return StatsContext(strict=True)


@pytest.fixture
def ctx_basic():
    """Basic context for engine tests"""
    return {
        "strict": False,
        "inplace": True,
        "percentiles": (10, 25, 50, 75, 90),
    }

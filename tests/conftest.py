"""Pytest configuration and shared fixtures."""

# Add project root to path for imports
import math
import sys
from pathlib import Path

import pytest
import torch

sys.path.insert(0, str(Path(__file__).parent.parent))

from gkquad.quadrature import AdaptiveGaussKronrod, GaussKronrod15  # noqa: E402

# Test constants
NUM_POINTS = 15
NUM_GAUSS_POINTS = 7
TOLERANCE_ROUNDING = 1e-13
TOLERANCE_WEIGHT_SUM = 1e-15
RUNGE_EXACT = 0.4 * math.atan(5.0)


@pytest.fixture
def rule():
    """Gauss-Kronrod 7/15 rule."""
    return GaussKronrod15()


@pytest.fixture
def integrator():
    """Adaptive integrator with a tight tolerance."""
    return AdaptiveGaussKronrod(tol=1e-10)


@pytest.fixture
def runge():
    """Runge function 1 / (1 + 25 x^2), integral over [-1, 1] is 0.4 atan(5)."""

    def f(x):
        return 1.0 / (1.0 + 25.0 * x**2)

    return f


@pytest.fixture
def singular():
    """Integrand with a non-integrable singularity at x = 1/3."""

    def f(x):
        return 1.0 / torch.abs(x - 1.0 / 3.0)

    return f


@pytest.fixture
def generator():
    """Seeded random generator for reproducible coefficients."""
    return torch.Generator().manual_seed(42)

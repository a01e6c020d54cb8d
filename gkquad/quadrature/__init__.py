"""Adaptive Gauss-Kronrod quadrature.

This subpackage provides a Gauss-Kronrod 7/15 rule pair and an adaptive
bisection driver built on it:

- Fixed-order rule producing a 15-point estimate and a 7-point error check
- Adaptive driver with local relative tolerance and hard refinement guards
- Frozen configuration dataclass
- Error taxonomy for invalid input and non-convergence
- Adapter for scalar integrands

Integrands use a batch calling convention: each rule evaluation calls the
integrand once with a float64 tensor of 15 abscissas.
"""

from .adaptive import AdaptiveGaussKronrod, IntegrationResult, integrate, quad
from .config import QuadratureConfig
from .exceptions import (
    InvalidInputError,
    NonConvergenceError,
    QuadratureError,
    QuadratureWarning,
)
from .rules import GaussKronrod15, RuleEstimate, gauss_kronrod_15
from .utils import vectorize

__all__ = [
    # Integrators
    "AdaptiveGaussKronrod",
    # Rules
    "GaussKronrod15",
    "IntegrationResult",
    # Exceptions
    "InvalidInputError",
    "NonConvergenceError",
    # Configuration
    "QuadratureConfig",
    "QuadratureError",
    "QuadratureWarning",
    "RuleEstimate",
    "gauss_kronrod_15",
    "integrate",
    "quad",
    # Utilities
    "vectorize",
]

"""gkquad - adaptive Gauss-Kronrod quadrature for one-dimensional integrands."""

__version__ = "0.1.0"

from .quadrature import (
    AdaptiveGaussKronrod,
    GaussKronrod15,
    IntegrationResult,
    InvalidInputError,
    NonConvergenceError,
    QuadratureConfig,
    QuadratureError,
    QuadratureWarning,
    gauss_kronrod_15,
    integrate,
    quad,
    vectorize,
)

__all__ = [
    "AdaptiveGaussKronrod",
    "GaussKronrod15",
    "IntegrationResult",
    "InvalidInputError",
    "NonConvergenceError",
    "QuadratureConfig",
    "QuadratureError",
    "QuadratureWarning",
    "gauss_kronrod_15",
    "integrate",
    "quad",
    "vectorize",
]

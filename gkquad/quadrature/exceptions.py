"""Exceptions and warnings raised by the quadrature routines.

Classes:
    QuadratureError: Base class for all quadrature failures
    InvalidInputError: Bad interval, tolerance, configuration or integrand output
    NonConvergenceError: Adaptive refinement exhausted its budget
    QuadratureWarning: Warning category for non-fatal convergence problems
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .adaptive import IntegrationResult


class QuadratureError(Exception):
    """Base class for quadrature errors."""

    pass


class InvalidInputError(QuadratureError, ValueError):
    """Raised for non-finite bounds, non-positive tolerances, invalid
    configuration values or an integrand returning the wrong number of values.
    """

    pass


class NonConvergenceError(QuadratureError):
    """Adaptive integration could not meet the tolerance within its budget.

    The partial result is attached so callers can inspect the best estimate
    or retry with a relaxed tolerance.

    Attributes:
        result: IntegrationResult holding the best estimate, the accumulated
            error indicator and the number of integrand evaluations
    """

    def __init__(self, result: "IntegrationResult"):
        super().__init__(result.message)
        self.result = result

    @property
    def value(self) -> float:
        """Best estimate of the integral."""
        return self.result.value

    @property
    def error(self) -> float:
        """Accumulated error indicator of the best estimate."""
        return self.result.error

    @property
    def num_evaluations(self) -> int:
        """Number of integrand points evaluated before giving up."""
        return self.result.num_evaluations


class QuadratureWarning(UserWarning):
    """Warning for quadrature issues (e.g., tolerance not reached)."""

    pass

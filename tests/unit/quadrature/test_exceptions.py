"""Unit tests for the quadrature error taxonomy."""

import pytest

from gkquad.quadrature import (
    IntegrationResult,
    InvalidInputError,
    NonConvergenceError,
    QuadratureError,
    QuadratureWarning,
)


@pytest.fixture
def failed_result():
    """A non-converged integration result."""
    return IntegrationResult(
        value=1.25,
        error=0.5,
        num_evaluations=300,
        num_intervals=4,
        max_depth=3,
        converged=False,
        num_failed=2,
        message="did not converge: 2 of 4 subintervals stopped by maximum depth",
    )


class TestExceptionHierarchy:
    """Test exception classes and their relationships."""

    def test_invalid_input_is_quadrature_and_value_error(self):
        """Test InvalidInputError can be caught either way."""
        assert issubclass(InvalidInputError, QuadratureError)
        assert issubclass(InvalidInputError, ValueError)

    def test_non_convergence_is_quadrature_error(self):
        """Test NonConvergenceError derives from QuadratureError."""
        assert issubclass(NonConvergenceError, QuadratureError)
        assert not issubclass(NonConvergenceError, ValueError)

    def test_warning_category(self):
        """Test QuadratureWarning is a UserWarning."""
        assert issubclass(QuadratureWarning, UserWarning)


class TestNonConvergenceError:
    """Test the diagnostics carried by NonConvergenceError."""

    def test_carries_result(self, failed_result):
        """Test the partial result is attached."""
        error = NonConvergenceError(failed_result)
        assert error.result is failed_result

    def test_shortcuts(self, failed_result):
        """Test value, error and evaluation count shortcuts."""
        error = NonConvergenceError(failed_result)
        assert error.value == 1.25  # noqa: PLR2004
        assert error.error == 0.5  # noqa: PLR2004
        assert error.num_evaluations == 300  # noqa: PLR2004

    def test_message(self, failed_result):
        """Test the result message is the exception message."""
        with pytest.raises(NonConvergenceError, match="stopped by maximum depth"):
            raise NonConvergenceError(failed_result)

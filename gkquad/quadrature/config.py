"""Configuration for adaptive Gauss-Kronrod integration.

Classes:
    QuadratureConfig: Tolerances, refinement guards, failure policy and
        parallelism for AdaptiveGaussKronrod
"""

import math
from dataclasses import dataclass, replace

from .exceptions import InvalidInputError
from .utils import check_tolerance

# Bisection depth is bounded by the Python recursion limit.
MAX_DEPTH_LIMIT = 200

FAILURE_POLICIES = ("raise", "warn", "ignore")


@dataclass(frozen=True)
class QuadratureConfig:
    """Configuration for adaptive Gauss-Kronrod integration.

    The relative tolerance is applied locally: every subinterval compares
    the sum of its two halves against its own 15-point estimate, not against
    the integral over the whole domain.

    Attributes:
        tol: Relative tolerance of the stopping test |I2 - I1| < tol * |I1|
        atol: Absolute tolerance used when the baseline estimate is zero to
            within rounding (defaults to tol times the estimate of the
            integral of |f| over the subinterval)
        max_depth: Maximum number of bisection levels below the full interval
        max_evaluations: Maximum number of integrand points evaluated,
            including the 15 used to seed the whole-interval estimate
        on_failure: What to do when a guard stops refinement before the
            tolerance is met ("raise", "warn" or "ignore")
        workers: Number of threads used to refine independent subintervals
    """

    tol: float = 1e-6
    atol: float | None = None
    max_depth: int = 50
    max_evaluations: int = 200_000
    on_failure: str = "raise"
    workers: int = 1

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        check_tolerance(self.tol)
        if self.atol is not None and not (
            math.isfinite(self.atol) and self.atol >= 0
        ):
            raise InvalidInputError(
                f"atol must be non-negative and finite, got {self.atol}"
            )
        if not 1 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise InvalidInputError(
                f"max_depth must be in [1, {MAX_DEPTH_LIMIT}], got {self.max_depth}"
            )
        # Seed estimate plus one bisection.
        min_evaluations = 45
        if self.max_evaluations < min_evaluations:
            raise InvalidInputError(
                f"max_evaluations must be at least {min_evaluations}, "
                f"got {self.max_evaluations}"
            )
        if self.on_failure not in FAILURE_POLICIES:
            raise InvalidInputError(
                f"on_failure must be one of {FAILURE_POLICIES}, got {self.on_failure!r}"
            )
        if self.workers < 1:
            raise InvalidInputError(f"workers must be positive, got {self.workers}")

    @property
    def fork_depth(self) -> int:
        """Bisection level at which subtrees are handed to worker threads."""
        if self.workers == 1:
            return 0
        return math.ceil(math.log2(self.workers))

    def with_overrides(self, **overrides) -> "QuadratureConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

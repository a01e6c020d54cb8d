"""Adaptive Gauss-Kronrod integration by recursive bisection.

The whole interval is first estimated with the 15-point rule. Each interval
is then split in half and the sum of the two half-interval estimates is
compared with the estimate for the interval itself. If they agree to the
relative tolerance the sum is accepted, otherwise each half is refined on
its own, using its freshly computed estimate as the new baseline.

The tolerance is therefore local: a subinterval is judged against its own
coarse estimate, not against the integral over the whole domain. Sharp
changes of sign or magnitude across subintervals can make the global error
larger than tol * |integral|.

Refinement stops with a NonConvergenceError (or a warning, depending on the
configured failure policy) when a branch exceeds the bisection depth, can no
longer be split in floating point, or the evaluation budget is spent.

Classes:
    IntegrationResult: Estimate plus diagnostics of an adaptive integration
    AdaptiveGaussKronrod: The adaptive driver

Functions:
    quad: Integrate and return the full IntegrationResult
    integrate: Integrate and return the estimate as a float
"""

import logging
import threading
import warnings
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import NamedTuple

import torch
from torch import Tensor

from .config import QuadratureConfig
from .exceptions import NonConvergenceError, QuadratureWarning
from .rules import GaussKronrod15, RuleEstimate
from .utils import check_interval

logger = logging.getLogger(__name__)

_EPS = torch.finfo(torch.float64).eps


@dataclass
class IntegrationResult:
    """Result of an adaptive integration.

    Attributes:
        value: Estimate of the integral
        error: Sum of the error indicators of the accepted subintervals
        num_evaluations: Number of integrand points evaluated
        num_intervals: Number of subintervals making up the estimate
        max_depth: Deepest bisection level reached
        converged: Whether every subinterval met the tolerance
        num_failed: Subintervals where refinement was stopped by a guard
        message: Human-readable summary
    """

    value: float
    error: float
    num_evaluations: int
    num_intervals: int
    max_depth: int
    converged: bool
    num_failed: int = 0
    message: str = ""


class _Interval(NamedTuple):
    a: float
    b: float
    estimate: RuleEstimate


class _Split(NamedTuple):
    left: _Interval
    right: _Interval


class _Fork(NamedTuple):
    left: object
    right: object


class _Tally:
    """Counters shared by every branch of one integration."""

    def __init__(self, max_evaluations: int):
        self._lock = threading.Lock()
        self.max_evaluations = max_evaluations
        self.num_evaluations = 0
        self.num_intervals = 0
        self.num_failed = 0
        self.max_depth = 0
        self.reasons: set[str] = set()

    def charge(self, count: int) -> bool:
        """Reserve ``count`` evaluations, returning False if over budget."""
        with self._lock:
            if self.num_evaluations + count > self.max_evaluations:
                return False
            self.num_evaluations += count
            return True

    def reach(self, depth: int) -> None:
        with self._lock:
            self.max_depth = max(self.max_depth, depth)

    def accept(self) -> None:
        with self._lock:
            self.num_intervals += 1

    def fail(self, reason: str) -> None:
        with self._lock:
            self.num_intervals += 1
            self.num_failed += 1
            self.reasons.add(reason)


class AdaptiveGaussKronrod:
    """Adaptive integrator built on the Gauss-Kronrod 7/15 pair.

    Attributes:
        config: QuadratureConfig controlling tolerance, guards and threading
        rule: The underlying GaussKronrod15 rule

    Example:
        >>> integrator = AdaptiveGaussKronrod(tol=1e-10)
        >>> result = integrator.integrate(torch.sin, 0.0, torch.pi)
        >>> round(result.value, 8)
        2.0
    """

    def __init__(self, config: QuadratureConfig | None = None, **overrides):
        """Initialize the integrator.

        Args:
            config: Base configuration (defaults to QuadratureConfig())
            **overrides: Individual QuadratureConfig fields to replace
        """
        config = config or QuadratureConfig()
        self.config = config.with_overrides(**overrides) if overrides else config
        self.rule = GaussKronrod15()

    def integrate(
        self, func: Callable[..., Tensor], a: float, b: float, *args
    ) -> IntegrationResult:
        """Integrate ``func`` from ``a`` to ``b``.

        Args:
            func: Batch integrand, called with a float64 tensor of 15
                abscissas followed by ``*args``
            a: Lower limit
            b: Upper limit (b < a gives the oriented integral)
            *args: Auxiliary arguments forwarded unchanged to every call

        Returns:
            IntegrationResult with the estimate and diagnostics

        Raises:
            InvalidInputError: For non-finite limits or a malformed integrand
            NonConvergenceError: If the tolerance is not met within the budget
                and ``config.on_failure`` is "raise"
        """
        a, b = check_interval(a, b)
        if a == b:
            return IntegrationResult(
                value=0.0,
                error=0.0,
                num_evaluations=0,
                num_intervals=0,
                max_depth=0,
                converged=True,
                message="zero-width interval",
            )

        tally = _Tally(self.config.max_evaluations)
        tally.charge(self.rule.num_points)
        seed = self.rule.estimate(func, a, b, *args)

        root = _Interval(a, b, seed)
        if self.config.workers > 1:
            value, error = self._refine_parallel(func, args, root, tally)
        else:
            value, error = self._refine(func, args, root, 0, tally)

        result = self._summarize(value, error, tally)
        logger.debug("Integrated over (%g, %g): %s", a, b, result.message)
        if not result.converged:
            self._handle_failure(result)
        return result

    def _bisect(
        self,
        func: Callable[..., Tensor],
        args: tuple,
        interval: _Interval,
        depth: int,
        tally: _Tally,
    ) -> tuple[float, float] | _Split:
        """Split one interval and either accept it or return both halves."""
        a, b, baseline = interval
        if depth >= self.config.max_depth:
            return self._give_up(interval, "maximum depth", tally)
        c = a + (b - a) / 2
        if not min(a, b) < c < max(a, b):
            return self._give_up(interval, "minimum interval width", tally)
        if not tally.charge(2 * self.rule.num_points):
            return self._give_up(interval, "evaluation budget", tally)

        tally.reach(depth + 1)
        left = self.rule.estimate(func, a, c, *args)
        right = self.rule.estimate(func, c, b, *args)
        total = left.value + right.value
        change = abs(total - baseline.value)

        if self._accepts(change, baseline, a, b):
            tally.accept()
            return total, change
        return _Split(_Interval(a, c, left), _Interval(c, b, right))

    def _accepts(
        self, change: float, baseline: RuleEstimate, a: float, b: float
    ) -> bool:
        """Apply the stopping test to the change between two levels."""
        scale = abs(baseline.value)
        if scale > _EPS * baseline.magnitude:
            return change < self.config.tol * scale

        # Baseline is zero up to cancellation, so a relative test is vacuous.
        atol = self.config.atol
        if atol is None:
            atol = self.config.tol * baseline.magnitude
        logger.debug(
            "Baseline %g on (%g, %g) is zero to rounding, using absolute tolerance %g",
            baseline.value,
            a,
            b,
            atol,
        )
        return change <= atol

    def _give_up(
        self, interval: _Interval, reason: str, tally: _Tally
    ) -> tuple[float, float]:
        tally.fail(reason)
        logger.debug(
            "Stopped refining (%g, %g): %s", interval.a, interval.b, reason
        )
        return interval.estimate.value, interval.estimate.error

    def _refine(
        self,
        func: Callable[..., Tensor],
        args: tuple,
        interval: _Interval,
        depth: int,
        tally: _Tally,
    ) -> tuple[float, float]:
        """Refine one interval until every branch is accepted or stopped."""
        step = self._bisect(func, args, interval, depth, tally)
        if not isinstance(step, _Split):
            return step
        left_value, left_error = self._refine(
            func, args, step.left, depth + 1, tally
        )
        right_value, right_error = self._refine(
            func, args, step.right, depth + 1, tally
        )
        return left_value + right_value, left_error + right_error

    def _refine_parallel(
        self,
        func: Callable[..., Tensor],
        args: tuple,
        interval: _Interval,
        tally: _Tally,
    ) -> tuple[float, float]:
        """Refine with the subtrees below ``config.fork_depth`` run in threads.

        The calling thread expands the top levels itself and only waits on
        futures, so worker threads never block on each other. Partial sums
        are combined in the same order as ``_refine``.
        """
        with ThreadPoolExecutor(
            max_workers=self.config.workers, thread_name_prefix="gkquad"
        ) as executor:
            tree = self._expand(func, args, interval, 0, tally, executor)
            return self._collect(tree)

    def _expand(
        self,
        func: Callable[..., Tensor],
        args: tuple,
        interval: _Interval,
        depth: int,
        tally: _Tally,
        executor: ThreadPoolExecutor,
    ):
        step = self._bisect(func, args, interval, depth, tally)
        if not isinstance(step, _Split):
            return step
        if depth + 1 >= self.config.fork_depth:
            return _Fork(
                executor.submit(self._refine, func, args, step.left, depth + 1, tally),
                executor.submit(
                    self._refine, func, args, step.right, depth + 1, tally
                ),
            )
        return _Fork(
            self._expand(func, args, step.left, depth + 1, tally, executor),
            self._expand(func, args, step.right, depth + 1, tally, executor),
        )

    def _collect(self, node) -> tuple[float, float]:
        if isinstance(node, Future):
            return node.result()
        if isinstance(node, _Fork):
            left_value, left_error = self._collect(node.left)
            right_value, right_error = self._collect(node.right)
            return left_value + right_value, left_error + right_error
        return node

    def _summarize(
        self, value: float, error: float, tally: _Tally
    ) -> IntegrationResult:
        converged = tally.num_failed == 0
        if converged:
            message = (
                f"converged on {tally.num_intervals} subintervals with "
                f"{tally.num_evaluations} evaluations"
            )
        else:
            message = (
                f"did not converge: {tally.num_failed} of {tally.num_intervals} "
                f"subintervals stopped by {', '.join(sorted(tally.reasons))}; "
                f"best estimate {value!r}, error indicator {error:.3e}, "
                f"{tally.num_evaluations} evaluations"
            )
        return IntegrationResult(
            value=value,
            error=error,
            num_evaluations=tally.num_evaluations,
            num_intervals=tally.num_intervals,
            max_depth=tally.max_depth,
            converged=converged,
            num_failed=tally.num_failed,
            message=message,
        )

    def _handle_failure(self, result: IntegrationResult) -> None:
        policy = self.config.on_failure
        if policy == "raise":
            raise NonConvergenceError(result)
        if policy == "warn":
            logger.warning("Adaptive integration %s", result.message)
            warnings.warn(result.message, QuadratureWarning, stacklevel=3)
        else:
            logger.debug("Ignoring non-convergence: %s", result.message)


def quad(
    func: Callable[..., Tensor],
    a: float,
    b: float,
    *args,
    tol: float | None = None,
    config: QuadratureConfig | None = None,
    **options,
) -> IntegrationResult:
    """Integrate ``func`` from ``a`` to ``b`` and return full diagnostics.

    Args:
        func: Batch integrand
        a: Lower limit
        b: Upper limit
        *args: Auxiliary arguments forwarded to ``func``
        tol: Relative tolerance (overrides ``config.tol``)
        config: Base configuration
        **options: Other QuadratureConfig fields to override

    Returns:
        IntegrationResult

    Example:
        >>> result = quad(lambda x, k: torch.exp(k * x), 0.0, 1.0, 2.0, tol=1e-9)
        >>> result.converged
        True
    """
    if tol is not None:
        options["tol"] = tol
    return AdaptiveGaussKronrod(config, **options).integrate(func, a, b, *args)


def integrate(
    func: Callable[..., Tensor],
    a: float,
    b: float,
    tol: float = 1e-6,
    *args,
    **options,
) -> float:
    """Integrate ``func`` from ``a`` to ``b`` to relative tolerance ``tol``.

    Args:
        func: Batch integrand, called with a float64 tensor of 15 abscissas
            followed by ``*args``
        a: Lower limit
        b: Upper limit
        tol: Relative tolerance, applied per subinterval
        *args: Auxiliary arguments forwarded to ``func``
        **options: QuadratureConfig fields (max_depth, max_evaluations, ...)

    Returns:
        Estimate of the integral

    Raises:
        InvalidInputError: For invalid limits, tolerance or integrand output
        NonConvergenceError: If the tolerance cannot be met within the budget

    Example:
        >>> round(integrate(torch.sin, 0.0, torch.pi, 1e-10), 8)
        2.0
    """
    return quad(func, a, b, *args, tol=tol, **options).value

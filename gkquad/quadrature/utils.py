"""Helpers shared by the quadrature rules and the adaptive driver.

Functions:
    vectorize: Adapt a scalar integrand to the batch calling convention
    check_interval: Validate and normalize integration limits
    check_tolerance: Validate a relative tolerance
"""

import math
from collections.abc import Callable
from functools import wraps

import torch
from torch import Tensor

from .exceptions import InvalidInputError


def vectorize(func: Callable[..., float]) -> Callable[..., Tensor]:
    """Wrap a scalar integrand so it accepts a batch of abscissas.

    Integrands are normally called once per rule evaluation with all 15
    abscissas as a float64 tensor. Functions written for a single float can
    be wrapped with this adapter, which calls them once per abscissa
    (15 calls per rule evaluation) and stacks the results.

    Args:
        func: Function mapping a float (plus auxiliary arguments) to a float

    Returns:
        Batch integrand mapping a 1-D tensor to a 1-D float64 tensor

    Example:
        >>> import math
        >>> f = vectorize(math.sin)
        >>> f(torch.tensor([0.0, math.pi / 2], dtype=torch.float64))
        tensor([0., 1.], dtype=torch.float64)
    """

    @wraps(func)
    def batched(x: Tensor, *args) -> Tensor:
        return torch.tensor(
            [func(xi, *args) for xi in x.tolist()], dtype=torch.float64
        )

    return batched


def check_interval(a: float, b: float) -> tuple[float, float]:
    """Convert integration limits to floats and reject non-finite ones.

    Raises:
        InvalidInputError: If either limit or their difference is not finite
    """
    a, b = float(a), float(b)
    if not (math.isfinite(a) and math.isfinite(b)):
        raise InvalidInputError(
            f"Integration limits must be finite, got ({a}, {b})"
        )
    if not math.isfinite(b - a):
        raise InvalidInputError(f"Interval width overflows for ({a}, {b})")
    return a, b


def check_tolerance(tol: float, name: str = "tol") -> float:
    """Return ``tol`` as a float, rejecting non-positive or non-finite values."""
    tol = float(tol)
    if not (math.isfinite(tol) and tol > 0):
        raise InvalidInputError(f"{name} must be positive and finite, got {tol}")
    return tol

"""
physquant.core.errorprop
========================

First-order (linear) propagation of uncertainty.

For a result ``f(x1, ..., xn)`` of independent inputs the absolute error is

    sqrt( sum_i ( |df/dxi| * err(xi) )^2 )

Each input is paired with its partial derivative, given either as a number or
as a zero-argument callable. Callables are only evaluated for inputs that
actually carry an error, so an operation can list a derivative that is
undefined at an exact operand without tripping over it.
"""

from __future__ import annotations

import math
from typing import Callable, Tuple, Union

from physquant.core.exceptions import (
    ErrorPropagationError,
    Recovery,
    RecoverySpec,
    recovery_allowed,
)
from physquant.core.quantity import Quantity
from physquant.logger import logger

Derivative = Union[float, int, Callable[[], float]]
Term = Tuple[Quantity, Derivative]


def _evaluate(derivative: Derivative, operation: str) -> float:
    try:
        d = derivative() if callable(derivative) else derivative
        d = float(d)
    except (ZeroDivisionError, ValueError, OverflowError) as exc:
        raise ErrorPropagationError(
            f"Cannot propagate uncertainty through {operation}: derivative is undefined ({exc})",
            recoveries=(Recovery.DROP_UNCERTAINTY,),
        ) from exc
    if not math.isfinite(d):
        raise ErrorPropagationError(
            f"Cannot propagate uncertainty through {operation}: derivative is {d}",
            recoveries=(Recovery.DROP_UNCERTAINTY,),
        )
    return d


def propagate(*terms: Term, operation: str = "operation", recover: RecoverySpec = None) -> float:
    """Combine ``(quantity, derivative)`` terms into one absolute error.

    Parameters
    ----------
    *terms
        Inputs of the operation with their partial derivatives.
    operation
        Name used in error messages.
    recover
        Recoveries accepted for this call. With ``Recovery.DROP_UNCERTAINTY``
        an undefined derivative yields an error of 0 instead of raising.

    Raises
    ------
    ErrorPropagationError
        If a needed derivative is undefined or not finite, and the
        ``DROP_UNCERTAINTY`` recovery was not requested.
    """
    contributions = []
    try:
        for quantity, derivative in terms:
            err = quantity.absolute_error
            if err == 0.0:
                continue
            contributions.append(abs(_evaluate(derivative, operation)) * err)
    except ErrorPropagationError:
        if recovery_allowed(Recovery.DROP_UNCERTAINTY, recover):
            logger.debug(f"Dropping uncertainty of {operation} result: derivative undefined")
            return 0.0
        raise

    if not contributions:
        return 0.0
    if len(contributions) == 1:
        return contributions[0]
    return math.hypot(*contributions)


__all__ = ["Derivative", "Term", "propagate"]

"""
physquant.core.utils
====================

Numeric helpers shared by the unit catalog and the quantity operations:
exact rational coercion of conversion factors, standard-normal quantiles for
the statistical comparisons, and the digit bookkeeping behind the Particle
Data Group rounding rule.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from fractions import Fraction
from functools import lru_cache
from numbers import Rational
from typing import Tuple, Union

from scipy.stats import norm

from physquant.core.exceptions import InvalidArgumentError

Number = Union[int, float, Fraction]


def is_number(x: object) -> bool:
    """Plain real numbers (bool excluded) that coerce to dimensionless quantities."""
    return isinstance(x, (int, float, Fraction)) and not isinstance(x, bool)


def to_fraction(x: Number) -> Fraction:
    """Return ``x`` as an exact :class:`Fraction`.

    Floats go through their shortest ``repr`` so that ``0.0254`` becomes
    ``127/5000`` rather than the binary expansion of the double.
    """
    if isinstance(x, bool):
        raise InvalidArgumentError("Booleans are not valid conversion factors")
    if isinstance(x, Fraction):
        return x
    if isinstance(x, int):
        return Fraction(x)
    if isinstance(x, Rational):
        return Fraction(x.numerator, x.denominator)
    if isinstance(x, float):
        if not math.isfinite(x):
            raise InvalidArgumentError(f"Conversion factor must be finite, got {x!r}")
        return Fraction(repr(x))
    raise InvalidArgumentError(f"Expected a real number, got {type(x).__name__}")


def is_integral(x: Number) -> bool:
    if isinstance(x, int):
        return True
    if isinstance(x, Fraction):
        return x.denominator == 1
    return math.isfinite(x) and float(x).is_integer()


# ---------------------------------------------------------------------------
# Normal quantiles
# ---------------------------------------------------------------------------

@lru_cache(maxsize=64)
def confidence_quantile(p: float, two_sided: bool) -> float:
    """Standard-normal quantile for confidence level ``p``.

    Two-sided: ``z`` with ``P(|Z| <= z) = p`` (1.96 for 0.95).
    One-sided: ``z`` with ``P(Z <= z) = p`` (1.645 for 0.95).
    """
    if not (0.0 < p < 1.0):
        raise InvalidArgumentError(f"Confidence level must lie strictly between 0 and 1, got {p!r}")
    q = (1.0 + p) / 2.0 if two_sided else p
    return float(norm.ppf(q))


# ---------------------------------------------------------------------------
# PDG rounding helpers
# ---------------------------------------------------------------------------

def leading_exponent(x: float) -> int:
    """Decimal exponent of the leading significant digit of ``x`` (``x != 0``)."""
    return Decimal(repr(abs(x))).adjusted()


def leading_three_digits(x: float) -> Tuple[int, int]:
    """Return (three leading digits of |x| as an int in [100, 999], decimal exponent).

    The three digits are rounded half-up, and the carry of e.g. 0.9996 into
    1000 moves to the next decade (100, exponent + 1).
    """
    d = Decimal(repr(abs(x)))
    exponent = d.adjusted()
    scaled = d.scaleb(2 - exponent).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    digits = int(scaled)
    if digits >= 1000:
        digits //= 10
        exponent += 1
    return digits, exponent


def pdg_significant_digits(error: float) -> Tuple[int, int]:
    """Significant digits kept for an uncertainty and the decimal place to round to.

    Leading three digits in [100, 354] keep two significant digits, [355, 949]
    keep one, and [950, 999] are rounded up to the next power of ten and keep two.

    Returns ``(digits, place)`` where ``place`` is the power of ten of the last
    kept digit (``-2`` means hundredths).
    """
    three, exponent = leading_three_digits(error)
    if three <= 354:
        return 2, exponent - 1
    if three <= 949:
        return 1, exponent
    # 950..999 -> 1000 -> one decade up, two significant digits
    return 2, exponent


def round_half_up_to_place(x: float, place: int) -> float:
    d = Decimal(repr(x))
    # quantize needs every digit down to ``place``
    with localcontext() as ctx:
        ctx.prec = max(d.adjusted() - place + 2, 28)
        return float(d.quantize(Decimal(1).scaleb(place), rounding=ROUND_HALF_UP))


__all__ = [
    "Number",
    "is_number",
    "to_fraction",
    "is_integral",
    "confidence_quantile",
    "leading_exponent",
    "leading_three_digits",
    "pdg_significant_digits",
    "round_half_up_to_place",
]

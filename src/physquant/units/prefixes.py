"""
physquant.units.prefixes
========================

Prefix entries, the predicates that decide which prefixes a unit admits, and
the standard SI and IEC prefix tables.

A prefix test is any callable ``(base, power) -> bool``. Tests are built from
the combinators below and passed to ``UnitCatalog.register_unit`` as
``prefix_test``::

    # every SI prefix
    prefix_base(10)
    # kilo, mega, milli, micro, ... (every third power of ten)
    prefix_base(10, 3)
    # only the sub-unit prefixes
    prefix_range(10, None, -1)
    # centi plus every third power
    prefix_or(prefix_base(10, 3), prefix_list(10, -2))
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, Optional, Tuple

PrefixTest = Callable[[int, int], bool]


@dataclass(frozen=True, slots=True)
class PrefixEntry:
    """A named scale factor ``base ** power`` with an optional abbreviation."""

    name: str
    base: int
    power: int
    abbreviation: Optional[str] = None

    @property
    def factor(self) -> Fraction:
        return Fraction(self.base) ** self.power


# ---------------------------------------------------------------------------
# Predicate combinators
# ---------------------------------------------------------------------------

def prefix_and(*tests: PrefixTest) -> PrefixTest:
    def test(base: int, power: int) -> bool:
        return all(t(base, power) for t in tests)
    return test


def prefix_or(*tests: PrefixTest) -> PrefixTest:
    def test(base: int, power: int) -> bool:
        return any(t(base, power) for t in tests)
    return test


def prefix_list(base: int, *powers: int) -> PrefixTest:
    """Admit prefixes of ``base`` whose power is one of ``powers``."""
    allowed = frozenset(powers)

    def test(b: int, power: int) -> bool:
        return b == base and power in allowed
    return test


def prefix_range(base: int, lower: Optional[int] = None, upper: Optional[int] = None) -> PrefixTest:
    """Admit prefixes of ``base`` with ``lower <= power <= upper``; either bound may be open."""
    def test(b: int, power: int) -> bool:
        return (
            b == base
            and (lower is None or power >= lower)
            and (upper is None or power <= upper)
        )
    return test


def prefix_base(base: int, modulus: Optional[int] = None) -> PrefixTest:
    """Admit every prefix of ``base``, or only powers divisible by ``modulus``."""
    def test(b: int, power: int) -> bool:
        return b == base and (modulus is None or power % modulus == 0)
    return test


# ---------------------------------------------------------------------------
# Standard tables: (name, power, abbreviation)
# ---------------------------------------------------------------------------

SI_PREFIXES: Tuple[Tuple[str, int, str], ...] = (
    ("quetta", 30, "Q"),
    ("ronna", 27, "R"),
    ("yotta", 24, "Y"),
    ("zetta", 21, "Z"),
    ("exa", 18, "E"),
    ("peta", 15, "P"),
    ("tera", 12, "T"),
    ("giga", 9, "G"),
    ("mega", 6, "M"),
    ("kilo", 3, "k"),
    ("hecto", 2, "h"),
    ("deca", 1, "da"),
    ("deci", -1, "d"),
    ("centi", -2, "c"),
    ("milli", -3, "m"),
    ("micro", -6, "u"),
    ("nano", -9, "n"),
    ("pico", -12, "p"),
    ("femto", -15, "f"),
    ("atto", -18, "a"),
    ("zepto", -21, "z"),
    ("yocto", -24, "y"),
    ("ronto", -27, "r"),
    ("quecto", -30, "q"),
)

BINARY_PREFIXES: Tuple[Tuple[str, int, str], ...] = (
    ("kibi", 10, "Ki"),
    ("mebi", 20, "Mi"),
    ("gibi", 30, "Gi"),
    ("tebi", 40, "Ti"),
    ("pebi", 50, "Pi"),
    ("exbi", 60, "Ei"),
    ("zebi", 70, "Zi"),
    ("yobi", 80, "Yi"),
)


__all__ = [
    "PrefixTest",
    "PrefixEntry",
    "prefix_and",
    "prefix_or",
    "prefix_list",
    "prefix_range",
    "prefix_base",
    "SI_PREFIXES",
    "BINARY_PREFIXES",
]

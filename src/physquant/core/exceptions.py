"""
physquant.core.exceptions
=========================

Exception hierarchy and named recoveries for physquant.

Exception Hierarchy
-------------------

Exception (built-in Python)
└── PhysquantError
    ├── DuplicateDefinitionError      (also ValueError)
    ├── InvalidArgumentError          (also ValueError)
    │   └── CyclicDefinitionError
    ├── UnknownUnitError              (also LookupError)
    ├── UnitConversionError           (also TypeError)
    ├── InvalidUnitOperationError     (also TypeError)
    ├── OperationUndefinedError       (also ArithmeticError)
    └── ErrorPropagationError         (also ArithmeticError)

Every error also derives from the built-in exception that would be raised for
the same situation elsewhere in Python, so ``except TypeError`` around a unit
mismatch keeps working.

Recoveries
----------
Some errors are raised on an operand that could be *degraded* into something
valid: a quantity whose unit is in the way, or whose uncertainty has no
defined propagation at this point. Those errors list the recoveries they
offer in ``error.recoveries``. A caller opts into a recovery either for a
single call (``recover=Recovery.DROP_UNCERTAINTY``) or for a block::

    with recovering(Recovery.DROP_UNCERTAINTY):
        absolute(make_quantity(0, 0.1))
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from enum import Enum
from typing import Iterable, Iterator, Tuple, Union


class Recovery(Enum):
    """Named ways of degrading an operand so an operation can continue."""

    DROP_UNCERTAINTY = "drop-uncertainty"
    DROP_UNIT = "drop-unit"


RecoverySpec = Union[Recovery, Iterable[Recovery], None]

_ACTIVE_RECOVERIES: ContextVar[frozenset[Recovery]] = ContextVar(
    "physquant_active_recoveries", default=frozenset()
)


class PhysquantError(Exception):
    """Base class of every error raised by physquant."""

    def __init__(self, message: str, *, recoveries: Iterable[Recovery] = ()) -> None:
        super().__init__(message)
        self.recoveries: Tuple[Recovery, ...] = tuple(recoveries)

    def offers(self, recovery: Recovery) -> bool:
        return recovery in self.recoveries


class DuplicateDefinitionError(PhysquantError, ValueError):
    """A prefix or unit name collides with one that is already registered."""

    def __init__(self, name: str, kind: str = "unit") -> None:
        super().__init__(f"Cannot register {kind} '{name}': the name is already defined.")
        self.name = name


class InvalidArgumentError(PhysquantError, ValueError):
    """Malformed registration or construction parameters."""


class CyclicDefinitionError(InvalidArgumentError):
    """A unit definition refers back to itself during expansion."""

    def __init__(self, chain: Iterable[str]) -> None:
        self.chain = tuple(chain)
        super().__init__("Cyclic unit definition: " + " -> ".join(self.chain))


class UnknownUnitError(PhysquantError, LookupError):
    """A unit name is in none of the catalog tables."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown unit: {name!r}")
        self.name = name


class UnitConversionError(PhysquantError, TypeError):
    """Source and target units do not expand to the same base units."""


class InvalidUnitOperationError(PhysquantError, TypeError):
    """The operation needs unitless (or compatible) operands and did not get them."""


class OperationUndefinedError(PhysquantError, ArithmeticError):
    """The operation is mathematically undefined for the given inputs."""


class ErrorPropagationError(PhysquantError, ArithmeticError):
    """The derivative needed to propagate an uncertainty is undefined here."""


# ---------------------------------------------------------------------------
# Recovery selection
# ---------------------------------------------------------------------------

def _as_recovery_set(recover: RecoverySpec) -> frozenset[Recovery]:
    if recover is None:
        return frozenset()
    if isinstance(recover, Recovery):
        return frozenset((recover,))
    return frozenset(recover)


def recovery_allowed(recovery: Recovery, recover: RecoverySpec = None) -> bool:
    """True when ``recovery`` was requested for this call or the enclosing block."""
    return recovery in _as_recovery_set(recover) or recovery in _ACTIVE_RECOVERIES.get()


@contextmanager
def recovering(*recoveries: Recovery) -> Iterator[None]:
    """Opt into ``recoveries`` for every operation evaluated inside the block."""
    token = _ACTIVE_RECOVERIES.set(_ACTIVE_RECOVERIES.get() | frozenset(recoveries))
    try:
        yield
    finally:
        _ACTIVE_RECOVERIES.reset(token)


__all__ = [
    "Recovery",
    "RecoverySpec",
    "PhysquantError",
    "DuplicateDefinitionError",
    "InvalidArgumentError",
    "CyclicDefinitionError",
    "UnknownUnitError",
    "UnitConversionError",
    "InvalidUnitOperationError",
    "OperationUndefinedError",
    "ErrorPropagationError",
    "recovery_allowed",
    "recovering",
]

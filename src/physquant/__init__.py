"""
physquant: physical quantities with units and uncertainties.

A quantity is a value with a unit and an optional uncertainty. Arithmetic,
transcendental functions, comparisons and unit conversions check dimensional
consistency and propagate the uncertainty to first order. Units and prefixes
live in a run-time extensible :class:`~physquant.units.registry.UnitCatalog`;
the default one knows the SI.

>>> from physquant import make_quantity, divide
>>> v = divide(make_quantity(3, 0.1, "metre"), make_quantity(2, 0.05, "second", relative=True))
>>> round(v.value, 3), round(v.absolute_error, 3), str(v.unit)
(1.5, 0.125, 'metre / second')
"""

from importlib import metadata as _metadata

from physquant.config import basic_config, get_settings, load_config, reset_config
from physquant.core.exceptions import (
    CyclicDefinitionError,
    DuplicateDefinitionError,
    ErrorPropagationError,
    InvalidArgumentError,
    InvalidUnitOperationError,
    OperationUndefinedError,
    PhysquantError,
    Recovery,
    UnitConversionError,
    UnknownUnitError,
    recovering,
)
from physquant.core.operations import *  # noqa: F401,F403
from physquant.core.operations import __all__ as _operations_all
from physquant.core.quantity import (
    AbsoluteError,
    Quantity,
    RelativeError,
    Uncertainty,
    absolute_error,
    as_quantity,
    has_error,
    has_unit,
    is_unitless,
    make_quantity,
    relative_error,
    value,
)
from physquant.core.unit import DIMENSIONLESS, Unit, UnitFactor, make_unit, render_unit
from physquant.units.registry import UnitCatalog, get_catalog, register_prefix, register_unit

__author__ = "physquant developers"
__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for local dev.
try:
    __version__ = _metadata.version("physquant")
except _metadata.PackageNotFoundError:
    import tomllib
    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    # configuration
    "basic_config",
    "get_settings",
    "load_config",
    "reset_config",
    # errors and recoveries
    "PhysquantError",
    "DuplicateDefinitionError",
    "InvalidArgumentError",
    "CyclicDefinitionError",
    "UnknownUnitError",
    "UnitConversionError",
    "InvalidUnitOperationError",
    "OperationUndefinedError",
    "ErrorPropagationError",
    "Recovery",
    "recovering",
    # values
    "Unit",
    "UnitFactor",
    "DIMENSIONLESS",
    "make_unit",
    "render_unit",
    "Uncertainty",
    "AbsoluteError",
    "RelativeError",
    "Quantity",
    "make_quantity",
    "as_quantity",
    "value",
    "absolute_error",
    "relative_error",
    "has_error",
    "has_unit",
    "is_unitless",
    # catalog
    "UnitCatalog",
    "get_catalog",
    "register_prefix",
    "register_unit",
    *_operations_all,
]

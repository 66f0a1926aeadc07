from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from physquant.units.registry import UnitCatalog
# Lazy access helpers -------------------------------------------------------

def _get_default_catalog() -> "UnitCatalog":
    # Read the attribute on every call so a replaced DEFAULT_CATALOG is honoured.
    from physquant.units.registry import DEFAULT_CATALOG  # local import
    return DEFAULT_CATALOG

def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. ``u`` is a namespace over the current default
    catalog, built on each access.
    """
    if name == "u":
        return _get_default_catalog().as_namespace()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + ["u"])

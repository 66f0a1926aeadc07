"""
physquant.config
================

Process-wide numeric settings.

``Settings`` holds the defaults that operations fall back to when a caller
does not pass them explicitly:

- ``confidence``: confidence level of the statistical comparisons (``q_eq`` …).
- ``rel_tol`` / ``abs_tol``: tolerances of ``quantity_equal_approx``.

Settings can be changed in code with :func:`basic_config` or loaded from a
``[physquant]`` table in ``physquant.toml`` / ``.physquant.toml``::

    [physquant]
    confidence = 0.99
    rel_tol = 1e-12
"""

from __future__ import annotations

import math
import os
import tomllib
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from physquant.core.exceptions import InvalidArgumentError
from physquant.logger import logger

__all__ = ("Settings", "get_settings", "basic_config", "reset_config", "load_config")

_CONFIG_FILENAMES = (".physquant.toml", "physquant.toml")


@dataclass(frozen=True, slots=True)
class Settings:
    confidence: float = 0.95
    rel_tol: float = 1e-9
    abs_tol: float = 0.0

    def __post_init__(self) -> None:
        if not (0.0 < self.confidence < 1.0):
            raise InvalidArgumentError(
                f"confidence must lie strictly between 0 and 1, got {self.confidence!r}"
            )
        for name in ("rel_tol", "abs_tol"):
            tol = getattr(self, name)
            if not (tol >= 0.0 and math.isfinite(tol)):
                raise InvalidArgumentError(f"{name} must be a finite, non-negative number")


_SETTINGS = Settings()


def get_settings() -> Settings:
    return _SETTINGS


def basic_config(**changes: Any) -> Settings:
    """Replace selected settings, e.g. ``basic_config(confidence=0.99)``."""
    global _SETTINGS
    known = {f.name for f in fields(Settings)}
    unknown = set(changes) - known
    if unknown:
        raise InvalidArgumentError(f"Unknown setting(s): {sorted(unknown)}")
    _SETTINGS = replace(_SETTINGS, **changes)
    logger.debug(f"physquant settings updated: {_SETTINGS}")
    return _SETTINGS


def reset_config() -> Settings:
    global _SETTINGS
    _SETTINGS = Settings()
    return _SETTINGS


def _find_config_file(start_dir: Optional[str] = None) -> Optional[str]:
    """Search ``start_dir`` (default: CWD) and its parents for a physquant config file."""
    current_dir = os.path.abspath(start_dir or os.getcwd())
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = os.path.join(current_dir, filename)
            if os.path.exists(candidate):
                return candidate
        parent_dir = os.path.dirname(current_dir)
        if parent_dir == current_dir:
            return None
        current_dir = parent_dir


def load_config(filepath: Optional[str] = None) -> Settings:
    """Load settings from a TOML file.

    When ``filepath`` is None the nearest ``.physquant.toml`` or
    ``physquant.toml`` is used; without one the current settings are kept.
    """
    if filepath is None:
        filepath = _find_config_file()
        if filepath is None:
            logger.debug("No physquant config file found, keeping current settings")
            return _SETTINGS

    with open(filepath, "rb") as fp:
        data: Mapping[str, Any] = tomllib.load(fp)

    section = data.get("physquant")
    if section is None:
        logger.warning(f"Config {os.path.basename(filepath)} has no `physquant` section")
        return _SETTINGS

    logger.debug(f"Loading physquant settings from {filepath}")
    return basic_config(**section)

# tests/conftest.py
import pytest

import physquant.units.registry as regmod
from physquant.config import reset_config
from physquant.units.registry import DEFAULT_CATALOG as _catalog


@pytest.fixture(scope="session")
def catalog():
    return _catalog


@pytest.fixture
def fresh_catalog():
    """Fully bootstrapped SI catalog, private to one test."""
    return regmod.bootstrap_si_catalog()


@pytest.fixture
def patched_default(monkeypatch, fresh_catalog):
    """Temporarily replace DEFAULT_CATALOG with an isolated instance."""
    monkeypatch.setattr(regmod, "DEFAULT_CATALOG", fresh_catalog)
    yield fresh_catalog


@pytest.fixture(autouse=True)
def _default_settings():
    reset_config()
    yield
    reset_config()

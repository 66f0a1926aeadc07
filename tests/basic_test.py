import importlib
import importlib.metadata as metadata
import builtins
import io

def test_version_fallback(monkeypatch):
    # Force PackageNotFoundError
    monkeypatch.setattr(metadata, "version", lambda _: (_ for _ in ()).throw(metadata.PackageNotFoundError))

    # Fake pyproject.toml content
    fake_toml = b"[project]\nversion = '9.8.7'\n"
    monkeypatch.setattr(builtins, "open", lambda *_: io.BytesIO(fake_toml))

    # Reload the module so the fallback branch executes
    import physquant
    importlib.reload(physquant)

    assert physquant.__version__ == "9.8.7"


def test_public_api_is_exported():
    import physquant

    for name in ("make_quantity", "add", "round_to_pdg", "q_eq", "UnitCatalog", "Recovery"):
        assert name in physquant.__all__
        assert hasattr(physquant, name)

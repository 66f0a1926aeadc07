from pathlib import Path

import pytest

from physquant.config import Settings, basic_config, get_settings, load_config, reset_config
from physquant.core.exceptions import InvalidArgumentError


def test_defaults():
    s = get_settings()
    assert s == Settings()
    assert (s.confidence, s.rel_tol, s.abs_tol) == (0.95, 1e-9, 0.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(confidence=0.0),
        dict(confidence=1.0),
        dict(confidence=1.5),
        dict(rel_tol=-1e-9),
        dict(abs_tol=float("inf")),
        dict(abs_tol=float("nan")),
    ],
)
def test_settings_validation(kwargs):
    with pytest.raises(InvalidArgumentError):
        Settings(**kwargs)


def test_basic_config_replaces_selected_fields():
    s = basic_config(confidence=0.99)
    assert s.confidence == 0.99
    assert s.rel_tol == 1e-9
    assert get_settings() is s


def test_basic_config_rejects_unknown_and_invalid_keys():
    with pytest.raises(InvalidArgumentError):
        basic_config(precision=3)
    with pytest.raises(InvalidArgumentError):
        basic_config(confidence=2)
    assert get_settings() == Settings()


def test_reset_config():
    basic_config(abs_tol=1e-6)
    assert reset_config() == Settings()
    assert get_settings().abs_tol == 0.0


def test_load_config_from_explicit_file(tmp_path: Path):
    cfg = tmp_path / "physquant.toml"
    cfg.write_text("""
[physquant]
confidence = 0.9
rel_tol = 1e-6
""".strip())
    s = load_config(str(cfg))
    assert s.confidence == 0.9
    assert s.rel_tol == 1e-6
    assert get_settings() == s


def test_load_config_searches_upwards(monkeypatch, tmp_path: Path):
    a = tmp_path / "a"
    b = a / "b"
    b.mkdir(parents=True)
    (a / ".physquant.toml").write_text("[physquant]\nconfidence = 0.68\n")

    with monkeypatch.context() as m:
        m.chdir(str(b))
        assert load_config().confidence == 0.68


def test_load_config_without_file_keeps_settings(monkeypatch, tmp_path: Path):
    basic_config(confidence=0.9)
    monkeypatch.chdir(str(tmp_path))
    # tmp_path has no config file; parents are assumed not to carry one either
    assert load_config().confidence == 0.9


def test_load_config_without_section_warns(tmp_path: Path, caplog):
    cfg = tmp_path / "physquant.toml"
    cfg.write_text("[tool.other]\nkey = 1\n")
    with caplog.at_level("WARNING", logger="physquant"):
        s = load_config(str(cfg))
    assert s == Settings()
    assert "no `physquant` section" in caplog.text


def test_load_config_rejects_unknown_keys(tmp_path: Path):
    cfg = tmp_path / "physquant.toml"
    cfg.write_text("[physquant]\nconfidance = 0.9\n")
    with pytest.raises(InvalidArgumentError):
        load_config(str(cfg))

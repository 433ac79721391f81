import importlib
import sys
import types
import os
from pathlib import Path

import pytest


def _reload_config():
    sys.modules.pop("ga4audit.config", None)
    return importlib.import_module("ga4audit.config")


def test_dotenv_present_but_fails_to_load(monkeypatch, tmp_path):
    tmp_path.joinpath(".env").write_text("USER_AGENT=FromFile")
    monkeypatch.chdir(tmp_path)

    fake = types.SimpleNamespace(load_dotenv=lambda: False)
    monkeypatch.setitem(sys.modules, "dotenv", fake)
    with pytest.raises(RuntimeError):
        _reload_config()


def test_dotenv_loads_sets_variables(monkeypatch, tmp_path):
    tmp_path.joinpath(".env").write_text("USER_AGENT=DotenvAgent")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("USER_AGENT", raising=False)

    def fake_load():
        # emulate dotenv behavior: read .env and set os.environ
        p = Path(".env")
        for line in p.read_text().splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                os.environ[k] = v
        return True

    fake = types.SimpleNamespace(load_dotenv=fake_load)
    monkeypatch.setitem(sys.modules, "dotenv", fake)
    cfg = _reload_config()
    assert cfg.get_str_env("USER_AGENT", "GA4Audit/0.1") == "DotenvAgent"
    monkeypatch.delenv("USER_AGENT")


def test_numeric_helpers_fall_back_on_garbage(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setitem(sys.modules, "dotenv", types.SimpleNamespace(load_dotenv=lambda: False))
    cfg = _reload_config()

    monkeypatch.setenv("HTTP_TIMEOUT", "soon")
    assert cfg.get_int_env("HTTP_TIMEOUT", 8) == 8
    assert cfg.get_optional_int_env("HTTP_TIMEOUT") is None
    monkeypatch.setenv("HTTP_TIMEOUT", "2.5")
    assert cfg.get_float_env("HTTP_TIMEOUT", 1.0) == 2.5
    monkeypatch.setenv("RENDER_API_KEY", "   ")
    assert cfg.get_optional_str_env("RENDER_API_KEY") is None
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert cfg.log_level() == "DEBUG"

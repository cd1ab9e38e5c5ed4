from pathlib import Path

import pytest

from techmock_app.core.config import Settings

ENV_NAMES = [
    "GEMINI_API_KEY",
    "API_KEY",
    "GEMINI_MODEL",
    "TECHMOCK_GEMINI_MODEL",
    "TECHMOCK_DATA_DIR",
    "TECHMOCK_HOST",
    "TECHMOCK_PORT",
    "TECHMOCK_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.gemini_api_key is None
    assert not settings.has_generation_credential
    assert settings.gemini_model == "gemini-3-flash-preview"
    assert settings.port == 8000
    assert settings.data_dir == Path.home() / ".techmock"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("API_KEY", "secret")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-custom")
    monkeypatch.setenv("TECHMOCK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TECHMOCK_PORT", "9001")

    settings = Settings(_env_file=None)

    assert settings.gemini_api_key == "secret"
    assert settings.has_generation_credential
    assert settings.gemini_model == "gemini-custom"
    assert settings.data_dir == tmp_path
    assert settings.port == 9001


def test_blank_key_is_not_a_credential(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "  ")

    assert not Settings(_env_file=None).has_generation_credential

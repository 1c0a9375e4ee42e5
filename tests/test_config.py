"""Unit tests for core/config.py -- SECRET_KEY policy and defaults."""

import pytest

from core.config import Settings

LONG_KEY = "k" * 32


def test_production_requires_secret_key():
    with pytest.raises(ValueError, match="SECRET_KEY is required"):
        Settings(debug=False, secret_key="")


def test_debug_generates_ephemeral_key():
    first = Settings(debug=True, secret_key="")
    second = Settings(debug=True, secret_key="")
    assert len(first.secret_key) >= 32
    assert first.secret_key != second.secret_key


def test_short_key_rejected():
    with pytest.raises(ValueError, match="at least 32"):
        Settings(debug=True, secret_key="too-short")


def test_configured_key_kept():
    assert Settings(debug=False, secret_key=LONG_KEY).secret_key == LONG_KEY


def test_session_lifetime_defaults_to_a_day():
    settings = Settings(debug=False, secret_key=LONG_KEY)
    assert settings.token_expire_seconds == 86400
    assert settings.bcrypt_rounds == 12


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TOKEN_EXPIRE_SECONDS", "600")
    monkeypatch.setenv("SESSION_SWEEP_INTERVAL_SECONDS", "0")
    settings = Settings(debug=False, secret_key=LONG_KEY)
    assert settings.token_expire_seconds == 600
    assert settings.session_sweep_interval_seconds == 0

from __future__ import annotations

import pytest
from pydantic import ValidationError

from holiday_card.core.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HUGGINGFACE_API_TOKEN", raising=False)
    settings = Settings(_env_file=None)

    assert settings.port == 3000
    assert settings.max_upload_bytes == 10 * 1024 * 1024
    assert settings.style_transfer_enabled is False


def test_port_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8081")
    assert Settings(_env_file=None).port == 8081


@pytest.mark.parametrize(
    "token, enabled",
    [
        (None, False),
        ("", False),
        ("   ", False),
        ("your_huggingface_token_here", False),
        ("YOUR_API_KEY_HERE", False),
        ("hf_abcdef123456", True),
    ],
)
def test_style_transfer_enabled(token, enabled):
    assert Settings(_env_file=None, HUGGINGFACE_API_TOKEN=token).style_transfer_enabled is enabled


def test_log_level_normalized():
    assert Settings(_env_file=None, LOG_LEVEL="debug").log_level == "DEBUG"


def test_log_level_invalid():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_LEVEL="chatty")


def test_allowed_origins_default(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    assert Settings(_env_file=None).allowed_origins == ["*"]


def test_allowed_origins_comma_separated(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test")
    assert Settings(_env_file=None).allowed_origins == ["http://a.test", "http://b.test"]


def test_allowed_origins_json_list(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", '["http://a.test", "http://b.test"]')
    assert Settings(_env_file=None).allowed_origins == ["http://a.test", "http://b.test"]


def test_allowed_origins_keyword():
    settings = Settings(_env_file=None, ALLOWED_ORIGINS="http://a.test,http://b.test")
    assert settings.allowed_origins == ["http://a.test", "http://b.test"]

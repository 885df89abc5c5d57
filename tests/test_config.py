"""Tests for environment resolution of the service settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from lexis.config import Settings, load_settings

_ENV_VARS = ("PORT", "MAX_CHAR_PROCESS", "LOG_LEVEL", "DETECTOR_BACKEND", "DETECTION_LOG_PATH")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ── PORT ───────────────────────────────────────────────────────────────────

def test_port_defaults_to_3000():
    settings = load_settings()
    assert settings.port == ":3000"
    assert settings.bind_port == 3000


def test_blank_port_uses_default(monkeypatch):
    monkeypatch.setenv("PORT", "   ")
    assert load_settings().port == ":3000"


def test_port_gets_colon_prefix(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    settings = load_settings()
    assert settings.port == ":8080"
    assert settings.bind_port == 8080


def test_prefixed_port_is_kept(monkeypatch):
    monkeypatch.setenv("PORT", ":9090")
    assert load_settings().port == ":9090"


def test_non_numeric_port_fails_only_at_bind_time(monkeypatch):
    monkeypatch.setenv("PORT", "abc")
    settings = load_settings()
    assert settings.port == ":abc"
    with pytest.raises(ValueError):
        settings.bind_port


# ── MAX_CHAR_PROCESS ───────────────────────────────────────────────────────

def test_max_char_process_default():
    assert load_settings().max_char_process == 1000


def test_max_char_process_reads_positive_integer(monkeypatch):
    monkeypatch.setenv("MAX_CHAR_PROCESS", "250")
    assert load_settings().max_char_process == 250


def test_max_char_process_has_no_upper_bound(monkeypatch):
    monkeypatch.setenv("MAX_CHAR_PROCESS", "10000000")
    assert load_settings().max_char_process == 10_000_000


@pytest.mark.parametrize("raw", ["abc", "", "0", "-5", "1.5", "  "])
def test_invalid_max_char_process_falls_back_to_default(monkeypatch, raw: str):
    monkeypatch.setenv("MAX_CHAR_PROCESS", raw)
    assert load_settings().max_char_process == 1000


# ── Ambient settings ───────────────────────────────────────────────────────

def test_ambient_defaults():
    settings = load_settings()
    assert settings.log_level == "INFO"
    assert settings.detector_backend == "lingua"
    assert settings.detection_log_path == ""


def test_unknown_log_level_falls_back(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    assert load_settings().log_level == "INFO"


def test_log_level_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert load_settings().log_level == "DEBUG"


def test_backend_is_normalised(monkeypatch):
    monkeypatch.setenv("DETECTOR_BACKEND", " LangDetect ")
    assert load_settings().detector_backend == "langdetect"


def test_settings_are_immutable():
    settings = Settings(max_char_process=10)
    with pytest.raises(ValidationError):
        settings.max_char_process = 20

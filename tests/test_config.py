"""
Tests for the config package: environment parsing and validation.
"""

from pathlib import Path

import pytest

from config import ExtractionConfig, RuntimeConfig, get_config, reset_config

CONFIG_ENV = [
    "PORT", "LOG_LEVEL", "MAX_UPLOAD_MB", "UPLOAD_TMP_DIR", "AI_VENDOR",
    "AI_TIMEOUT_SECONDS", "AI_MAX_ATTEMPTS", "AI_PAYLOAD_MODE", "PDF_RENDER_DPI",
    "DEEPSEEK_API_KEY", "OPENAI_API_KEY", "GEMINI_API_KEY",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield monkeypatch
    reset_config()


def test_defaults(clean_env):
    cfg = get_config()
    assert cfg.runtime.ai_vendor == "deepseek"
    assert cfg.runtime.max_upload_mb == 10
    assert cfg.runtime.max_upload_bytes == 10 * 1024 * 1024
    assert cfg.runtime.ai_timeout_seconds == 120
    assert cfg.runtime.ai_max_attempts == 1
    assert cfg.runtime.deepseek_base_url == "https://api.deepseek.com"
    assert cfg.runtime.deepseek_api_key is None


def test_environment_overrides(clean_env, tmp_path):
    clean_env.setenv("AI_VENDOR", " Gemini ")
    clean_env.setenv("MAX_UPLOAD_MB", "25")
    clean_env.setenv("AI_TIMEOUT_SECONDS", "30.5")
    clean_env.setenv("UPLOAD_TMP_DIR", str(tmp_path))
    clean_env.setenv("AI_PAYLOAD_MODE", "file")
    clean_env.setenv("GEMINI_API_KEY", "secret")
    clean_env.setenv("LOG_LEVEL", "debug")

    cfg = get_config()
    assert cfg.runtime.ai_vendor == "gemini"
    assert cfg.runtime.max_upload_mb == 25
    assert cfg.runtime.ai_timeout_seconds == 30.5
    assert cfg.runtime.upload_tmp_dir == Path(tmp_path)
    assert cfg.runtime.gemini_api_key == "secret"
    assert cfg.runtime.log_level == "DEBUG"
    assert cfg.extraction.payload_mode == "file"


def test_blank_api_key_is_unset(clean_env):
    clean_env.setenv("DEEPSEEK_API_KEY", "   ")
    assert get_config().runtime.deepseek_api_key is None


def test_unparseable_number_falls_back(clean_env):
    clean_env.setenv("MAX_UPLOAD_MB", "ten")
    assert get_config().runtime.max_upload_mb == 10


def test_config_is_cached_until_reset(clean_env):
    first = get_config()
    clean_env.setenv("MAX_UPLOAD_MB", "3")
    assert get_config() is first
    reset_config()
    assert get_config().runtime.max_upload_mb == 3


@pytest.mark.parametrize("kwargs", [
    {"ai_vendor": "claude"},
    {"max_upload_mb": 0},
    {"ai_timeout_seconds": 0},
    {"ai_max_attempts": 0},
    {"port": 70000},
])
def test_invalid_runtime_values(kwargs):
    with pytest.raises(ValueError):
        RuntimeConfig(**kwargs)


@pytest.mark.parametrize("kwargs", [
    {"payload_mode": "pdf"},
    {"pdf_render_dpi": 10},
    {"max_pdf_pages": 0},
])
def test_invalid_extraction_values(kwargs):
    with pytest.raises(ValueError):
        ExtractionConfig(**kwargs)

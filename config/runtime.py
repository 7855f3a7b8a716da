"""Runtime configuration - environment-driven settings.

Reads environment variables and applies defaults for production runtime.
"""

import os
from pathlib import Path

from .base import (
    DEFAULT_PORT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_CORS_ALLOWED_ORIGINS,
    DEFAULT_MAX_UPLOAD_MB,
    DEFAULT_UPLOAD_TMP_DIR,
    DEFAULT_AI_VENDOR,
    DEFAULT_AI_TIMEOUT_SECONDS,
    DEFAULT_AI_MAX_ATTEMPTS,
    DEFAULT_AI_MAX_OUTPUT_TOKENS,
    DEFAULT_DEEPSEEK_BASE_URL,
    DEFAULT_DEEPSEEK_MODEL_NAME,
    DEFAULT_OPENAI_MODEL_NAME,
    DEFAULT_GEMINI_MODEL_NAME,
)
from .schema import RuntimeConfig


def _env_int(name, default):
    """Read an integer environment variable."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(name, default):
    """Read a float environment variable."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_str(name, default=None):
    """Read a string environment variable, treating blanks as unset."""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_runtime_config() -> RuntimeConfig:
    """
    Build runtime configuration from environment variables.

    Returns:
        RuntimeConfig instance
    """
    return RuntimeConfig(
        port=_env_int("PORT", default=DEFAULT_PORT),
        log_level=_env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL),
        cors_allowed_origins=os.environ.get(
            "CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ALLOWED_ORIGINS
        ),
        max_upload_mb=_env_int("MAX_UPLOAD_MB", default=DEFAULT_MAX_UPLOAD_MB),
        upload_tmp_dir=Path(
            _env_str("UPLOAD_TMP_DIR", str(DEFAULT_UPLOAD_TMP_DIR))
        ),
        ai_vendor=_env_str("AI_VENDOR", DEFAULT_AI_VENDOR),
        ai_timeout_seconds=_env_float(
            "AI_TIMEOUT_SECONDS", default=DEFAULT_AI_TIMEOUT_SECONDS
        ),
        ai_max_attempts=_env_int("AI_MAX_ATTEMPTS", default=DEFAULT_AI_MAX_ATTEMPTS),
        ai_max_output_tokens=_env_int(
            "AI_MAX_OUTPUT_TOKENS", default=DEFAULT_AI_MAX_OUTPUT_TOKENS
        ),
        deepseek_api_key=_env_str("DEEPSEEK_API_KEY"),
        deepseek_base_url=_env_str("DEEPSEEK_BASE_URL", DEFAULT_DEEPSEEK_BASE_URL),
        deepseek_model_name=_env_str(
            "DEEPSEEK_MODEL_NAME", DEFAULT_DEEPSEEK_MODEL_NAME
        ),
        openai_api_key=_env_str("OPENAI_API_KEY"),
        openai_base_url=_env_str("OPENAI_BASE_URL"),
        openai_model_name=_env_str("OPENAI_MODEL_NAME", DEFAULT_OPENAI_MODEL_NAME),
        gemini_api_key=_env_str("GEMINI_API_KEY"),
        gemini_model_name=_env_str("GEMINI_MODEL_NAME", DEFAULT_GEMINI_MODEL_NAME),
    )


__all__ = ["get_runtime_config", "_env_int", "_env_float", "_env_str"]

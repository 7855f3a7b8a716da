"""Configuration package with layered settings.

Provides a centralized `get_config()` function that returns an AppConfig singleton.
"""

import os
import threading

from .base import DEFAULT_SECRET_KEY
from .runtime import get_runtime_config
from .extraction import get_extraction_config
from .schema import AppConfig, RuntimeConfig, ExtractionConfig

# Singleton cache
_config_cache = None
_config_lock = threading.Lock()


def reset_config() -> None:
    """
    Drop the cached configuration.

    The next `get_config()` call re-reads the environment.
    """
    global _config_cache
    with _config_lock:
        _config_cache = None


def get_config() -> AppConfig:
    """
    Get the application configuration (singleton).

    Returns:
        AppConfig instance with runtime and extraction settings
    """
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    with _config_lock:
        if _config_cache is None:
            _config_cache = AppConfig(
                runtime=get_runtime_config(),
                extraction=get_extraction_config(),
                secret_key=os.environ.get("SECRET_KEY") or DEFAULT_SECRET_KEY,
            )

    return _config_cache


__all__ = [
    "get_config",
    "reset_config",
    "RuntimeConfig",
    "ExtractionConfig",
    "AppConfig",
]

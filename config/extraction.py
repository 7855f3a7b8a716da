"""Extraction configuration - how uploaded documents reach the AI vendor.

Reads extraction-related environment variables with clear namespacing.
"""

import os

from .base import (
    DEFAULT_PAYLOAD_MODE,
    DEFAULT_PDF_RENDER_DPI,
    DEFAULT_MAX_PDF_PAGES,
)
from .runtime import _env_int
from .schema import ExtractionConfig


def get_extraction_config() -> ExtractionConfig:
    """
    Build extraction configuration from environment variables.

    Returns:
        ExtractionConfig instance
    """
    return ExtractionConfig(
        payload_mode=os.environ.get("AI_PAYLOAD_MODE", DEFAULT_PAYLOAD_MODE),
        pdf_render_dpi=_env_int("PDF_RENDER_DPI", default=DEFAULT_PDF_RENDER_DPI),
        max_pdf_pages=_env_int("MAX_PDF_PAGES", default=DEFAULT_MAX_PDF_PAGES),
    )


__all__ = ["get_extraction_config"]

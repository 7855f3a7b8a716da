"""Configuration schema dataclasses.

Minimal dataclasses for runtime and extraction configuration.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .base import (
    DEFAULT_SECRET_KEY,
    PAYLOAD_MODES,
    SUPPORTED_VENDORS,
)


@dataclass
class RuntimeConfig:
    """Runtime configuration - environment-driven settings."""

    # Server
    port: int = 5000
    log_level: str = "INFO"
    cors_allowed_origins: str = ""

    # Uploads
    max_upload_mb: int = 10
    upload_tmp_dir: Path = field(default_factory=lambda: Path("/tmp"))

    # AI vendor selection
    ai_vendor: str = "deepseek"
    ai_timeout_seconds: float = 120
    ai_max_attempts: int = 1
    ai_max_output_tokens: int = 8192

    # DeepSeek (OpenAI-compatible endpoint)
    deepseek_api_key: Optional[str] = None
    deepseek_base_url: str = "https://api.deepseek.com"
    deepseek_model_name: str = "deepseek-chat"

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    openai_model_name: str = "gpt-4o"

    # Google Gemini
    gemini_api_key: Optional[str] = None
    gemini_model_name: str = "gemini-2.0-flash"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def __post_init__(self):
        """Validate after initialization."""
        self.ai_vendor = (self.ai_vendor or "").strip().lower()
        if self.ai_vendor not in SUPPORTED_VENDORS:
            raise ValueError(
                f"AI_VENDOR must be one of {', '.join(SUPPORTED_VENDORS)}"
            )
        if self.max_upload_mb <= 0:
            raise ValueError("MAX_UPLOAD_MB must be > 0")
        if self.ai_timeout_seconds <= 0:
            raise ValueError("AI_TIMEOUT_SECONDS must be > 0")
        if self.ai_max_attempts < 1:
            raise ValueError("AI_MAX_ATTEMPTS must be >= 1")
        if self.ai_max_output_tokens <= 0:
            raise ValueError("AI_MAX_OUTPUT_TOKENS must be > 0")
        if not 0 < self.port < 65536:
            raise ValueError("PORT must be between 1 and 65535")
        if self.upload_tmp_dir and not isinstance(self.upload_tmp_dir, Path):
            self.upload_tmp_dir = Path(self.upload_tmp_dir)
        self.log_level = (self.log_level or "INFO").upper()


@dataclass
class ExtractionConfig:
    """Extraction tuning - how documents are handed to the vendor."""

    payload_mode: str = "images"  # images | file
    pdf_render_dpi: int = 150
    max_pdf_pages: int = 20

    def __post_init__(self):
        """Validate after initialization."""
        self.payload_mode = (self.payload_mode or "").strip().lower()
        if self.payload_mode not in PAYLOAD_MODES:
            raise ValueError("AI_PAYLOAD_MODE must be 'images' or 'file'")
        if not 36 <= self.pdf_render_dpi <= 600:
            raise ValueError("PDF_RENDER_DPI must be between 36 and 600")
        if self.max_pdf_pages <= 0:
            raise ValueError("MAX_PDF_PAGES must be > 0")


@dataclass
class AppConfig:
    """Application configuration - composition of runtime and extraction configs."""

    runtime: RuntimeConfig
    extraction: ExtractionConfig

    # Flask-specific settings
    secret_key: str = DEFAULT_SECRET_KEY


__all__ = ["RuntimeConfig", "ExtractionConfig", "AppConfig"]

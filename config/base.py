"""Default values shared by runtime and extraction configuration."""

import tempfile
from pathlib import Path

DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"

# Server
DEFAULT_PORT = 5000
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CORS_ALLOWED_ORIGINS = ""

# Uploads
DEFAULT_MAX_UPLOAD_MB = 10
DEFAULT_UPLOAD_TMP_DIR = Path(tempfile.gettempdir())

# AI vendors
SUPPORTED_VENDORS = ("deepseek", "openai", "gemini")
DEFAULT_AI_VENDOR = "deepseek"
DEFAULT_AI_TIMEOUT_SECONDS = 120
DEFAULT_AI_MAX_ATTEMPTS = 1
DEFAULT_AI_MAX_OUTPUT_TOKENS = 8192

DEFAULT_DEEPSEEK_BASE_URL = "https://api.deepseek.com"
DEFAULT_DEEPSEEK_MODEL_NAME = "deepseek-chat"
DEFAULT_OPENAI_MODEL_NAME = "gpt-4o"
DEFAULT_GEMINI_MODEL_NAME = "gemini-2.0-flash"

# Extraction
PAYLOAD_MODES = ("images", "file")
DEFAULT_PAYLOAD_MODE = "images"
DEFAULT_PDF_RENDER_DPI = 150
DEFAULT_MAX_PDF_PAGES = 20

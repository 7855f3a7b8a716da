"""AI vendor clients for question extraction.

One client per supported vendor. Each sends a single blocking request made of
the fixed system instruction plus a user message bundling the extraction
prompt with either page images or the document itself, and returns the raw
reply text. Vendor SDK errors are mapped to VendorRequestFailed / VendorTimeout.
"""
import base64
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type

import httpx
import openai
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from app.domain.errors import VendorRequestFailed, VendorTimeout
from app.domain.models import PDF_MIME_TYPE, PageImage, UploadedDocument
from app.services.prompts import (
    SYSTEM_PROMPT,
    build_extraction_prompt,
    build_text_prompt,
)

logger = logging.getLogger(__name__)

TEMPERATURE = 0.1


@dataclass
class ExtractionRequest:
    """Everything a vendor needs for one extraction call."""

    document: UploadedDocument
    page_images: List[PageImage] = field(default_factory=list)
    document_text: Optional[str] = None

    @property
    def uses_images(self) -> bool:
        return bool(self.page_images)


def _data_url(mime_type: str, data: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


class VendorClient:
    """Base class: retry policy, timing and error mapping around ``_complete``."""

    name = "vendor"
    # PDFs can be sent as files; everything else is sent as extracted text.
    accepts_pdf_file = False
    # Rendered page images are only sent to vision-capable models.
    accepts_images = True
    transient_errors: Tuple[Type[BaseException], ...] = ()
    timeout_errors: Tuple[Type[BaseException], ...] = ()

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str,
        timeout: float = 120,
        max_attempts: int = 1,
        max_output_tokens: int = 8192,
    ):
        if not api_key:
            raise VendorRequestFailed(
                f"{self.name} API key is not configured",
                details={"vendor": self.name},
            )
        self.api_key = api_key
        self.model_name = model_name
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.max_output_tokens = max_output_tokens

    def needs_document_text(self, request: ExtractionRequest) -> bool:
        """True when the document must be inlined as text instead of sent as bytes."""
        if request.uses_images:
            return False
        return not (self.accepts_pdf_file and request.document.kind == "pdf")

    def is_transient(self, error: BaseException) -> bool:
        """Connection-level failures worth another attempt; timeouts never are."""
        if isinstance(error, self.timeout_errors):
            return False
        return isinstance(error, self.transient_errors)

    def extract(self, request: ExtractionRequest) -> str:
        """Send one extraction request and return the reply text."""
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=2, min=2, max=30),
            retry=retry_if_exception(self.is_transient),
            reraise=True,
        )
        start = time.perf_counter()
        logger.info(
            "Calling %s (%s) for %s with %s",
            self.name,
            self.model_name,
            request.document.filename,
            f"{len(request.page_images)} page image(s)" if request.uses_images else "document payload",
        )
        try:
            text = retrying(self._complete, request)
        except (VendorRequestFailed, VendorTimeout):
            raise
        except Exception as e:
            elapsed = time.perf_counter() - start
            logger.warning("%s request failed after %.1fs: %s", self.name, elapsed, e)
            raise self._map_error(e) from e

        elapsed = time.perf_counter() - start
        logger.info("%s replied in %.1fs (%d chars)", self.name, elapsed, len(text))
        return text

    def _complete(self, request: ExtractionRequest) -> str:
        raise NotImplementedError

    def _map_error(self, error: Exception) -> Exception:
        return VendorRequestFailed(
            f"{self.name} request failed",
            details=str(error),
        )


# ============================================================
# OpenAI-compatible chat completions (OpenAI, DeepSeek)
# ============================================================

class OpenAICompatibleClient(VendorClient):
    """Chat completions through the OpenAI SDK."""

    name = "openai"
    transient_errors = (openai.APIConnectionError, openai.InternalServerError)
    timeout_errors = (openai.APITimeoutError,)

    def __init__(self, api_key, model_name, base_url=None, **kwargs):
        super().__init__(api_key, model_name, **kwargs)
        self.client = openai.OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=self.timeout,
            max_retries=0,
        )

    def build_messages(self, request: ExtractionRequest) -> List[Dict[str, Any]]:
        document = request.document
        if request.uses_images:
            parts: List[Dict[str, Any]] = [
                {"type": "text", "text": build_extraction_prompt("images")}
            ]
            for page in request.page_images:
                parts.append(
                    {
                        "type": "image_url",
                        "image_url": {"url": _data_url(page.mime_type, page.read_bytes())},
                    }
                )
        elif self.needs_document_text(request):
            parts = [
                {
                    "type": "text",
                    "text": build_text_prompt(
                        document.kind, document.filename, request.document_text or ""
                    ),
                }
            ]
        else:
            parts = [
                {"type": "text", "text": build_extraction_prompt(document.kind)},
                {
                    "type": "file",
                    "file": {
                        "filename": document.filename,
                        "file_data": _data_url(document.mime_type, document.data),
                    },
                },
            ]
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": parts},
        ]

    def _complete(self, request: ExtractionRequest) -> str:
        response = self.client.chat.completions.create(
            model=self.model_name,
            messages=self.build_messages(request),
            max_tokens=self.max_output_tokens,
            temperature=TEMPERATURE,
        )
        if not response.choices:
            raise VendorRequestFailed(f"{self.name} returned no choices")
        content = response.choices[0].message.content
        return (content or "").strip()

    def _map_error(self, error):
        # APITimeoutError subclasses APIConnectionError; check it first.
        if isinstance(error, self.timeout_errors):
            return VendorTimeout(
                f"{self.name} did not respond within {self.timeout:g} seconds"
            )
        if isinstance(error, openai.APIStatusError):
            return VendorRequestFailed(
                f"{self.name} request failed with status {error.status_code}",
                details={"status": error.status_code, "message": error.message},
            )
        if isinstance(error, openai.APIConnectionError):
            return VendorRequestFailed(
                f"Could not connect to {self.name}",
                details=str(error),
            )
        return super()._map_error(error)


class OpenAIClient(OpenAICompatibleClient):
    name = "openai"
    accepts_pdf_file = True


class DeepSeekClient(OpenAICompatibleClient):
    name = "deepseek"
    accepts_pdf_file = False
    accepts_images = False


# ============================================================
# Google Gemini
# ============================================================

class GeminiClient(VendorClient):
    """Gemini generate_content through the google-genai SDK."""

    name = "gemini"
    accepts_pdf_file = True
    transient_errors = (genai_errors.ServerError, httpx.ConnectError)
    timeout_errors = (httpx.TimeoutException,)

    def __init__(self, api_key, model_name, **kwargs):
        super().__init__(api_key, model_name, **kwargs)
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
        )

    def build_contents(self, request: ExtractionRequest) -> List[Any]:
        document = request.document
        if request.uses_images:
            contents: List[Any] = [build_extraction_prompt("images")]
            for page in request.page_images:
                contents.append(
                    types.Part.from_bytes(data=page.read_bytes(), mime_type=page.mime_type)
                )
            return contents
        if self.needs_document_text(request):
            return [
                build_text_prompt(
                    document.kind, document.filename, request.document_text or ""
                )
            ]
        return [
            build_extraction_prompt(document.kind),
            types.Part.from_bytes(data=document.data, mime_type=PDF_MIME_TYPE),
        ]

    def _complete(self, request: ExtractionRequest) -> str:
        response = self.client.models.generate_content(
            model=self.model_name,
            contents=self.build_contents(request),
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_PROMPT,
                temperature=TEMPERATURE,
                max_output_tokens=self.max_output_tokens,
            ),
        )
        return (response.text or "").strip()

    def _map_error(self, error):
        if isinstance(error, self.timeout_errors):
            return VendorTimeout(
                f"{self.name} did not respond within {self.timeout:g} seconds"
            )
        if isinstance(error, genai_errors.APIError):
            return VendorRequestFailed(
                f"{self.name} request failed with status {error.code}",
                details={"status": error.code, "message": error.message},
            )
        return super()._map_error(error)


def get_vendor_client(runtime) -> VendorClient:
    """
    Build the client for the configured AI vendor.

    Args:
        runtime: RuntimeConfig

    Raises:
        VendorRequestFailed: the vendor's API key is missing.
    """
    common = {
        "timeout": runtime.ai_timeout_seconds,
        "max_attempts": runtime.ai_max_attempts,
        "max_output_tokens": runtime.ai_max_output_tokens,
    }
    if runtime.ai_vendor == "deepseek":
        return DeepSeekClient(
            runtime.deepseek_api_key,
            runtime.deepseek_model_name,
            base_url=runtime.deepseek_base_url,
            **common,
        )
    if runtime.ai_vendor == "openai":
        return OpenAIClient(
            runtime.openai_api_key,
            runtime.openai_model_name,
            base_url=runtime.openai_base_url,
            **common,
        )
    if runtime.ai_vendor == "gemini":
        return GeminiClient(runtime.gemini_api_key, runtime.gemini_model_name, **common)
    raise ValueError(f"Unknown AI vendor: {runtime.ai_vendor}")


__all__ = [
    "ExtractionRequest",
    "VendorClient",
    "OpenAIClient",
    "DeepSeekClient",
    "GeminiClient",
    "get_vendor_client",
]

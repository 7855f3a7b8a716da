"""
Tests for ai_vendors.py: payload building, error mapping, retry policy.

No network: SDK clients are constructed but ``_complete`` is replaced.
"""

import httpx
import openai
import pytest
from google.genai import errors as genai_errors

from app.domain.errors import VendorRequestFailed, VendorTimeout
from app.domain.models import DOCX_MIME_TYPE, PDF_MIME_TYPE, PageImage, UploadedDocument
from app.services.ai_vendors import (
    DeepSeekClient,
    ExtractionRequest,
    GeminiClient,
    OpenAIClient,
    get_vendor_client,
)
from app.services.prompts import SYSTEM_PROMPT
from app.services.upload_service import extract_questions
from config import AppConfig, ExtractionConfig, RuntimeConfig

API_REQUEST = httpx.Request("POST", "https://api.example.test/v1/chat/completions")


def pdf_document():
    return UploadedDocument(
        filename="quiz.pdf", kind="pdf", mime_type=PDF_MIME_TYPE, data=b"%PDF-1.4"
    )


def docx_document():
    return UploadedDocument(
        filename="quiz.docx", kind="docx", mime_type=DOCX_MIME_TYPE, data=b"PK\x03\x04"
    )


def page_images(tmp_path, count=2):
    pages = []
    for i in range(count):
        path = tmp_path / f"page_{i + 1:04d}.png"
        path.write_bytes(b"\x89PNG fake")
        pages.append(PageImage(page_number=i + 1, path=path))
    return pages


def failing(error, calls):
    def _complete(request):
        calls.append(request)
        raise error
    return _complete


# ============================================================
# Test: OpenAI-compatible payloads
# ============================================================

def test_openai_messages_with_page_images(tmp_path):
    client = OpenAIClient("key", "gpt-4o")
    request = ExtractionRequest(document=pdf_document(), page_images=page_images(tmp_path))
    messages = client.build_messages(request)

    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    parts = messages[1]["content"]
    assert parts[0]["type"] == "text"
    images = [p for p in parts if p["type"] == "image_url"]
    assert len(images) == 2
    assert images[0]["image_url"]["url"].startswith("data:image/png;base64,")


def test_openai_sends_pdf_as_file():
    client = OpenAIClient("key", "gpt-4o")
    request = ExtractionRequest(document=pdf_document())
    assert client.needs_document_text(request) is False

    parts = client.build_messages(request)[1]["content"]
    assert parts[1]["type"] == "file"
    assert parts[1]["file"]["filename"] == "quiz.pdf"
    assert parts[1]["file"]["file_data"].startswith("data:application/pdf;base64,")


def test_openai_sends_docx_as_text():
    client = OpenAIClient("key", "gpt-4o")
    request = ExtractionRequest(document=docx_document(), document_text="1. $2+2$?")
    assert client.needs_document_text(request) is True

    parts = client.build_messages(request)[1]["content"]
    assert len(parts) == 1
    assert "1. $2+2$?" in parts[0]["text"]
    assert "quiz.docx" in parts[0]["text"]


def test_deepseek_needs_text_for_pdf_file_payload(tmp_path):
    client = DeepSeekClient("key", "deepseek-chat", base_url="https://api.deepseek.com")
    assert client.needs_document_text(ExtractionRequest(document=pdf_document())) is True
    with_images = ExtractionRequest(document=pdf_document(), page_images=page_images(tmp_path))
    assert client.needs_document_text(with_images) is False


def test_deepseek_gets_document_text_in_images_mode(tmp_path, monkeypatch):
    cfg = AppConfig(
        runtime=RuntimeConfig(deepseek_api_key="key", upload_tmp_dir=tmp_path),
        extraction=ExtractionConfig(payload_mode="images"),
    )
    client = DeepSeekClient("key", "deepseek-chat")
    sent = []

    def complete(request):
        sent.append(client.build_messages(request))
        return '[{"index":1,"question":"q","options":["1","2","3","4"],"answer":"b"}]'

    def fail_render(*args, **kwargs):
        raise AssertionError("deepseek-chat takes no images")

    client._complete = complete
    monkeypatch.setattr("app.services.upload_service.render_pdf_pages", fail_render)
    monkeypatch.setattr(
        "app.services.upload_service.extract_document_text",
        lambda document, max_pages=20: "1. $1+1$?",
    )

    result = extract_questions(pdf_document(), cfg, client_factory=lambda runtime: client)
    assert DeepSeekClient.accepts_images is False
    parts = sent[0][1]["content"]
    assert [p["type"] for p in parts] == ["text"]
    assert "1. $1+1$?" in parts[0]["text"]
    assert result.questions[0].answer == "b"


# ============================================================
# Test: Gemini payloads
# ============================================================

def test_gemini_contents_with_pdf():
    client = GeminiClient("key", "gemini-2.0-flash")
    contents = client.build_contents(ExtractionRequest(document=pdf_document()))
    assert isinstance(contents[0], str)
    assert contents[1].inline_data.mime_type == PDF_MIME_TYPE
    assert contents[1].inline_data.data == b"%PDF-1.4"


def test_gemini_contents_with_images(tmp_path):
    client = GeminiClient("key", "gemini-2.0-flash")
    request = ExtractionRequest(document=pdf_document(), page_images=page_images(tmp_path, 3))
    contents = client.build_contents(request)
    assert len(contents) == 4
    assert all(part.inline_data.mime_type == "image/png" for part in contents[1:])


def test_gemini_contents_with_docx_text():
    client = GeminiClient("key", "gemini-2.0-flash")
    request = ExtractionRequest(document=docx_document(), document_text="বৃত্ত")
    contents = client.build_contents(request)
    assert len(contents) == 1
    assert "বৃত্ত" in contents[0]


# ============================================================
# Test: error mapping
# ============================================================

def test_timeout_maps_to_vendor_timeout():
    client = DeepSeekClient("key", "deepseek-chat", timeout=5)
    calls = []
    client._complete = failing(openai.APITimeoutError(request=API_REQUEST), calls)

    with pytest.raises(VendorTimeout) as exc_info:
        client.extract(ExtractionRequest(document=docx_document(), document_text="x"))
    assert "5 seconds" in exc_info.value.message
    assert exc_info.value.status_code == 500
    assert len(calls) == 1


def test_status_error_maps_to_request_failed():
    client = OpenAIClient("key", "gpt-4o")
    error = openai.RateLimitError(
        "Rate limit reached",
        response=httpx.Response(429, request=API_REQUEST),
        body=None,
    )
    client._complete = failing(error, [])

    with pytest.raises(VendorRequestFailed) as exc_info:
        client.extract(ExtractionRequest(document=pdf_document()))
    assert exc_info.value.details["status"] == 429
    assert "429" in exc_info.value.message


def test_connection_error_maps_to_request_failed():
    client = OpenAIClient("key", "gpt-4o")
    client._complete = failing(openai.APIConnectionError(request=API_REQUEST), [])

    with pytest.raises(VendorRequestFailed, match="Could not connect"):
        client.extract(ExtractionRequest(document=pdf_document()))


def test_gemini_api_error_maps_to_request_failed():
    client = GeminiClient("key", "gemini-2.0-flash")
    error = genai_errors.ClientError(
        429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}}
    )
    client._complete = failing(error, [])

    with pytest.raises(VendorRequestFailed) as exc_info:
        client.extract(ExtractionRequest(document=pdf_document()))
    assert exc_info.value.details["status"] == 429


def test_gemini_timeout_maps_to_vendor_timeout():
    client = GeminiClient("key", "gemini-2.0-flash", timeout=30)
    client._complete = failing(httpx.ReadTimeout("slow", request=API_REQUEST), [])

    with pytest.raises(VendorTimeout):
        client.extract(ExtractionRequest(document=pdf_document()))


# ============================================================
# Test: retry policy
# ============================================================

def test_single_attempt_by_default():
    client = OpenAIClient("key", "gpt-4o")
    calls = []
    client._complete = failing(openai.APIConnectionError(request=API_REQUEST), calls)

    with pytest.raises(VendorRequestFailed):
        client.extract(ExtractionRequest(document=pdf_document()))
    assert len(calls) == 1


def test_connection_errors_retried_when_enabled(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda seconds: None)
    client = OpenAIClient("key", "gpt-4o", max_attempts=3)
    calls = []

    def flaky(request):
        calls.append(request)
        if len(calls) < 3:
            raise openai.APIConnectionError(request=API_REQUEST)
        return "[]"

    client._complete = flaky
    assert client.extract(ExtractionRequest(document=pdf_document())) == "[]"
    assert len(calls) == 3


def test_timeouts_never_retried():
    client = OpenAIClient("key", "gpt-4o", max_attempts=3)
    assert client.is_transient(openai.APITimeoutError(request=API_REQUEST)) is False
    assert client.is_transient(openai.APIConnectionError(request=API_REQUEST)) is True
    assert client.is_transient(ValueError("nope")) is False


# ============================================================
# Test: client selection
# ============================================================

def test_missing_api_key():
    with pytest.raises(VendorRequestFailed, match="API key is not configured"):
        get_vendor_client(RuntimeConfig(ai_vendor="deepseek", deepseek_api_key=None))


@pytest.mark.parametrize("vendor,cls", [
    ("deepseek", DeepSeekClient),
    ("openai", OpenAIClient),
    ("gemini", GeminiClient),
])
def test_get_vendor_client(vendor, cls):
    runtime = RuntimeConfig(
        ai_vendor=vendor,
        deepseek_api_key="k1",
        openai_api_key="k2",
        gemini_api_key="k3",
        ai_timeout_seconds=45,
    )
    client = get_vendor_client(runtime)
    assert type(client) is cls
    assert client.timeout == 45
    assert client.max_attempts == 1

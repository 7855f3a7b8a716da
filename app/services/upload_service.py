"""Upload handling: document in, validated question list out.

One upload makes exactly one vendor request. Temporary files live in a
per-request workspace that is removed on every exit path.
"""
import logging
from pathlib import Path
from typing import Callable, Optional

from app.domain.errors import UnreadableDocument
from app.domain.models import ExtractionResult, UploadedDocument
from app.services.ai_vendors import ExtractionRequest, VendorClient, get_vendor_client
from app.services.documents import (
    EXTENSION_KINDS,
    KIND_MIME_TYPES,
    extract_document_text,
    render_pdf_pages,
    save_document,
    upload_workspace,
)
from app.services.question_validation import validate_questions
from app.services.response_extractor import parse_model_output
from config import AppConfig, get_config

logger = logging.getLogger(__name__)


def _prepare_request(
    document: UploadedDocument,
    client: VendorClient,
    workspace: Path,
    cfg: AppConfig,
) -> ExtractionRequest:
    extraction = cfg.extraction
    save_document(document, workspace)
    request = ExtractionRequest(document=document)
    try:
        if (
            document.kind == "pdf"
            and extraction.payload_mode == "images"
            and client.accepts_images
        ):
            request.page_images = render_pdf_pages(
                document.path,
                workspace / "pages",
                resolution=extraction.pdf_render_dpi,
                max_pages=extraction.max_pdf_pages,
            )
        if client.needs_document_text(request):
            request.document_text = extract_document_text(
                document, max_pages=extraction.max_pdf_pages
            )
    except Exception as e:
        logger.warning("Could not open %s: %s", document.filename, e)
        raise UnreadableDocument(
            f"Could not read {document.filename} as {document.kind.upper()}",
            details=str(e),
        ) from e
    return request


def extract_questions(
    document: UploadedDocument,
    cfg: Optional[AppConfig] = None,
    client_factory: Optional[Callable[..., VendorClient]] = None,
) -> ExtractionResult:
    """
    Send the document to the configured AI vendor and return validated questions.

    Raises:
        UnreadableDocument, VendorRequestFailed, VendorTimeout, MalformedModelOutput
    """
    cfg = cfg or get_config()
    client = (client_factory or get_vendor_client)(cfg.runtime)

    with upload_workspace(cfg.runtime.upload_tmp_dir) as workspace:
        request = _prepare_request(document, client, workspace, cfg)
        reply = client.extract(request)

    raw_items = parse_model_output(reply)
    result = validate_questions(raw_items, ai_response=reply)
    logger.info(
        "Extracted %d question(s) from %s (%d rejected)",
        len(result.questions),
        document.filename,
        len(result.rejected),
    )
    return result


def load_document(path: Path) -> UploadedDocument:
    """Read a local PDF/DOCX file the same way an upload is read."""
    path = Path(path)
    kind = EXTENSION_KINDS.get(path.suffix.lower())
    if kind is None:
        raise ValueError(f"Unsupported file extension: {path.suffix or '(none)'}")
    return UploadedDocument(
        filename=path.name,
        kind=kind,
        mime_type=KIND_MIME_TYPES[kind],
        data=path.read_bytes(),
    )


__all__ = ["extract_questions", "load_document"]

"""Uploaded document handling.

Validation of the incoming file, a per-request temporary workspace, PDF page
rendering and plain-text extraction for vendors without file input.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional
from uuid import uuid4

import pdfplumber
from docx import Document
from werkzeug.utils import secure_filename

from app.domain.errors import NoFileAttached, PayloadTooLarge, UnsupportedMediaType
from app.domain.models import (
    DOCX_MIME_TYPE,
    PDF_MIME_TYPE,
    PageImage,
    UploadedDocument,
)

logger = logging.getLogger(__name__)

DOCUMENT_KINDS = {
    PDF_MIME_TYPE: "pdf",
    DOCX_MIME_TYPE: "docx",
}
EXTENSION_KINDS = {".pdf": "pdf", ".docx": "docx"}
KIND_MIME_TYPES = {kind: mime for mime, kind in DOCUMENT_KINDS.items()}
GENERIC_MIME_TYPES = {"", "application/octet-stream"}


def detect_document_kind(filename: str, mime_type: Optional[str]) -> str:
    """
    Map the declared content type to a document kind.

    Browsers that cannot name the type send application/octet-stream; only
    then does the file extension decide.

    Raises:
        UnsupportedMediaType: the type is neither PDF nor DOCX.
    """
    mime_type = (mime_type or "").split(";")[0].strip().lower()
    kind = DOCUMENT_KINDS.get(mime_type)
    if kind:
        return kind
    if mime_type in GENERIC_MIME_TYPES:
        kind = EXTENSION_KINDS.get(Path(filename or "").suffix.lower())
        if kind:
            return kind
    raise UnsupportedMediaType(
        f"Unsupported file type: {mime_type or 'unknown'}. Upload a PDF or DOCX document."
    )


def read_upload(file_storage, max_bytes: int) -> UploadedDocument:
    """
    Validate a werkzeug FileStorage and read it into memory.

    Raises:
        NoFileAttached, UnsupportedMediaType, PayloadTooLarge
    """
    if file_storage is None or not file_storage.filename:
        raise NoFileAttached()

    filename = Path(file_storage.filename).name
    kind = detect_document_kind(filename, file_storage.mimetype)

    # One byte past the limit is enough to know it is too large.
    data = file_storage.stream.read(max_bytes + 1)
    if len(data) > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise PayloadTooLarge(f"File exceeds the {limit_mb:g} MB upload limit")
    if not data:
        raise NoFileAttached("Uploaded file is empty")

    return UploadedDocument(
        filename=filename,
        kind=kind,
        mime_type=KIND_MIME_TYPES[kind],
        data=data,
    )


@contextmanager
def upload_workspace(base_dir: Path) -> Iterator[Path]:
    """
    Create a collision-free temp directory and always remove it on exit.

    Removal failures are logged and never raised.
    """
    base_dir = Path(base_dir)
    base_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    workspace = Path(
        tempfile.mkdtemp(prefix=f"quiz_{timestamp}_{uuid4().hex[:8]}_", dir=base_dir)
    )
    try:
        yield workspace
    finally:
        try:
            shutil.rmtree(workspace)
        except OSError as exc:
            logger.warning("Temp workspace cleanup failed for %s: %s", workspace, exc)


def save_document(document: UploadedDocument, workspace: Path) -> Path:
    """Write the document into the workspace and remember its path."""
    safe_name = secure_filename(document.filename) or f"upload.{document.kind}"
    if not safe_name.lower().endswith(f".{document.kind}"):
        safe_name = f"{safe_name}.{document.kind}"
    path = Path(workspace) / safe_name
    path.write_bytes(document.data)
    document.path = path
    return path


def render_pdf_pages(
    pdf_path: Path,
    out_dir: Path,
    resolution: int = 150,
    max_pages: int = 20,
) -> List[PageImage]:
    """Render up to ``max_pages`` pages of a PDF to PNG files in ``out_dir``."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    pages: List[PageImage] = []
    with pdfplumber.open(pdf_path) as pdf:
        total = len(pdf.pages)
        if total > max_pages:
            logger.warning(
                "PDF has %d pages; only the first %d are sent", total, max_pages
            )
        for i, page in enumerate(pdf.pages[:max_pages]):
            page_path = out_dir / f"page_{i + 1:04d}.png"
            page.to_image(resolution=resolution).save(page_path, format="PNG")
            pages.append(PageImage(page_number=i + 1, path=page_path))
    return pages


def extract_pdf_text(pdf_path: Path, max_pages: int = 20) -> str:
    text_content = []
    with pdfplumber.open(pdf_path) as pdf:
        for i, page in enumerate(pdf.pages[:max_pages]):
            text = page.extract_text()
            if text:
                text_content.append(f"--- Page {i + 1} ---\n{text}")
    return "\n".join(text_content)


def extract_docx_text(docx_path: Path) -> str:
    """Paragraph text of a DOCX file followed by its table rows."""
    doc = Document(str(docx_path))
    lines = [p.text for p in doc.paragraphs if p.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))
    return "\n".join(lines)


def extract_document_text(document: UploadedDocument, max_pages: int = 20) -> str:
    if document.path is None:
        raise ValueError("Document must be saved to the workspace first")
    if document.kind == "pdf":
        return extract_pdf_text(document.path, max_pages=max_pages)
    return extract_docx_text(document.path)


__all__ = [
    "detect_document_kind",
    "read_upload",
    "upload_workspace",
    "save_document",
    "render_pdf_pages",
    "extract_pdf_text",
    "extract_docx_text",
    "extract_document_text",
]

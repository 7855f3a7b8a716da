"""Domain models package."""

from .models import (
    Question,
    UploadedDocument,
    PageImage,
    ExtractionResult,
)
from .errors import (
    QuizImportError,
    NoFileAttached,
    UnsupportedMediaType,
    PayloadTooLarge,
    UnreadableDocument,
    VendorRequestFailed,
    VendorTimeout,
    MalformedModelOutput,
)

__all__ = [
    "Question",
    "UploadedDocument",
    "PageImage",
    "ExtractionResult",
    "QuizImportError",
    "NoFileAttached",
    "UnsupportedMediaType",
    "PayloadTooLarge",
    "UnreadableDocument",
    "VendorRequestFailed",
    "VendorTimeout",
    "MalformedModelOutput",
]

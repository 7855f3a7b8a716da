"""Error taxonomy for a single upload attempt.

Every error is terminal for the upload that raised it and carries the HTTP
status the API answers with.
"""

from typing import Any, Dict, Optional


class QuizImportError(Exception):
    """Base class for upload and extraction failures."""

    status_code = 500
    default_message = "Failed to process document"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON error body."""
        payload: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class NoFileAttached(QuizImportError):
    status_code = 400
    default_message = "No file uploaded"


class UnsupportedMediaType(QuizImportError):
    status_code = 415
    default_message = "Only PDF and DOCX documents are supported"


class PayloadTooLarge(QuizImportError):
    status_code = 413
    default_message = "File is too large"


class UnreadableDocument(QuizImportError):
    """The file claims to be a PDF or DOCX but cannot be opened."""

    status_code = 422
    default_message = "Could not read the uploaded document"


class VendorRequestFailed(QuizImportError):
    """Network, auth, rate-limit or request errors from the AI vendor."""

    default_message = "AI service request failed"


class VendorTimeout(QuizImportError):
    default_message = "AI service did not respond in time"


class MalformedModelOutput(QuizImportError):
    """The vendor reply held no usable, non-empty question array."""

    default_message = "Failed to parse AI response"

    def __init__(
        self,
        message: Optional[str] = None,
        ai_response: str = "",
        details: Any = None,
    ):
        super().__init__(message, details)
        self.ai_response = ai_response

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["aiResponse"] = self.ai_response
        return payload


__all__ = [
    "QuizImportError",
    "NoFileAttached",
    "UnsupportedMediaType",
    "PayloadTooLarge",
    "UnreadableDocument",
    "VendorRequestFailed",
    "VendorTimeout",
    "MalformedModelOutput",
]

"""Domain models for application core concepts.

Lightweight dataclasses representing quiz questions and uploaded documents.
No dependencies on Flask or vendor SDKs.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

OPTION_LETTERS = ("a", "b", "c", "d")

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)


@dataclass(frozen=True)
class Question:
    """One quiz item: text, four options and the correct option letter."""

    index: int
    question: str
    options: List[str]
    answer: str

    def with_index(self, index: int) -> "Question":
        return replace(self, index=index)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "index": self.index,
            "question": self.question,
            "options": list(self.options),
            "answer": self.answer,
        }


@dataclass
class UploadedDocument:
    """A validated upload held in memory until it is written to the workspace."""

    filename: str
    kind: str  # pdf | docx
    mime_type: str
    data: bytes
    path: Optional[Path] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class PageImage:
    """One rendered PDF page on disk."""

    page_number: int
    path: Path
    mime_type: str = "image/png"

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass
class ExtractionResult:
    """Validated questions plus the items that were dropped."""

    questions: List[Question]
    rejected: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        payload: Dict[str, Any] = {
            "questions": [q.to_dict() for q in self.questions],
        }
        if self.rejected:
            payload["rejected"] = self.rejected
        return payload


__all__ = [
    "OPTION_LETTERS",
    "PDF_MIME_TYPE",
    "DOCX_MIME_TYPE",
    "Question",
    "UploadedDocument",
    "PageImage",
    "ExtractionResult",
]

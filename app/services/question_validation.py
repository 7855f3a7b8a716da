"""Schema validation of raw model output against the Question shape.

Malformed items are dropped and reported rather than failing the whole batch;
the batch fails only when nothing survives.
"""
import logging
from numbers import Number
from typing import Any, Dict, List, Optional, Sequence, Tuple

from app.domain.errors import MalformedModelOutput
from app.domain.models import OPTION_LETTERS, ExtractionResult, Question

logger = logging.getLogger(__name__)

OPTION_COUNT = len(OPTION_LETTERS)


def normalize_answer(value: Any) -> Optional[str]:
    """Return the lowercase option letter, or None if ``value`` is not one."""
    if not isinstance(value, str):
        return None
    letter = value.strip().lower()
    if letter in OPTION_LETTERS:
        return letter
    return None


def _normalize_option(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, Number):
        return str(value)
    return None


def validate_question(item: Any) -> Tuple[Optional[Question], Optional[str]]:
    """
    Validate one raw item.

    Returns:
        (question, None) on success or (None, reason) when the item is rejected.
        The returned question keeps the model's index, or 0 when it had none.
    """
    if not isinstance(item, dict):
        return None, "item is not an object"

    text = item.get("question")
    if not isinstance(text, str) or not text.strip():
        return None, "missing question text"

    options = item.get("options")
    if not isinstance(options, list):
        return None, "options is not a list"
    if len(options) != OPTION_COUNT:
        return None, f"expected {OPTION_COUNT} options, got {len(options)}"
    normalized_options = [_normalize_option(o) for o in options]
    if any(o is None for o in normalized_options):
        return None, "options must be strings"

    answer = normalize_answer(item.get("answer"))
    if answer is None:
        return None, f"answer must be one of {', '.join(OPTION_LETTERS)}"

    index = item.get("index")
    if isinstance(index, bool) or not isinstance(index, int) or index < 1:
        index = 0

    return Question(
        index=index,
        question=text,
        options=normalized_options,
        answer=answer,
    ), None


def _has_dense_indices(questions: Sequence[Question]) -> bool:
    return [q.index for q in questions] == list(range(1, len(questions) + 1))


def reindex(questions: Sequence[Question]) -> List[Question]:
    """Assign ``index = position + 1`` to every question."""
    return [q.with_index(i + 1) for i, q in enumerate(questions)]


def validate_questions(raw_items: Sequence[Any], ai_response: str = "") -> ExtractionResult:
    """
    Validate every raw item and keep the well-formed ones.

    Indices are kept when the survivors already number 1..n in order,
    otherwise the whole list is re-indexed from position.

    Raises:
        MalformedModelOutput: when no item is valid.
    """
    questions: List[Question] = []
    rejected: List[Dict[str, Any]] = []

    for position, item in enumerate(raw_items):
        question, reason = validate_question(item)
        if question is None:
            rejected.append({"position": position, "reason": reason})
            continue
        questions.append(question)

    if rejected:
        logger.warning(
            "Dropped %d of %d malformed question(s) from model output",
            len(rejected),
            len(raw_items),
        )

    if not questions:
        raise MalformedModelOutput(
            "AI response contained no valid questions",
            ai_response=ai_response,
            details=rejected,
        )

    if not _has_dense_indices(questions):
        questions = reindex(questions)

    return ExtractionResult(questions=questions, rejected=rejected)


__all__ = ["normalize_answer", "validate_question", "validate_questions", "reindex"]

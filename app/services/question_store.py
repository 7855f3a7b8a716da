"""Reducer-style state for the question list shown in the browser.

Every function takes a state and returns a new one; nothing is mutated in
place. ``app/static/js/quiz.js`` mirrors these reducers for the in-page store
and calls ``/api/questions/reorder`` so both agree on re-indexing.

Upload lifecycle: idle -> loading -> ready | failed. A new upload restarts at
loading and replaces everything that came before.
"""

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from app.domain.models import Question

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class QuizState:
    status: str = STATUS_IDLE
    questions: Tuple[Question, ...] = ()
    loading: bool = False
    error: Optional[str] = None


def replace_all(state: QuizState, questions: Sequence[Question]) -> QuizState:
    """Overwrite the whole list. No shape validation."""
    return replace(state, questions=tuple(questions))


def reorder_questions(
    questions: Sequence[Question], old_position: int, new_position: int
) -> Tuple[Question, ...]:
    """
    Move the item at ``old_position`` to ``new_position`` and re-index.

    Positions are display positions (0-based), not the ``index`` field.
    Afterwards every question's index equals its position + 1.

    Raises:
        IndexError: either position is outside the list.
    """
    items = list(questions)
    size = len(items)
    for name, position in (("old", old_position), ("new", new_position)):
        if isinstance(position, bool) or not isinstance(position, int):
            raise IndexError(f"{name} position must be an integer")
        if not 0 <= position < size:
            raise IndexError(
                f"{name} position {position} out of range for {size} question(s)"
            )

    moved = items.pop(old_position)
    items.insert(new_position, moved)
    return tuple(q.with_index(i + 1) for i, q in enumerate(items))


def reorder(state: QuizState, old_position: int, new_position: int) -> QuizState:
    return replace(
        state,
        questions=reorder_questions(state.questions, old_position, new_position),
    )


def set_loading(state: QuizState, flag: bool) -> QuizState:
    return replace(state, loading=bool(flag))


def set_error(state: QuizState, message: Optional[str]) -> QuizState:
    return replace(state, error=message)


def begin_upload(state: QuizState) -> QuizState:
    """Enter loading; any earlier error is cleared."""
    state = set_error(set_loading(state, True), None)
    return replace(state, status=STATUS_LOADING)


def upload_succeeded(state: QuizState, questions: Sequence[Question]) -> QuizState:
    if not questions:
        raise ValueError("A ready state needs at least one question")
    state = replace_all(set_loading(state, False), questions)
    return replace(set_error(state, None), status=STATUS_READY)


def upload_failed(state: QuizState, message: str) -> QuizState:
    state = replace_all(set_loading(state, False), ())
    return replace(set_error(state, message), status=STATUS_FAILED)


__all__ = [
    "QuizState",
    "STATUS_IDLE",
    "STATUS_LOADING",
    "STATUS_READY",
    "STATUS_FAILED",
    "replace_all",
    "reorder_questions",
    "reorder",
    "set_loading",
    "set_error",
    "begin_upload",
    "upload_succeeded",
    "upload_failed",
]

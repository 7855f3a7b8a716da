"""View helpers for rendering the question list."""

from dataclasses import dataclass
from typing import List, Sequence

from app.domain.models import OPTION_LETTERS, Question

# Delay before MathJax re-typesets after a reorder. Not awaited.
TYPESET_DELAY_MS = 100


@dataclass
class OptionView:
    letter: str
    text: str
    is_correct: bool


@dataclass
class QuestionView:
    index: int
    position: int
    text: str
    options: List[OptionView]
    answer: str


def build_question_view(question: Question, position: int = 0) -> QuestionView:
    """Pair options with letters a-d and mark the one matching the answer."""
    answer = (question.answer or "").strip().lower()
    options = [
        OptionView(letter=letter, text=text, is_correct=(letter == answer))
        for letter, text in zip(OPTION_LETTERS, question.options)
    ]
    return QuestionView(
        index=question.index,
        position=position,
        text=question.question,
        options=options,
        answer=answer,
    )


def build_list_view(questions: Sequence[Question]) -> List[QuestionView]:
    return [build_question_view(q, position=i) for i, q in enumerate(questions)]


__all__ = [
    "TYPESET_DELAY_MS",
    "OptionView",
    "QuestionView",
    "build_question_view",
    "build_list_view",
]

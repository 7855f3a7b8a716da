"""Prompt templates for question extraction."""

SYSTEM_PROMPT = """You are an assistant that digitizes printed math quizzes.
The documents contain multiple-choice math questions written in English, Bengali, or a mix of both.
You return structured data only, never commentary."""

EXTRACTION_PROMPT = """Extract every multiple-choice question from the attached {source_label}.

## Instructions
1. Keep the original language of each question and option (English or Bengali). Do not translate.
2. Write every mathematical expression in LaTeX: inline math as $...$, displayed equations as $$...$$.
3. Escape every backslash for JSON (write \\\\frac, not \\frac).
4. Each question has exactly four options, in the order printed (a, b, c, d). Omit the option labels themselves.
5. "answer" is the letter of the correct option: a, b, c or d. If the document marks no answer, solve the question and choose the correct option.
6. Number the questions from 1 in the order they appear.
7. Output a JSON array only, following the schema below. No markdown, no explanation.

## Response JSON
[
    {{
        "index": 1,
        "question": "If $x + 2 = 5$, what is $x$?",
        "options": ["1", "2", "3", "4"],
        "answer": "c"
    }}
]
"""

DOCUMENT_TEXT_PROMPT = """
## Document text ({filename})
{document_text}
"""

SOURCE_LABELS = {
    "images": "page images",
    "pdf": "PDF document",
    "docx": "Word document",
}


def build_extraction_prompt(source: str) -> str:
    """Prompt for a payload of page images, a PDF file or a Word document."""
    label = SOURCE_LABELS.get(source, "document")
    return EXTRACTION_PROMPT.format(source_label=label)


def build_text_prompt(source: str, filename: str, document_text: str, max_chars: int = 80000) -> str:
    """Extraction prompt with the document text inlined, for vendors without file input."""
    return build_extraction_prompt(source) + DOCUMENT_TEXT_PROMPT.format(
        filename=filename,
        document_text=document_text[:max_chars],
    )

"""Best-effort extraction of a JSON question array from AI vendor text.

Vendors are asked for a bare JSON array but frequently wrap it in markdown
fences or prose. Each step below narrows the candidate text:

1. strip markdown fence markers
2. trim whitespace
3. take the first ``[`` through the last ``]`` (greedy)
4. double single backslashes that start LaTeX commands (``\\frac``, ``\\times``)
   so JSON does not decode them as form feeds or tabs
5. parse the slice, or the whole trimmed text when no slice exists
"""
import json
import logging
import re
from typing import Any, List, Optional

from app.domain.errors import MalformedModelOutput

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```[a-zA-Z0-9_-]*")
_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
# An escaped backslash pair, or a lone backslash before a letter run (not \uXXXX).
_LATEX_COMMAND_RE = re.compile(r"\\\\|\\(?!u[0-9a-fA-F]{4})([A-Za-z]{2,})")
# An escaped backslash pair, or a lone backslash that is not a JSON escape, e.g. "\(".
_INVALID_ESCAPE_RE = re.compile(r'\\\\|\\(?![\\"/bfnrtu])')

# \n, \r and \t followed by letters stay JSON escapes unless the run is one of these.
AMBIGUOUS_LATEX_COMMANDS = frozenset({
    "nabla", "ne", "neg", "neq", "newline", "nexists", "ngeq", "ni", "nleq",
    "nmid", "not", "notin", "nparallel", "nsubseteq", "nu",
    "rangle", "rbrace", "rceil", "rfloor", "rho", "right", "rightarrow",
    "rightleftharpoons", "rm",
    "tan", "tanh", "tau", "text", "textbf", "textit", "textrm", "tfrac",
    "therefore", "theta", "tilde", "times", "to", "top", "triangle",
})


def _double_latex_command(match: "re.Match") -> str:
    command = match.group(1)
    if command is None:
        return match.group(0)
    if command[0] in "nrt" and command not in AMBIGUOUS_LATEX_COMMANDS:
        return match.group(0)
    return "\\\\" + command


def _double_invalid_escape(match: "re.Match") -> str:
    if match.group(0) == "\\\\":
        return match.group(0)
    return "\\\\"


def escape_latex_commands(text: str) -> str:
    """Turn single-backslash LaTeX commands into escaped backslashes.

    ``\\frac`` in JSON text decodes to a form feed plus "rac"; doubling the
    backslash keeps the command. Already escaped pairs and ``\\uXXXX`` escapes
    are left alone.
    """
    return _LATEX_COMMAND_RE.sub(_double_latex_command, text)


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` fence markers and surrounding whitespace."""
    if not text:
        return ""
    return _FENCE_RE.sub("", text).strip()


def extract_json_candidate(text: str) -> Optional[str]:
    """Return the bracketed array slice of ``text`` or None if there is none."""
    cleaned = strip_code_fences(text)
    match = _ARRAY_RE.search(cleaned)
    if match:
        return match.group(0)
    return None


def _repair_json_text(text: str) -> str:
    text = _TRAILING_COMMA_RE.sub(r"\1", text)
    return _INVALID_ESCAPE_RE.sub(_double_invalid_escape, text)


def _loads(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        repaired = _repair_json_text(candidate)
        if repaired == candidate:
            raise
        logger.debug("Retrying JSON parse after repairing escapes/trailing commas")
        return json.loads(repaired)


def parse_model_output(text: str) -> List[Any]:
    """
    Parse vendor text into the raw list of question objects.

    No per-item schema validation happens here; see
    ``app.services.question_validation``.

    Raises:
        MalformedModelOutput: nothing parsed, the value is not a list, or it is empty.
    """
    raw_text = text or ""
    trimmed = strip_code_fences(raw_text)
    candidate = extract_json_candidate(raw_text)
    if candidate is None:
        candidate = trimmed
    candidate = escape_latex_commands(candidate)

    try:
        parsed = _loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedModelOutput(
            "Failed to parse AI response as JSON",
            ai_response=raw_text,
            details=str(e),
        )

    if not isinstance(parsed, list):
        raise MalformedModelOutput(
            "AI response is not a JSON array",
            ai_response=raw_text,
        )
    if not parsed:
        raise MalformedModelOutput(
            "AI response contained no questions",
            ai_response=raw_text,
        )
    return parsed


__all__ = [
    "strip_code_fences",
    "extract_json_candidate",
    "escape_latex_commands",
    "parse_model_output",
]

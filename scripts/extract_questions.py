"""
Extract quiz questions from a local PDF/DOCX without running the web server.

SAFETY: READ_ONLY (calls the configured AI vendor; writes only temp files)

Usage:
  python scripts/extract_questions.py quiz.pdf
  python scripts/extract_questions.py quiz.docx --vendor openai --out questions.json
  python scripts/extract_questions.py quiz.pdf --payload file --show-rejected
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from dotenv import load_dotenv

load_dotenv(ROOT_DIR / ".env")

from app.domain.errors import MalformedModelOutput, QuizImportError
from app.services.question_store import (
    QuizState,
    begin_upload,
    upload_failed,
    upload_succeeded,
)
from app.services.upload_service import extract_questions, load_document
from config import get_config, reset_config


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("path", help="PDF or DOCX file")
    parser.add_argument(
        "--vendor",
        choices=["deepseek", "openai", "gemini"],
        help="Override AI_VENDOR",
    )
    parser.add_argument(
        "--payload",
        choices=["images", "file"],
        help="Override AI_PAYLOAD_MODE",
    )
    parser.add_argument("--out", help="Write the JSON array here instead of stdout")
    parser.add_argument(
        "--show-rejected",
        action="store_true",
        help="Print dropped items to stderr",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.vendor:
        os.environ["AI_VENDOR"] = args.vendor
    if args.payload:
        os.environ["AI_PAYLOAD_MODE"] = args.payload
    reset_config()
    cfg = get_config()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else cfg.runtime.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    path = Path(args.path)
    if not path.is_file():
        print(f"[FAIL] File not found: {path}", file=sys.stderr)
        return 1

    state = begin_upload(QuizState())
    try:
        document = load_document(path)
        result = extract_questions(document, cfg)
    except MalformedModelOutput as exc:
        state = upload_failed(state, exc.message)
        print(f"[FAIL] {state.error}", file=sys.stderr)
        print(exc.ai_response, file=sys.stderr)
        return 1
    except (QuizImportError, ValueError) as exc:
        state = upload_failed(state, str(exc))
        print(f"[FAIL] {state.error}", file=sys.stderr)
        return 1

    state = upload_succeeded(state, result.questions)
    payload = json.dumps(
        [q.to_dict() for q in state.questions], ensure_ascii=False, indent=2
    )
    if args.out:
        Path(args.out).write_text(payload + "\n", encoding="utf-8")
        print(f"[OK] Wrote {len(state.questions)} question(s) to {args.out}")
    else:
        print(payload)

    if args.show_rejected and result.rejected:
        for item in result.rejected:
            print(
                f"[SKIP] position {item['position']}: {item['reason']}", file=sys.stderr
            )
    return 0


if __name__ == "__main__":
    sys.exit(main())

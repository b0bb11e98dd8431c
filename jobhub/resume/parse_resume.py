"""
Resume parser.

Reads a résumé file (plain text, PDF or Word), extracts its text and
asks the career assistant to turn it into a validated
:class:`~jobhub.ai.extract.ResumeProfile`.  Unlike job matching, a
résumé that cannot be parsed is a hard error: the caller gets a
:class:`~jobhub.ai.errors.ResumeParseError`.
"""

from __future__ import annotations

import json
import logging
import os

import docx  # type: ignore
import pdfplumber  # type: ignore

from ..ai.assistant import CareerAssistant
from ..ai.extract import ResumeProfile

logger = logging.getLogger(__name__)


def extract_text(file_path: str) -> str:
    """Extract text from a résumé file.

    ``.pdf`` files are read with pdfplumber, ``.docx`` files with
    python-docx and anything else is read as UTF‑8 text.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    ext = os.path.splitext(file_path)[1].lower()
    if ext == ".pdf":
        pages = []
        with pdfplumber.open(file_path) as pdf:
            for page in pdf.pages:
                pages.append(page.extract_text() or "")
        return "\n".join(pages)
    if ext == ".docx":
        document = docx.Document(file_path)
        return "\n".join(p.text for p in document.paragraphs)
    with open(file_path, "r", encoding="utf-8") as f:
        return f.read()


async def parse_resume_file(file_path: str, assistant: CareerAssistant) -> ResumeProfile:
    """Read ``file_path`` and parse it into a :class:`ResumeProfile`."""
    text = extract_text(file_path)
    logger.debug("Extracted %d characters from %s", len(text), file_path)
    return await assistant.parse_resume(text)


def save_resume_json(profile: ResumeProfile, out_path: str) -> None:
    """Serialize a profile to JSON using the camelCase keys the prompts expect."""
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(profile.model_dump(by_alias=True), f, indent=2)
    logger.info("Wrote résumé JSON to %s", out_path)


def load_resume_json(path: str) -> ResumeProfile:
    with open(path, "r", encoding="utf-8") as f:
        return ResumeProfile.model_validate(json.load(f))

"""
Resume parsing utilities.

This package extracts text from résumé files and converts it into a
structured, validated profile through the AI gateway.
"""

from .parse_resume import extract_text, load_resume_json, parse_resume_file, save_resume_json  # noqa: F401

"""
Text normalization - whitespace, boilerplate and abstract extraction
"""
from __future__ import annotations

import re


DEFAULT_WORD_BUDGET = 3500

_LEADING_LABELS = (
    re.compile(r"^abstract[:.\s-]*", re.IGNORECASE),
    re.compile(r"^summary[:.\s-]*", re.IGNORECASE),
)
_PAGE_NUMBER = re.compile(r"\b\d{1,3}\b")
_TABLE_CAPTION = re.compile(r"\btable\s*\d+.*?(?=\s[A-Z])", re.IGNORECASE)
_REFERENCES_TAIL = re.compile(r"references?.*$", re.IGNORECASE)
_ABSTRACT_SPAN = re.compile(
    r"abstract[:\s-]*(.*?)(?=(introduction|background|methodology|results|references))",
    re.IGNORECASE,
)


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run, newlines included, to one space"""
    return re.sub(r"\s+", " ", text or "").strip()


def normalize(raw: str) -> str:
    """
    Normalize a paragraph of raw text

    Args:
        raw: Text from a PDF page dump or an inline abstract field

    Returns:
        Single-line text without a leading "Abstract:"/"Summary:" label
    """
    text = collapse_whitespace(raw)
    for label in _LEADING_LABELS:
        text = label.sub("", text)
    return text.strip()


def clean_for_summary(raw: str) -> str:
    """Drop page numbers, table captions and the reference list"""
    text = collapse_whitespace(raw)
    text = _PAGE_NUMBER.sub("", text)
    text = _TABLE_CAPTION.sub("", text)
    text = _REFERENCES_TAIL.sub("", text)
    return collapse_whitespace(text)


def extract_abstract_span(text: str) -> str:
    match = _ABSTRACT_SPAN.search(text or "")
    if match and match.group(1).strip():
        return match.group(1).strip()
    return (text or "").strip()


def truncate_words(text: str, limit: int = DEFAULT_WORD_BUDGET) -> str:
    words = (text or "").split(" ")
    if len(words) <= limit:
        return text or ""
    return " ".join(words[:limit])


def prepare_for_model(raw: str, word_budget: int = DEFAULT_WORD_BUDGET) -> str:
    """Clean text and cut it down to what a hosted model will accept"""
    cleaned = clean_for_summary(raw)
    cleaned = extract_abstract_span(cleaned)
    return truncate_words(cleaned, limit=word_budget).strip()

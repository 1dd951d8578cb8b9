"""
Rule-based summary and TL;DR used when no model output is available
"""
from __future__ import annotations

import re
from typing import List

from .text_normalizer import collapse_whitespace


NO_SUMMARY = "No readable text available."
NO_TLDR = "No short takeaway available."

TLDR_MAX_WORDS = 50

PRIORITY_PATTERNS = [
    re.compile(
        r"\b(found|showed|demonstrated|concluded|results?|findings?|significant|improved|reduced|increased)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(conclusion|summary|takeaway|key\s+point|main\s+finding)\b", re.IGNORECASE),
    re.compile(r"\b(aim|objective|purpose|goal)\b", re.IGNORECASE),
]


def split_sentences(text: str) -> List[str]:
    return [part.strip() for part in re.split(r"(?<=[.!?])\s+", text or "") if part.strip()]


def heuristic_summary(text: str) -> str:
    """Join the first four substantial sentences"""
    if not text or not text.strip():
        return NO_SUMMARY

    parts = [part.strip() for part in re.split(r"[.!?]\s", text)]
    sentences = [part for part in parts if len(part) > 40]
    if not sentences:
        # Short inputs still get something readable.
        head = collapse_whitespace(text)[:300]
        if not re.search(r"\w", head):
            return NO_SUMMARY
        sentences = [head]
    summary = ". ".join(sentences[:4]).strip()
    return re.sub(r"[\s.]+$", "", summary) + "."


def heuristic_tldr(text: str) -> str:
    """
    Pick the single most informative sentence

    Results/findings sentences win over conclusion/summary sentences,
    which win over aim/objective sentences. Falls back to the first
    sentence, then to the first 150 characters.

    Returns:
        At most 50 words, ending with exactly one period
    """
    if not text or not text.strip():
        return NO_TLDR

    cleaned = collapse_whitespace(text)
    sentences = [sentence for sentence in split_sentences(cleaned) if len(sentence) > 20]

    best = ""
    for pattern in PRIORITY_PATTERNS:
        best = next((sentence for sentence in sentences if pattern.search(sentence)), "")
        if best:
            break

    if not best and sentences:
        best = sentences[0]
    if not best:
        best = cleaned[:150]

    return finalize_sentence(best, max_words=TLDR_MAX_WORDS)


def finalize_sentence(text: str, max_words: int = TLDR_MAX_WORDS) -> str:
    """Cap word count and force a single trailing period"""
    words = collapse_whitespace(text).split(" ")
    trimmed = " ".join(words[:max_words])
    trimmed = re.sub(r"[\s.,;:!?…]+$", "", trimmed).strip()
    if not trimmed:
        trimmed = "No short takeaway available"
    return trimmed + "."

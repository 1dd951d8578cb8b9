"""
Reference list scanner - rebuild bibliography entries from wrapped lines
"""
from __future__ import annotations

import re
from typing import List


SCAN_WINDOW_CHARS = 20000

REFERENCES_HEADER = re.compile(r"(references|bibliography)\s*[:\-]?\s*", re.IGNORECASE)
NEW_ENTRY = re.compile(r"^(\[\d+\]|\d+\.\s|•\s|-\s|[A-Z].+\(\d{4}\))")


def find_references_start(text: str) -> int:
    """Offset just past the references header, or -1"""
    match = REFERENCES_HEADER.search(text or "")
    return match.end() if match else -1


def is_new_entry(line: str) -> bool:
    return bool(NEW_ENTRY.match(line))


def scan_references(full_text: str, window: int = SCAN_WINDOW_CHARS) -> List[str]:
    """
    Extract reference entries following a References/Bibliography header

    Args:
        full_text: Document text with line breaks preserved
        window: Characters to read after the header

    Returns:
        Entries in document order; empty when no header is present
    """
    text = (full_text or "").replace("\r", "")
    start = find_references_start(text)
    if start < 0:
        return []

    lines = [line.strip() for line in text[start:start + window].split("\n")]
    entries: List[str] = []
    buffer = ""
    for line in lines:
        if not line:
            continue
        if not buffer:
            buffer = line
            continue
        if is_new_entry(line):
            entries.append(buffer.strip())
            buffer = line
        else:
            buffer += " " + line
    if buffer:
        entries.append(buffer.strip())

    return [re.sub(r"\s+", " ", entry) for entry in entries]

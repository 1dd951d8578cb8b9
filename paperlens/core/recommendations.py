"""
Recommendations extraction - cascade of list, section and sentence strategies
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional

from .inference_client import InferenceClient
from .models import RecommendationList


logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 12
DEDUP_KEY_LENGTH = 60
SECTION_CHAR_CAP = 2000
REGION_CHAR_CAP = 4000

NUMBERED_ITEM = re.compile(
    r"^[ \t]*(\d+)[.)][ \t]+"
    r"([^\n]+(?:\n(?![ \t]*(?:\d+[.)]|[a-z][.)]|[A-Z][A-Z \t]+$))[^\n]+)*)",
    re.MULTILINE,
)
LETTERED_ITEM = re.compile(
    r"^[ \t]*([a-z])[.)][ \t]+"
    r"([^\n]+(?:\n(?![ \t]*(?:[a-z][.)]|\d+[.)]))[^\n]+)*)",
    re.MULTILINE,
)
SECTION_NUMBERED_ITEM = re.compile(
    r"^[ \t]*(\d+)[.)][ \t]+([^\n]+(?:\n(?![ \t]*\d+[.)])[^\n]+)*)",
    re.MULTILINE,
)
RECOMMENDATION_SECTIONS = [
    ("practice", re.compile(r"recommendations?\s+for\s+practice[ \t]*[:\-]?[ \t]*\n", re.IGNORECASE)),
    ("research", re.compile(r"recommendations?\s+for\s+(?:future\s+)?research[ \t]*[:\-]?[ \t]*\n", re.IGNORECASE)),
]
SECTION_HEADING = re.compile(
    r"^[ \t]*(?:\d+(?:\.\d+)*\.?[ \t]*)?"
    r"(recommendations?|suggestions?|conclusions?|summary|references?|bibliography|"
    r"appendix|acknowledge?ments?|chapter[ \t]+\w+)\b[^\n.]{0,60}$",
    re.IGNORECASE | re.MULTILINE,
)
REGION_HEADING = re.compile(
    r"^[ \t]*(?:\d+(?:\.\d+)*\.?[ \t]*)?"
    r"(recommendations?|suggestions?|future\s+(?:work|research|directions))\b[^\n.]{0,60}$",
    re.IGNORECASE | re.MULTILINE,
)
REGION_END = re.compile(
    r"^[ \t]*(?:\d+(?:\.\d+)*\.?[ \t]*)?(references?|bibliography|appendix|acknowledge?ments?)\b[^\n.]{0,40}$",
    re.IGNORECASE | re.MULTILINE,
)
REFERENCE_HEADING = re.compile(r"^[ \t]*(references|bibliography)[ \t]*:?[ \t]*$", re.IGNORECASE | re.MULTILINE)
INLINE_MARKER = re.compile(r"(\S+)\s+(?=(?:\d{1,2}|[a-z])[.)]\s+[A-Z])")
SENTENCE_BREAK = re.compile(
    r"(?<=[.!?])(?<!\bFig\.)(?<!\bFigs\.)(?<!\bEq\.)(?<!\bEqs\.)(?<!\bNo\.)(?<!\bal\.)(?<!e\.g\.)(?<!i\.e\.)"
    r"\s+(?=[A-Z0-9\"'(])"
)
FIGURE_WORDS = {"fig", "figs", "figure", "figures", "table", "tables", "eq", "eqs", "equation", "section", "chapter"}
LIST_HEADING_WORDS = {"recommendation", "recommendations", "suggestion", "suggestions", "practice", "research", "work"}

GENERAL_LANGUAGE = re.compile(
    r"\b(should|recommend\w*|suggest\w*|need to|needs to|would benefit)\b|^to\s|^the study should",
    re.IGNORECASE,
)
LETTERED_LANGUAGE = re.compile(
    r"\b(should|would be interesting|longitudinal study|qualitative study|research on|"
    r"could be conducted|recommend\w*)\b",
    re.IGNORECASE,
)
SECTION_LANGUAGE = re.compile(r"\b(should|need\w*|would be|recommend\w*|suggest\w*)\b", re.IGNORECASE)
STRONG_LANGUAGE = re.compile(
    r"\b(should|recommend\w*|suggest(?:s|ed)? that|need to|needs to|would benefit|"
    r"future (?:research|studies|work)|further (?:research|stud(?:y|ies))|more studies|"
    r"could be conducted|it is (?:advisable|better))\b",
    re.IGNORECASE,
)
INCLUSION = re.compile(
    r"\b(should|recommend\w*|suggest\w*|need to|needs to|would benefit|better|improve\w*|add|"
    r"consider\w*|investigat\w*|examin\w*|more studies|further stud(?:y|ies)|further research|"
    r"future research|research on|would be interesting|could be conducted)\b"
    r"|^to\s|^the study\s",
    re.IGNORECASE,
)
EXCLUSIONS = [
    re.compile(r"^To\s+address\s+the\s+(?:issue|following\s+questions?)", re.IGNORECASE),
    re.compile(r"^Future\s+Research\s+\d+", re.IGNORECASE),
    re.compile(r"^CONCLUSION\s+\d+", re.IGNORECASE),
    re.compile(r"^CHAPTER\s+\d+", re.IGNORECASE),
    re.compile(r"^[A-Z\s]{10,}$"),
]

AI_PROMPT = (
    "Extract ALL numbered recommendations from this text.\n"
    'Look for sections titled "Recommendations for Practice" and "Recommendations for Research".\n'
    "Extract each numbered item (1., 2., 3., etc.) and any lettered sub-items (a., b., c.).\n"
    "Return each recommendation as a complete sentence.\n\n"
    "Text: {text}\n\n"
    "Extracted recommendations:"
)


class RecommendationExtractor:
    """Extract recommendation sentences from research text"""

    def __init__(self, client: Optional[InferenceClient] = None, model_id: str = "facebook/bart-large-cnn"):
        """
        Initialize extractor

        Args:
            client: Inference client used as the last strategy; optional
            model_id: Model asked to list recommendations
        """
        self.client = client
        self.model_id = model_id

    def extract(self, text: str) -> RecommendationList:
        """
        Run every strategy in priority order

        Args:
            text: Full paper text, line breaks preserved where possible

        Returns:
            Validated, deduplicated list of at most 12 recommendations
        """
        prepared = self.prepare_text(text)
        if not prepared:
            return RecommendationList()

        candidates: List[str] = self._numbered_items(prepared)
        logger.debug("Numbered strategy found %d candidates", len(candidates))

        if len(candidates) < 5:
            candidates.extend(self._lettered_items(prepared))
        if len(candidates) < 3:
            candidates.extend(self._section_items(prepared))
        if len(candidates) < 5:
            candidates.extend(self._sentence_items(prepared, whole_text=not candidates))
        if not candidates:
            candidates.extend(self._model_items(prepared))

        final = self.finalize(candidates)
        logger.info("Extracted %d recommendations from %d candidates", len(final), len(candidates))
        return final

    def render(self, text: str) -> str:
        return self.extract(text).render()

    @staticmethod
    def prepare_text(text: str) -> str:
        """Normalize line breaks, drop page numbers and the reference list"""
        normalized = (text or "").replace("\r\n", "\n").replace("\r", "\n")
        normalized = re.sub(r"[ \t\f\v]+", " ", normalized)
        normalized = re.sub(r"^ ?\d+ ?$", "", normalized, flags=re.MULTILINE)
        normalized = re.sub(
            r"(Recommendations for Practice|Recommendations for Research) \d+\b",
            r"\1",
            normalized,
            flags=re.IGNORECASE,
        )
        normalized = re.sub(r"\n\s*\n(\s*\n)+", "\n\n", normalized)

        references = REFERENCE_HEADING.search(normalized)
        if references and references.start() > 0:
            normalized = normalized[: references.start()]

        if "\n" not in normalized.strip():
            # Flattened text: restore breaks before inline list markers.
            normalized = INLINE_MARKER.sub(_marker_break, normalized)
        return normalized.strip()

    def _numbered_items(self, text: str) -> List[str]:
        items = []
        for match in NUMBERED_ITEM.finditer(text):
            item = self._flatten(match.group(2))
            if not 20 <= len(item) <= 400:
                continue
            if GENERAL_LANGUAGE.search(item):
                items.append(self._finish(item))
        return items

    def _lettered_items(self, text: str) -> List[str]:
        items = []
        for match in LETTERED_ITEM.finditer(text):
            item = self._flatten(match.group(2))
            if 20 < len(item) < 300 and LETTERED_LANGUAGE.search(item):
                items.append(self._finish(item))
        return items

    def _section_items(self, text: str) -> List[str]:
        items = []
        for name, pattern in RECOMMENDATION_SECTIONS:
            match = pattern.search(text)
            if not match:
                continue
            logger.debug("Found recommendations for %s section", name)
            remaining = text[match.end():]
            heading = SECTION_HEADING.search(remaining)
            section = remaining[: heading.start()] if heading else remaining[:SECTION_CHAR_CAP]
            section = section[:SECTION_CHAR_CAP]

            for item_match in SECTION_NUMBERED_ITEM.finditer(section):
                item = self._flatten(item_match.group(2))
                if not 20 < len(item) < 400:
                    continue
                if re.fullmatch(r"[A-Z\s]{10,}", item):
                    continue
                if SECTION_LANGUAGE.search(item):
                    items.append(self._finish(item))
        return items

    def _sentence_items(self, text: str, whole_text: bool) -> List[str]:
        region = self.recommendation_region(text)
        if region is None:
            if not whole_text:
                return []
            region = text

        items = []
        flat = self._flatten(region)
        for sentence in SENTENCE_BREAK.split(flat):
            sentence = re.sub(r"^(?:\d+|[a-z])[.)]\s+", "", sentence.strip())
            if not 25 < len(sentence) < 350:
                continue
            if STRONG_LANGUAGE.search(sentence):
                items.append(self._finish(sentence))
        return items

    @staticmethod
    def recommendation_region(text: str) -> Optional[str]:
        """Text under a recommendations/future-work heading, if any"""
        heading = REGION_HEADING.search(text)
        if not heading:
            return None
        remaining = text[heading.end():]
        end = REGION_END.search(remaining)
        region = remaining[: end.start()] if end else remaining
        return region[:REGION_CHAR_CAP]

    def _model_items(self, text: str) -> List[str]:
        if self.client is None or not self.client.has_token or len(text) <= 200:
            return []

        outcome = self.client.call_model(
            self.model_id,
            AI_PROMPT.format(text=text[:3000]),
            parameters={"max_length": 600, "min_length": 100, "do_sample": False, "temperature": 0.2},
            max_attempts=2,
            timeout_ms=30000,
        )
        if not outcome.ok:
            logger.warning("Model recommendation extraction failed: %s", outcome.reason)
            return []
        return self.parse_model_lines(outcome.text)[:10]

    @classmethod
    def parse_model_lines(cls, raw: str) -> List[str]:
        lines = []
        for line in (raw or "").splitlines():
            line = line.strip()
            if len(line) <= 20:
                continue
            line = re.sub(r"^\d+[.)]\s*", "", line)
            line = re.sub(r"^[a-z][.)]\s*", "", line, flags=re.IGNORECASE)
            line = re.sub(r"^[•\-*]\s*", "", line).strip()
            line = cls._finish(line)
            if 20 < len(line) < 300:
                lines.append(line)
        return lines

    @classmethod
    def finalize(cls, candidates: List[str]) -> RecommendationList:
        """Validate, deduplicate and cap the candidate list"""
        final: List[str] = []
        seen = set()
        for candidate in candidates:
            trimmed = (candidate or "").strip()
            if len(trimmed) < 25:
                continue
            if any(pattern.search(trimmed) for pattern in EXCLUSIONS):
                logger.debug("Excluded candidate: %s", trimmed[:60])
                continue
            if not INCLUSION.search(trimmed):
                continue

            key = cls.dedup_key(trimmed)
            if key in seen:
                continue
            seen.add(key)
            final.append(cls._finish(trimmed))
            if len(final) >= MAX_RECOMMENDATIONS:
                break
        return RecommendationList(items=final)

    @staticmethod
    def dedup_key(text: str) -> str:
        key = re.sub(r"[^\w\s]", "", text.lower())
        key = re.sub(r"\s+", " ", key).strip()
        return key[:DEDUP_KEY_LENGTH]

    @staticmethod
    def _flatten(text: str) -> str:
        return re.sub(r"\s+", " ", text or "").strip()

    @staticmethod
    def _finish(item: str) -> str:
        item = item.strip()
        if not item:
            return item
        if not re.search(r"[.!?]$", item):
            item += "."
        if not re.match(r"[A-Z]", item):
            item = item[0].upper() + item[1:]
        return item


def _marker_break(match: re.Match) -> str:
    """Break before a list marker that ends a sentence or a heading, not a figure reference"""
    word = match.group(1)
    bare = word.rstrip(".!?:").lower()
    if bare in FIGURE_WORDS:
        return match.group(0)
    if word[-1] in ".!?:" or bare in LIST_HEADING_WORDS:
        return word + "\n"
    return match.group(0)

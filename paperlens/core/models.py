"""
Data models for paperlens
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class PaperlensError(RuntimeError):
    """Base error for paperlens."""


class ExtractionMode(str, Enum):
    """Tool modes understood by the research toolkit"""
    TLDR = "tldr"
    SUMMARY = "summary"
    METHODS = "methods"
    RECOMMENDATIONS = "recommendations"
    REFSCAN = "refscan"
    CITATIONS = "citations"

    @classmethod
    def parse(cls, value: Union[str, "ExtractionMode"]) -> "ExtractionMode":
        """Resolve a mode name, accepting the legacy ``self-cite`` alias"""
        if isinstance(value, cls):
            return value
        name = str(value or "").strip().lower()
        if name == "self-cite":
            return cls.CITATIONS
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown mode: {value!r}") from None


@dataclass(frozen=True)
class SourceDocument:
    """Raw text of one request plus its whitespace-normalized form"""
    raw_text: str
    normalized_text: str

    @classmethod
    def from_text(cls, raw: str) -> "SourceDocument":
        from .text_normalizer import normalize

        raw = raw or ""
        return cls(raw_text=raw, normalized_text=normalize(raw))

    @property
    def is_empty(self) -> bool:
        return not self.normalized_text


class PaperMeta(BaseModel):
    """Bibliographic metadata supplied for citation mode"""
    title: str = ""
    author: str = ""
    year: str = ""
    categories: List[str] = Field(default_factory=list)
    genre_tags: List[str] = Field(default_factory=list, alias="genreTags")

    model_config = {"populate_by_name": True, "coerce_numbers_to_str": True}

    @field_validator("title", "author", "year", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("categories", "genre_tags", mode="before")
    @classmethod
    def _none_as_list(cls, value):
        return [] if value is None else value


@dataclass
class ExtractionRequest:
    """A single tool invocation"""
    mode: ExtractionMode
    source_document: SourceDocument
    metadata: Optional[PaperMeta] = None


@dataclass(frozen=True)
class InferenceSuccess:
    text: str
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class InferenceFailure:
    reason: str
    kind: str = "other"
    ok: bool = field(default=False, init=False)


InferenceOutcome = Union[InferenceSuccess, InferenceFailure]


@dataclass(frozen=True)
class AuthorName:
    """One parsed author; ``last`` is never empty"""
    first: str = ""
    middle: str = ""
    last: str = "Author"

    def __post_init__(self):
        if not self.last:
            object.__setattr__(self, "last", "Author")

    @property
    def initials(self) -> str:
        names = [self.first, *self.middle.split()]
        return " ".join(f"{name[0].upper()}." for name in names if name)

    def __str__(self):
        return " ".join(part for part in (self.first, self.middle, self.last) if part)


@dataclass(frozen=True)
class CitationSet:
    apa: str
    ieee: str
    bibtex: str
    key: str

    def to_dict(self) -> Dict[str, str]:
        return {"apa": self.apa, "ieee": self.ieee, "bibtex": self.bibtex}


CHECKLIST_LABELS = {
    "approach": "Research Approach",
    "design": "Research Design",
    "environment": "Research Environment",
    "sample": "Participants/Sample",
    "instruments": "Instruments/Tools",
    "software": "Software/Platform Used",
    "analysis": "Data Analysis",
    "outcomes": "Primary Outcomes",
}


@dataclass
class MethodsChecklist:
    """Matched method terms per category, in checklist order"""
    categories: Dict[str, List[str]] = field(default_factory=dict)

    def add(self, category: str, terms: List[str]) -> None:
        if category not in CHECKLIST_LABELS:
            raise KeyError(category)
        terms = [term for term in terms if term]
        if terms:
            self.categories[category] = terms

    def get(self, category: str) -> List[str]:
        return list(self.categories.get(category, []))

    def __contains__(self, category: str) -> bool:
        return category in self.categories

    def render(self) -> str:
        """Render as a bulleted checklist, skipping empty categories"""
        lines = ["Methods Checklist"]
        for category, label in CHECKLIST_LABELS.items():
            terms = self.categories.get(category)
            if not terms:
                continue
            if category == "outcomes":
                lines.append(f"• {label}: Identify variables like {', '.join(terms)}.")
            else:
                lines.append(f"• {label}: {', '.join(terms)}")
        return "\n".join(lines)


@dataclass
class RecommendationList:
    items: List[str] = field(default_factory=list)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def render(self) -> str:
        """Render as a numbered markdown list with a count preamble"""
        output = "**Research Recommendations**\n\n"
        count = len(self.items)
        if count == 0:
            output += "No specific recommendations were identified in the text.\n\n"
            output += "This could be because:\n"
            output += "• The study may not include explicit recommendations\n"
            output += "• Recommendations are embedded in discussion or conclusion sections\n"
            output += "• The text format may not follow standard recommendation patterns\n"
            return output

        if count == 1:
            output += "Based on analysis of the research content, 1 recommendation was identified:\n\n"
        else:
            output += (
                f"Based on analysis of the research content, {count} recommendations were identified:\n\n"
            )
        for index, item in enumerate(self.items, start=1):
            output += f"{index}. {item}\n\n"
        return output


@dataclass
class ToolResult:
    """Uniform result of one toolkit mode"""
    mode: ExtractionMode
    text: str
    items: List[str] = field(default_factory=list)
    success: bool = True
    model: Optional[str] = None
    citations: Optional[CitationSet] = None
    references: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"mode": self.mode.value, "ok": self.success, "text": self.text}
        if self.mode in (ExtractionMode.RECOMMENDATIONS, ExtractionMode.REFSCAN):
            payload["count"] = self.count
            payload["items"] = list(self.items)
        if self.model:
            payload["model"] = self.model
        if self.citations is not None:
            payload["citations"] = self.citations.to_dict()
        if self.references:
            payload["references"] = list(self.references)
        return payload

    def __str__(self):
        return self.text

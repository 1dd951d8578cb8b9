"""
Research toolkit - dispatch tool modes over a source document
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from .citation_formatter import format_citations, render_citations
from .config import Settings
from .document_store import LocalDocumentStore
from .heuristics import finalize_sentence
from .inference_client import InferenceClient
from .methods_checklist import MethodsExtractor
from .models import (
    ExtractionMode,
    ExtractionRequest,
    PaperlensError,
    PaperMeta,
    SourceDocument,
    ToolResult,
)
from .recommendations import RecommendationExtractor
from .reference_scanner import scan_references
from .summarizer import Summarizer


logger = logging.getLogger(__name__)

TLDR_LABEL = "**Short Takeaway:**"


class ConfigurationError(PaperlensError):
    """Raised when the toolkit is wired incorrectly."""


class ToolPayload(BaseModel):
    """Request body accepted by ``ResearchToolkit.run_payload``"""
    mode: str
    abstract: str = ""
    text: str = ""
    file_path: Optional[str] = Field(default=None, alias="filePath")
    meta: PaperMeta = Field(default_factory=PaperMeta)

    model_config = {"populate_by_name": True, "coerce_numbers_to_str": True}

    @field_validator("abstract", "text", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("meta", mode="before")
    @classmethod
    def _none_as_default_meta(cls, value):
        return {} if value is None else value


class ResearchToolkit:
    """Run one extraction mode per request"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[InferenceClient] = None,
        store: Optional[LocalDocumentStore] = None,
    ):
        """
        Initialize toolkit

        Args:
            settings: Runtime settings; loaded from the environment when omitted
            client: Shared inference client, built once per process
            store: Document store used to resolve ``filePath``
        """
        self.settings = settings or (client.settings if client else Settings())
        self.client = client or InferenceClient(self.settings)
        self.store = store or LocalDocumentStore(root=self.settings.upload_root)

        self.summarizer = Summarizer(self.client, self.settings)
        self.methods = MethodsExtractor()
        self.recommendations = RecommendationExtractor(self.client, model_id=self.settings.summary_model)

        self._handlers: Dict[ExtractionMode, Callable[[ExtractionRequest], ToolResult]] = {
            ExtractionMode.TLDR: self._run_tldr,
            ExtractionMode.SUMMARY: self._run_summary,
            ExtractionMode.METHODS: self._run_methods,
            ExtractionMode.RECOMMENDATIONS: self._run_recommendations,
            ExtractionMode.REFSCAN: self._run_refscan,
            ExtractionMode.CITATIONS: self._run_citations,
        }
        missing = set(ExtractionMode) - set(self._handlers)
        if missing:
            raise ConfigurationError(f"No handler for modes: {sorted(m.value for m in missing)}")

    def run(self, request: ExtractionRequest) -> ToolResult:
        """
        Run a single mode

        Args:
            request: Mode, source document and optional citation metadata

        Returns:
            ToolResult; content problems never raise
        """
        logger.debug("Running %s on %d chars", request.mode.value, len(request.source_document.raw_text))
        return self._handlers[request.mode](request)

    def run_payload(self, payload: Mapping[str, Any]) -> ToolResult:
        """
        Run a mode from a JSON-style request body

        Args:
            payload: {"mode", "abstract", "text", "filePath", "meta"}

        Raises:
            ValueError: Unknown mode
            pydantic.ValidationError: Malformed body
        """
        body = ToolPayload.model_validate(dict(payload))
        mode = ExtractionMode.parse(body.mode)

        document_text = self.store.read_document_text(body.file_path) or ""
        inline = body.abstract or body.text
        request = ExtractionRequest(
            mode=mode,
            source_document=SourceDocument.from_text(self.select_source(mode, inline, document_text)),
            metadata=body.meta if mode is ExtractionMode.CITATIONS else None,
        )
        return self.run(request)

    @staticmethod
    def select_source(mode: ExtractionMode, inline: str, document_text: str) -> str:
        """Pick the text a mode works on; document text wins where it helps"""
        inline = (inline or "").strip()
        document_text = (document_text or "").strip()
        if mode is ExtractionMode.SUMMARY:
            return "\n".join(part for part in (inline, document_text) if part)
        if mode is ExtractionMode.METHODS:
            return inline or document_text
        if mode is ExtractionMode.CITATIONS:
            return document_text
        return document_text or inline

    def close(self) -> None:
        self.client.close()

    def _run_tldr(self, request: ExtractionRequest) -> ToolResult:
        document = request.source_document
        if document.is_empty:
            return ToolResult(
                mode=request.mode,
                text=f"{TLDR_LABEL} No content available for summary.",
                success=False,
            )
        tldr = finalize_sentence(self.summarizer.tldr(document.normalized_text))
        return ToolResult(mode=request.mode, text=f"{TLDR_LABEL} {tldr}")

    def _run_summary(self, request: ExtractionRequest) -> ToolResult:
        document = request.source_document
        if document.is_empty:
            return ToolResult(
                mode=request.mode,
                text="No text or readable PDF content provided.",
                success=False,
            )
        summary, model = self.summarizer.summarize(document.raw_text)
        return ToolResult(mode=request.mode, text=summary, model=model)

    def _run_methods(self, request: ExtractionRequest) -> ToolResult:
        document = request.source_document
        if document.is_empty:
            return ToolResult(
                mode=request.mode,
                text="Methods Checklist\nNo readable text available.",
                success=False,
            )
        checklist = self.methods.extract(document.normalized_text)
        return ToolResult(
            mode=request.mode,
            text=checklist.render(),
            success=bool(checklist.categories),
        )

    def _run_recommendations(self, request: ExtractionRequest) -> ToolResult:
        document = request.source_document
        if document.is_empty:
            return ToolResult(
                mode=request.mode,
                text="**Research Recommendations**\n\nNo readable text content available for analysis.",
                success=False,
            )
        try:
            recommendations = self.recommendations.extract(document.raw_text)
        except Exception:
            logger.exception("Recommendation extraction failed")
            return ToolResult(
                mode=request.mode,
                text=(
                    "**Research Recommendations**\n\n"
                    "An error occurred while extracting recommendations. Please try again."
                ),
                success=False,
            )
        return ToolResult(
            mode=request.mode,
            text=recommendations.render(),
            items=list(recommendations.items),
            success=len(recommendations) > 0,
        )

    def _run_refscan(self, request: ExtractionRequest) -> ToolResult:
        references = scan_references(request.source_document.raw_text)
        if references:
            text = "\n".join(f"{index}. {entry}" for index, entry in enumerate(references, start=1))
        else:
            text = "No references or bibliography section was found."
        return ToolResult(mode=request.mode, text=text, items=references, success=bool(references))

    def _run_citations(self, request: ExtractionRequest) -> ToolResult:
        meta = request.metadata or PaperMeta()
        citations = format_citations(meta.author, meta.title, meta.year)
        return ToolResult(
            mode=request.mode,
            text=render_citations(citations),
            citations=citations,
            references=scan_references(request.source_document.raw_text),
        )

"""
paperlens - research paper insight tools

This is the main public API module.
"""

from .core.citation_formatter import format_citations
from .core.config import Settings
from .core.heuristics import heuristic_summary, heuristic_tldr
from .core.inference_client import InferenceClient
from .core.models import ExtractionMode, ExtractionRequest, SourceDocument, ToolResult
from .core.toolkit import ResearchToolkit

__version__ = "0.1.0"
__all__ = [
    "ExtractionMode",
    "ExtractionRequest",
    "InferenceClient",
    "ResearchToolkit",
    "Settings",
    "SourceDocument",
    "ToolResult",
    "format_citations",
    "heuristic_summary",
    "heuristic_tldr",
]

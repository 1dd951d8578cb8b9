"""
paperlens - structured research metadata from papers

This package extracts TL;DR takeaways, summaries, methods checklists,
recommendations, reference lists and citation strings from research
paper text, using a hosted inference model when one is configured and
rule-based heuristics otherwise.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .models import ExtractionMode, ExtractionRequest, SourceDocument, ToolResult
from .toolkit import ResearchToolkit

__all__ = [
    "ExtractionMode",
    "ExtractionRequest",
    "ResearchToolkit",
    "SourceDocument",
    "ToolResult",
]

"""
Model-backed TL;DR and abstract summary with heuristic fallback
"""
from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from .config import Settings
from .heuristics import NO_TLDR, finalize_sentence, heuristic_summary, heuristic_tldr
from .inference_client import InferenceClient
from .text_normalizer import collapse_whitespace, normalize, prepare_for_model


logger = logging.getLogger(__name__)

HEURISTIC_MODEL = "heuristic"
MIN_MODEL_INPUT_CHARS = 800
MODEL_TLDR_MAX_WORDS = 45

_MODEL_PREFIX = re.compile(r"^(TLDR|TL;DR|Summary|In summary|The study)\s*[:.-]*\s*", re.IGNORECASE)


class Summarizer:
    """Produce TL;DR and summary text, preferring the hosted model"""

    def __init__(self, client: InferenceClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or client.settings

    def tldr(self, text: str) -> str:
        """
        Short takeaway of at most 50 words

        Args:
            text: Document or abstract text

        Returns:
            One sentence ending in a period
        """
        base = collapse_whitespace(text)
        if not base:
            return NO_TLDR
        if not self.client.has_token:
            return heuristic_tldr(base)

        prompt = (
            "Provide a very concise one-sentence TL;DR (under 40 words) capturing the main "
            "finding or purpose. Be direct and avoid fluff:\n\n"
            f"{base[:2000]}"
        )
        outcome = self.client.call_model(
            self.settings.summary_model,
            prompt,
            parameters={
                "min_length": 10,
                "max_length": 40,
                "do_sample": False,
                "temperature": 0.3,
                "repetition_penalty": 1.2,
            },
            max_attempts=2,
            timeout_ms=self.settings.tldr_timeout_ms,
        )
        if not outcome.ok:
            logger.warning("TL;DR model failed, using heuristic: %s", outcome.reason)
            return heuristic_tldr(base)

        cleaned = self._clean_model_tldr(outcome.text)
        if not cleaned:
            return heuristic_tldr(base)
        return cleaned

    def summarize(self, text: str) -> Tuple[str, str]:
        """
        Paragraph-length abstract

        Returns:
            (summary, model name or "heuristic")
        """
        cleaned = prepare_for_model(text, word_budget=self.settings.max_input_words)
        if len(cleaned) < MIN_MODEL_INPUT_CHARS or not self.client.has_token:
            return heuristic_summary(cleaned), HEURISTIC_MODEL

        model = self.settings.summary_model
        outcome = self.client.call_model(
            model,
            cleaned,
            parameters={"min_length": 150, "max_length": 220, "temperature": 0.4, "do_sample": False},
            timeout_ms=self.settings.summary_timeout_ms,
        )
        generated = outcome.text if outcome.ok else ""

        if len(generated) < 100:
            prompt = (
                "Summarize the following academic text into a clear, single-paragraph abstract "
                "(150-220 words) using formal academic English.\n\n"
                f"{cleaned}"
            )
            outcome = self.client.call_model(
                model,
                prompt,
                parameters={"min_length": 150, "max_length": 220, "do_sample": False},
            )
            generated = outcome.text if outcome.ok else ""

        summary = normalize(generated)
        if len(summary) < 80:
            model = self.settings.fallback_summary_model
            outcome = self.client.call_model(
                model,
                "summarize: Write a single-paragraph academic abstract (150-220 words) "
                f"using formal tone.\n\n{cleaned}",
                parameters={"max_new_tokens": 240, "num_beams": 4, "do_sample": False},
            )
            summary = normalize(outcome.text) if outcome.ok else ""

        if len(summary) < 50:
            logger.warning("Model summaries too short, using heuristic summary")
            return heuristic_summary(cleaned), HEURISTIC_MODEL

        logger.info("Summary generated with %s", model)
        return summary, model

    @staticmethod
    def _clean_model_tldr(raw: str) -> str:
        text = (raw or "").strip()
        if not text:
            return ""
        text = _MODEL_PREFIX.sub("", text)
        text = re.sub(r"\s*…+\s*$", "", text)
        if not text.strip(" .…"):
            return ""
        return finalize_sentence(text, max_words=MODEL_TLDR_MAX_WORDS)

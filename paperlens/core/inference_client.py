"""
Inference provider client - POST with retry, backoff and timeout
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests
from tenacity import (
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from .config import Settings
from .models import InferenceFailure, InferenceOutcome, InferenceSuccess


logger = logging.getLogger(__name__)

RETRY_STATUS_CODES = {429, 503}
INITIAL_BACKOFF_SECONDS = 0.8
BACKOFF_MULTIPLIER = 1.6


class InferenceClient:
    """Call a hosted summarization/generation model over HTTP"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[Any] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize client

        Args:
            settings: Endpoint and default token
            session: Object with a requests-compatible ``post``; a new
                ``requests.Session`` is created when omitted
            sleep: Backoff sleep function, replaceable in tests
        """
        self.settings = settings or Settings()
        self.session = session if session is not None else requests.Session()
        self._owns_session = session is None
        self._sleep = sleep

    def __enter__(self) -> "InferenceClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    @property
    def has_token(self) -> bool:
        return self.settings.has_token

    def call_model(
        self,
        model_id: str,
        inputs: str,
        parameters: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
        max_attempts: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> InferenceOutcome:
        """
        Run one inference request

        Args:
            model_id: Provider model identifier, e.g. "facebook/bart-large-cnn"
            inputs: Prompt or document text
            parameters: Generation parameters forwarded verbatim
            token: Bearer token; defaults to the configured token
            max_attempts: Attempts before giving up
            timeout_ms: Per-attempt timeout in milliseconds

        Returns:
            InferenceSuccess with trimmed text, or InferenceFailure.
            Never raises.
        """
        token = token or self.settings.hf_token
        if not token:
            return InferenceFailure("No inference token configured.", kind="provider")

        attempts = max(1, int(max_attempts or self.settings.max_attempts))
        timeout = (timeout_ms or self.settings.timeout_ms) / 1000.0
        url = f"{self.settings.inference_endpoint.rstrip('/')}/{model_id}"
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        payload = {"inputs": inputs, "parameters": parameters or {}}

        retrying = Retrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=INITIAL_BACKOFF_SECONDS, exp_base=BACKOFF_MULTIPLIER),
            retry=retry_if_exception_type(requests.RequestException) | retry_if_result(_is_busy),
            sleep=self._sleep,
            retry_error_callback=_last_failure,
        )
        return retrying(self._post_once, model_id, url, payload, headers, timeout)

    def _post_once(
        self,
        model_id: str,
        url: str,
        payload: Dict[str, Any],
        headers: Dict[str, str],
        timeout: float,
    ) -> InferenceOutcome:
        logger.debug("POST %s", model_id)
        try:
            response = self.session.post(
                url,
                params={"wait_for_model": "true"},
                json=payload,
                headers=headers,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Inference network error on %s: %s", model_id, exc)
            raise

        if response.status_code in RETRY_STATUS_CODES:
            logger.warning("Inference %s returned %d", model_id, response.status_code)
            return InferenceFailure(f"HTTP {response.status_code}: model busy/starting", kind="busy")
        return self._parse_response(model_id, response)

    @staticmethod
    def _parse_response(model_id: str, response: Any) -> InferenceOutcome:
        try:
            data = response.json()
        except ValueError:
            if response.status_code >= 400:
                return InferenceFailure(f"HTTP {response.status_code}", kind="http")
            logger.warning("Invalid JSON from %s", model_id)
            return InferenceFailure("Invalid JSON from inference provider", kind="invalid")

        if isinstance(data, dict) and data.get("error"):
            return InferenceFailure(str(data["error"]), kind="provider")
        if response.status_code >= 400:
            return InferenceFailure(f"HTTP {response.status_code}", kind="http")

        return InferenceSuccess(extract_generated_text(data))


def extract_generated_text(data: Any) -> str:
    """Pull summary_text/generated_text from a list or single result"""
    if isinstance(data, list):
        data = data[0] if data else {}
    if not isinstance(data, dict):
        return ""
    text = data.get("summary_text") or data.get("generated_text") or ""
    return str(text).strip()


def _is_busy(outcome: InferenceOutcome) -> bool:
    return isinstance(outcome, InferenceFailure) and outcome.kind == "busy"


def _last_failure(retry_state) -> InferenceFailure:
    """Turn the final attempt into a failure once retries run out"""
    outcome = retry_state.outcome
    if outcome.failed:
        return InferenceFailure(f"Network error: {outcome.exception()}", kind="network")
    return outcome.result()

"""
Test inference client retry and parsing
"""
import pytest
import requests

from paperlens.core.config import Settings
from paperlens.core.inference_client import InferenceClient, extract_generated_text


class _FakeResponse:
    def __init__(self, status_code: int, payload=None, invalid_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class _FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(responses, token="hf_test", **overrides):
    settings = Settings(hf_token=token, **overrides)
    session = _FakeSession(responses)
    sleeps = []
    client = InferenceClient(settings, session=session, sleep=sleeps.append)
    return client, session, sleeps


class TestInferenceClient:
    """Test InferenceClient.call_model"""

    def test_success_first_attempt(self):
        """Test summary_text is returned trimmed"""
        client, session, sleeps = _client([_FakeResponse(200, [{"summary_text": "  A summary.  "}])])
        outcome = client.call_model("facebook/bart-large-cnn", "text", parameters={"max_length": 40})

        assert outcome.ok
        assert outcome.text == "A summary."
        assert sleeps == []

        url, kwargs = session.calls[0]
        assert url.endswith("/facebook/bart-large-cnn")
        assert kwargs["params"] == {"wait_for_model": "true"}
        assert kwargs["headers"]["Authorization"] == "Bearer hf_test"
        assert kwargs["json"] == {"inputs": "text", "parameters": {"max_length": 40}}
        assert kwargs["timeout"] == pytest.approx(30.0)

    def test_retries_busy_model_with_backoff(self):
        """Test 503, 503, 200 succeeds after two growing sleeps"""
        client, session, sleeps = _client(
            [
                _FakeResponse(503),
                _FakeResponse(503),
                _FakeResponse(200, {"generated_text": "Done"}),
            ]
        )
        outcome = client.call_model("m", "x", max_attempts=3)

        assert outcome.ok
        assert outcome.text == "Done"
        assert len(session.calls) == 3
        assert sleeps == [pytest.approx(0.8), pytest.approx(1.28)]

    def test_gives_up_after_max_attempts(self):
        """Test exactly max_attempts POSTs on persistent 503"""
        client, session, sleeps = _client([_FakeResponse(503)] * 5)
        outcome = client.call_model("m", "x", max_attempts=3)

        assert not outcome.ok
        assert outcome.kind == "busy"
        assert "503" in outcome.reason
        assert len(session.calls) == 3
        assert len(sleeps) == 2

    def test_rate_limit_is_retried(self):
        """Test 429 counts as transient"""
        client, session, _ = _client([_FakeResponse(429), _FakeResponse(200, [{"generated_text": "ok"}])])
        assert client.call_model("m", "x").text == "ok"
        assert len(session.calls) == 2

    def test_network_error_is_retried(self):
        """Test connection errors are retried then reported"""
        client, session, _ = _client([requests.ConnectionError("refused")] * 2)
        outcome = client.call_model("m", "x", max_attempts=2)

        assert not outcome.ok
        assert outcome.kind == "network"
        assert len(session.calls) == 2

    def test_network_error_then_success(self):
        """Test a dropped connection is retried once"""
        client, session, sleeps = _client(
            [requests.ConnectionError("reset"), _FakeResponse(200, [{"summary_text": "Recovered."}])]
        )
        outcome = client.call_model("m", "x", max_attempts=3)

        assert outcome.ok
        assert outcome.text == "Recovered."
        assert len(session.calls) == 2
        assert sleeps == [pytest.approx(0.8)]

    def test_client_error_not_retried(self):
        """Test other HTTP errors fail immediately"""
        client, session, sleeps = _client([_FakeResponse(400, {"message": "bad"})])
        outcome = client.call_model("m", "x")

        assert not outcome.ok
        assert outcome.kind == "http"
        assert len(session.calls) == 1
        assert sleeps == []

    def test_provider_error_body(self):
        """Test error field in the body is a provider failure"""
        client, _, _ = _client([_FakeResponse(200, {"error": "Model is overloaded"})])
        outcome = client.call_model("m", "x")

        assert not outcome.ok
        assert outcome.kind == "provider"
        assert outcome.reason == "Model is overloaded"

    def test_invalid_json(self):
        """Test unparseable body is a failure, not an exception"""
        client, session, _ = _client([_FakeResponse(200, invalid_json=True)])
        outcome = client.call_model("m", "x")

        assert not outcome.ok
        assert outcome.kind == "invalid"
        assert len(session.calls) == 1

    def test_missing_token_makes_no_request(self):
        """Test no HTTP call without a token"""
        client, session, _ = _client([], token=None)
        outcome = client.call_model("m", "x")

        assert not outcome.ok
        assert outcome.kind == "provider"
        assert session.calls == []
        assert not client.has_token

    def test_explicit_token_overrides_settings(self):
        """Test per-call token"""
        client, session, _ = _client([_FakeResponse(200, [{"generated_text": "y"}])], token=None)
        assert client.call_model("m", "x", token="other").ok
        assert session.calls[0][1]["headers"]["Authorization"] == "Bearer other"


class TestExtractGeneratedText:
    """Test response shape handling"""

    def test_list_and_dict_shapes(self):
        """Test both array and object responses"""
        assert extract_generated_text([{"summary_text": "a"}]) == "a"
        assert extract_generated_text({"generated_text": " b "}) == "b"

    def test_unexpected_shapes(self):
        """Test empty or odd responses give empty text"""
        assert extract_generated_text([]) == ""
        assert extract_generated_text("text") == ""
        assert extract_generated_text({"label": "x"}) == ""

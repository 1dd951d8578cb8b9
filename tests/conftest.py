"""
Shared test fixtures
"""
import pytest


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Keep real tokens and a local .env out of Settings"""
    for name in ("HF_TOKEN", "PAPERLENS_HF_TOKEN", "PAPERLENS_UPLOAD_ROOT", "PAPERLENS_INFERENCE_ENDPOINT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

"""
Runtime configuration loaded from the environment
"""
from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ENDPOINT = "https://router.huggingface.co/hf-inference/models"


class Settings(BaseSettings):
    """Settings for the inference provider and document store"""

    model_config = SettingsConfigDict(
        env_prefix="PAPERLENS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    hf_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("PAPERLENS_HF_TOKEN", "HF_TOKEN"),
    )
    inference_endpoint: str = DEFAULT_ENDPOINT
    summary_model: str = "facebook/bart-large-cnn"
    fallback_summary_model: str = "t5-base"

    max_attempts: int = Field(default=3, ge=1)
    timeout_ms: int = Field(default=30000, gt=0)
    tldr_timeout_ms: int = Field(default=25000, gt=0)
    summary_timeout_ms: int = Field(default=60000, gt=0)

    upload_root: str = "."
    max_input_words: int = Field(default=3500, gt=0)

    @property
    def has_token(self) -> bool:
        return bool((self.hf_token or "").strip())

"""Application settings loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the application."""

    # Storage: a directory of key-value slots, one JSON document per key
    data_dir: Path = Field(default=Path("/tmp/mindvault"))
    storage_key: str = Field(default="mindvault_resources")
    # Language used for defaults, fallbacks and AI output ("zh" or "en")
    content_language: str = Field(default="zh")
    # Annotation service: "replicate" or "gemini"
    annotation_provider: str = Field(default="replicate")
    replicate_api_token: str = Field(default="")
    replicate_model: str = Field(default="openai/gpt-5-structured")
    gemini_api_key: str = Field(default="")
    gemini_model: str = Field(default="gemini-2.5-flash")
    prompts_path: Path | None = Field(default=None)
    llm_log_payloads: bool = Field(default=False)
    llm_max_output_tokens: int = Field(default=2048)
    log_level: str = Field(default="INFO")
    service_name: str = Field(default="api")
    environment: str = Field(default="development")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Be lenient with env var names (e.g., DATA_DIR vs data_dir)
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return application settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]

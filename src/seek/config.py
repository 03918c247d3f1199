"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `SEEK_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Seek settings.

    All fields are environment-configurable. Prefix is `SEEK_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEEK_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")
    log_file: Path | None = Field(default=None)

    # Reasoning engine (OpenAI-compatible)
    openai_api_key: str | None = Field(default=None)
    openai_base_url: str | None = Field(default=None)
    # Planning and final report assembly
    reasoning_model: str = Field(default="o1-mini")
    reasoning_max_tokens: int = Field(default=2000, ge=1)
    reasoning_timeout_s: float = Field(default=60.0, gt=0.0)
    reasoning_temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    # Per-page extraction and folding
    completion_model: str = Field(default="gpt-4o-mini")
    completion_max_tokens: int = Field(default=1000, ge=1)
    completion_timeout_s: float = Field(default=30.0, gt=0.0)

    # Search
    search_provider: Literal["tavily", "google", "duckduckgo"] = Field(default="tavily")
    search_max_results: int = Field(default=5, ge=1, le=20)
    search_timeout_s: float = Field(default=10.0, ge=1.0, le=300.0)
    search_language: str | None = Field(default=None)
    search_country: str | None = Field(default=None)
    search_safe: bool = Field(default=True)

    tavily_api_key: str | None = Field(default=None)
    tavily_api_base_url: str = Field(default="https://api.tavily.com")
    tavily_search_depth: Literal["basic", "advanced"] = Field(default="basic")

    google_api_key: str | None = Field(default=None)
    google_cx: str | None = Field(default=None)
    google_search_url: str = Field(default="https://www.googleapis.com/customsearch/v1")

    # Web reading
    webread_timeout_s: float = Field(default=10.0, gt=0.0)
    webread_min_content_length: int = Field(default=128, ge=0)
    webread_max_concurrency: int = Field(default=8, ge=1, le=64)
    webread_deadline_s: float | None = Field(default=None, gt=0.0)
    webread_max_content_chars: int = Field(default=50_000, ge=1000)
    browser_enabled: bool = Field(default=True)
    browser_stable_ms: int = Field(default=500, ge=0, le=10_000)
    http_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        )
    )

    # Compilation
    compile_max_concurrency: int = Field(default=8, ge=1, le=64)

    # Output
    output_dir: Path = Field(default=Path("output"))


def load_settings(env_file: Path | None = None) -> Settings:
    """Load settings from env.

    Args:
        env_file: Optional explicit `.env` path; takes precedence over `SEEK_ENV_FILE`.

    Returns:
        Settings: Parsed settings.
    """

    if env_file is not None:
        return Settings(_env_file=env_file)

    env_file_override = os.getenv("SEEK_ENV_FILE")
    if env_file_override:
        return Settings(_env_file=Path(env_file_override))

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()

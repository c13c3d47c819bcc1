"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required
    anthropic_api_key: str = ""

    # Scraping (optional; research falls back to search-only mode without it)
    firecrawl_api_key: str = ""
    firecrawl_base_url: str = "https://api.firecrawl.dev/v1"
    firecrawl_concurrency: int = 3
    firecrawl_max_retries: int = 2

    # Content budgets
    scrape_timeout_s: float = 15.0
    scrape_max_page_chars: int = 3000
    scrape_max_total_chars: int = 15000

    # LLM settings
    llm_model: str = "claude-sonnet-4-5-20250929"
    llm_max_tokens: int = 4000
    llm_temperature: float = 0.1
    llm_timeout_s: float = 120.0

    # Bearer token -> user id, as JSON: API_TOKENS='{"dev-token": "user_123"}'
    api_tokens: dict[str, str] = Field(default_factory=dict)

    # Public origin used to build share links
    app_url: str = "http://localhost:8000"

    # Data directory
    data_dir: Path = Path("./data")

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    # API server
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @property
    def db_path(self) -> Path:
        return self.data_dir / "aigos.db"

    def ensure_data_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

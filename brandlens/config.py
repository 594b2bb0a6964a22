"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM vendors
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # LLM settings
    openai_model: str = "gpt-4.1"
    openai_profile_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    llm_max_tokens: int = 4096
    llm_temperature: float = 0.7
    llm_web_search: bool = True

    # Database
    data_dir: Path = Path("./data")
    database_url: str = ""

    # Auth
    session_ttl_days: int = 7
    session_cookie_name: str = "brandlens_session"

    # External analysis run
    analysis_webhook_url: str = ""
    analysis_timeout: float = 30.0

    # Generation
    supplemental_query_count: int = 10

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    # API server
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # Huey settings
    huey_workers: int = 4
    huey_immediate: bool = False
    task_retries: int = 2
    task_retry_delay: int = 30

    @property
    def db_path(self) -> Path:
        return self.data_dir / "brandlens.db"

    @property
    def db_url(self) -> str:
        """SQLAlchemy URL; falls back to the SQLite file under data_dir."""
        return self.database_url or f"sqlite:///{self.db_path}"

    @property
    def huey_db_path(self) -> Path:
        return self.data_dir / "huey_queue.db"

    def ensure_data_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

"""Environment and settings (Pydantic Settings)."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default home directory: ~/.youagent/
_home_dir = Path.home() / ".youagent"


class Settings(BaseSettings):
    """YouAgent settings loaded from environment and .env.

    LLM provider settings live in ~/.youagent/config.toml and are read by
    the LLM module; environment variables here cover storage, connectors
    and retrieval policy.
    """

    model_config = SettingsConfigDict(
        env_prefix="YOUAGENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths (local-first data stored in ~/.youagent/); unset paths live under `home`
    home: Path = _home_dir
    db_path: Optional[Path] = None
    vector_db_path: Optional[Path] = None

    # Vector index
    vector_backend: Literal["sqlite", "chroma"] = "sqlite"
    embedding_dimension: int = 768

    # Connectors
    github_token: Optional[str] = None
    github_username: Optional[str] = None
    site_rss_url: Optional[str] = None
    social_rss_url: Optional[str] = None
    resume_path: Optional[Path] = None
    http_timeout: float = 30.0

    # Retrieval policy
    context_max_chars: int = 2000
    context_max_per_source: int = 3

    # Ingestion
    embed_batch_size: int = 10
    retry_attempts: int = 3

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Optional[Path] = None

    @model_validator(mode="after")
    def _paths_under_home(self) -> "Settings":
        if self.db_path is None:
            self.db_path = self.home / "youagent.db"
        if self.vector_db_path is None:
            self.vector_db_path = self.home / "vectors.db"
        if self.log_file is None:
            self.log_file = self.home / "youagent.log"
        return self


def get_settings() -> Settings:
    """Return application settings (singleton-like)."""
    return Settings()

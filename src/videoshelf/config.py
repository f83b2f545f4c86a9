"""Runtime settings for videoshelf.

Values come from the environment (prefix ``VIDEOSHELF_``) or a local ``.env``
file. Settings are immutable once loaded and are handed to ``create_app``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VIDEOSHELF_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    # ── Auth ─────────────────────────────────────────────────────────────
    jwt_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("VIDEOSHELF_JWT_SECRET_KEY", "JWT_SECRET_KEY"),
    )
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 86400
    # Require a bearer token matching userId on edit/delete routes
    enforce_owner_auth: bool = False

    # ── Storage ──────────────────────────────────────────────────────────
    database_url: str = "sqlite:///data/videoshelf.db"

    # ── HTTP ─────────────────────────────────────────────────────────────
    base_path: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    host: str = "0.0.0.0"
    port: int = 8000

    # ── Extraction ───────────────────────────────────────────────────────
    extractor_platform: str = "Youtube"
    stream_chunk_size: int = 65536

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()

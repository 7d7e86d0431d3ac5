"""
Configuration and settings for the dashboard backend and Cloud Functions.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.constants import (
    MAX_TOKENS_PER_BATCH,
    NOTIFY_TIME_ZONE,
    VERSE_COUNTS_URL,
)


class Settings(BaseSettings):
    """Environment-backed settings shared by the FastAPI service and functions."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Daily verse notifier. An unset secret leaves the trigger endpoint open,
    # which is only meant for local development.
    cron_secret: Optional[str] = Field(default=None, alias="CRON_SECRET")
    notify_time_zone: str = Field(default=NOTIFY_TIME_ZONE, alias="NOTIFY_TIME_ZONE")
    push_batch_size: int = Field(
        default=MAX_TOKENS_PER_BATCH, alias="PUSH_BATCH_SIZE"
    )
    daily_verse_skip_if_sent: bool = Field(
        default=False, alias="DAILY_VERSE_SKIP_IF_SENT"
    )

    # Firebase
    firebase_project_id: Optional[str] = Field(
        default=None, alias="FIREBASE_PROJECT_ID"
    )

    # SQL document store (any SQLAlchemy URL) for running without Firestore
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # S3-compatible object storage
    storage_bucket: Optional[str] = Field(default=None, alias="STORAGE_BUCKET")
    storage_endpoint: Optional[str] = Field(default=None, alias="STORAGE_ENDPOINT")
    storage_region: Optional[str] = Field(default=None, alias="STORAGE_REGION")
    storage_public_base_url: Optional[str] = Field(
        default=None, alias="STORAGE_PUBLIC_BASE_URL"
    )
    aws_access_key_id: Optional[str] = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(
        default=None, alias="AWS_SECRET_ACCESS_KEY"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, alias="DASHBOARD_USE_IN_MEMORY_BACKENDS"
    )

    # Session cookie carrying the Firebase ID token
    session_cookie_name: str = Field(default="token", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")

    verse_counts_url: str = Field(default=VERSE_COUNTS_URL, alias="VERSE_COUNTS_URL")

    @field_validator("push_batch_size")
    @classmethod
    def check_batch_size(cls, v: int) -> int:
        if not 1 <= v <= MAX_TOKENS_PER_BATCH:
            raise ValueError(
                f"PUSH_BATCH_SIZE must be between 1 and {MAX_TOKENS_PER_BATCH}"
            )
        return v

    @field_validator("cron_secret")
    @classmethod
    def blank_secret_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()

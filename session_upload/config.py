"""Configuration management for the session upload pipeline."""

from __future__ import annotations

from urllib.parse import quote

from dotenv import load_dotenv
from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils import normalize_sub_path

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


class Settings(BaseSettings):
    """App configuration derived from environment variables."""

    upload_server_url: HttpUrl = Field(..., alias="UPLOAD_SERVER_URL")
    upload_api_token: str = Field(..., alias="UPLOAD_API_TOKEN")
    upload_session_id: str | None = Field(None, alias="UPLOAD_SESSION_ID")
    upload_sub_path: str | None = Field(None, alias="UPLOAD_SUB_PATH")
    upload_timeout_seconds: int = Field(60, alias="UPLOAD_TIMEOUT_SECONDS")
    upload_locale: str = Field("en", alias="UPLOAD_LOCALE")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("upload_session_id", "upload_sub_path", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("upload_sub_path", mode="after")
    @classmethod
    def _normalize_sub_path(cls, value):
        return normalize_sub_path(value)

    @field_validator("upload_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("UPLOAD_TIMEOUT_SECONDS must be greater than zero.")
        return value

    @property
    def base_url(self) -> str:
        return str(self.upload_server_url).rstrip("/")

    def rpc_url(self, session_id: str) -> str:
        """Endpoint that accepts calls scoped to ``session_id``."""
        return f"{self.base_url}/v1/sessions/{quote(session_id, safe='')}/rpc"

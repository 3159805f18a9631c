"""
Application configuration using Pydantic Settings.
"""

from typing import List, Literal, Optional
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="allow"
    )

    # Environment
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    # Base used for viewer links and QR codes (e.g. an ngrok URL); the
    # request host is used when empty.
    PUBLIC_BASE_URL: str = ""

    # CORS, comma-separated
    CORS_ORIGINS: str = "*"

    # Storage
    STORAGE_BACKEND: Literal["local", "supabase"] = "local"
    REPORTS_FILE: str = "db/reports.json"
    EXPOSE_ERROR_DETAILS: bool = False

    # Supabase (remote table strategy)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_TABLE: str = "denuncias"

    # Uploads
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_PHOTOS: int = 6
    PHOTO_OVERFLOW: Literal["reject", "truncate"] = "reject"
    MAX_PHOTO_BYTES: int = 10 * 1024 * 1024

    # Optional frontend served at /
    STATIC_DIR: Optional[str] = None

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "60/minute"

    # Observability
    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins(self) -> List[str]:
        return [i.strip() for i in self.CORS_ORIGINS.split(",") if i.strip()]

    @field_validator("UPLOAD_URL_PREFIX")
    @classmethod
    def normalise_upload_prefix(cls, v: str) -> str:
        prefix = "/" + v.strip("/")
        if prefix == "/":
            raise ValueError("UPLOAD_URL_PREFIX must not be the site root")
        return prefix

    @model_validator(mode="after")
    def require_remote_credentials(self) -> "Settings":
        if self.STORAGE_BACKEND == "supabase":
            missing = [
                name
                for name in ("SUPABASE_URL", "SUPABASE_KEY")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(
                    f"STORAGE_BACKEND=supabase requires {', '.join(missing)}"
                )
        return self


settings = Settings()

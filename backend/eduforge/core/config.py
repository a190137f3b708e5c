from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from typing import Any, ClassVar
import json
from pathlib import Path
import os


class Settings(BaseSettings):
    API_PREFIX: str = "/api"

    # JWT configuration (provide a fallback for local development)
    SECRET_KEY: str = "fallback_secret_for_dev_only"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Database URL
    # Use an absolute path so running the app from different directories
    # (e.g., repo root or backend/) always resolves the same DB file.
    BASE_DIR: ClassVar[Path] = Path(__file__).resolve().parents[2]
    SQLALCHEMY_DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'eduforge.db'}"

    # Connection pool sizing (ignored for SQLite)
    DB_POOL_SIZE: int = 6
    DB_MAX_OVERFLOW: int = 6
    DB_POOL_RECYCLE: int = 300
    DB_POOL_TIMEOUT: float = 5.0

    # CORS origins
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    CORS_ALLOW_ALL: bool = False

    # Base frontend URL, used to build deep links in notifications
    FRONTEND_URL: str = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    # Currency applied when a payment submission omits one
    DEFAULT_CURRENCY: str = "USD"

    # Local directory backing the file-storage wrapper
    UPLOAD_DIR: str = str(BASE_DIR / "uploads")
    UPLOAD_URL_PREFIX: str = "/uploads"

    # Fallbacks when the settings table has no file limits yet
    DEFAULT_MAX_FILE_SIZE_MB: int = 10
    DEFAULT_ALLOWED_FILE_TYPES: str = "pdf,doc,docx,zip,mp3,wav"

    # When false, any admin may move any entity to any status (legacy policy).
    WORKFLOW_ENFORCE_TRANSITIONS: bool = True

    # Default admin bootstrap on startup
    DEFAULT_ADMIN_BOOTSTRAP: bool = True
    DEFAULT_ADMIN_EMAIL: str = "admin@eduforge.com"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    # Seed the default service catalog and system settings on startup
    SEED_DEFAULTS: bool = True

    @field_validator("CORS_ORIGINS", mode="before")
    def split_origins(cls, v: Any) -> list[str]:
        """Parse comma-separated or JSON list of origins from environment."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                pass
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("DEFAULT_ADMIN_EMAIL", "FRONTEND_URL", mode="before")
    def strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("DEFAULT_CURRENCY", mode="after")
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def allow_all_if_requested(self) -> "Settings":
        if self.CORS_ALLOW_ALL:
            self.CORS_ORIGINS = ["*"]
        return self

    model_config = SettingsConfigDict(
        extra="ignore",
        env_file=os.getenv(
            "ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env")
        ),
        case_sensitive=True,
    )


def load_settings() -> "Settings":
    return Settings()


settings = load_settings()


def _dedupe(seq: list[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in seq:
        key = item.strip()
        if not key or key in seen:
            continue
        seen.add(key)
        ordered.append(key)
    return ordered


def _collect_frontend_origins() -> list[str]:
    origins: list[str] = list(settings.CORS_ORIGINS or [])
    base = (settings.FRONTEND_URL or "").strip()
    if base:
        origins.append(base.rstrip("/"))
    return _dedupe(origins)


FRONTEND_ORIGINS = _collect_frontend_origins()

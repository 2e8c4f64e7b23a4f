"""Application configuration via Pydantic BaseSettings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    development = "development"
    staging = "staging"
    production = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment
    ENVIRONMENT: Environment = Environment.development

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ALLOWED_ORIGINS: str = "*"

    # Generative provider (Gemini through LiteLLM)
    GOOGLE_API_KEY: str = ""
    MODEL_ID: str = "gemini/gemini-2.0-flash"
    MODEL_TEMPERATURE: float = 0.3
    MODEL_MAX_OUTPUT_TOKENS: int = 2048
    LLM_TIMEOUT: int = 30

    # Email transport (Gmail API with domain-wide delegation)
    GOOGLE_SERVICE_ACCOUNT_FILE: str = ""  # Path to service account JSON key file
    GOOGLE_DELEGATED_USER_EMAIL: str = ""  # Mailbox the summaries are sent from
    EMAIL_SENDER_NAME: str = "Meeting Recap"
    EMAIL_TIMEOUT: int = 30  # Seconds per recipient send

    # Base64-encoded Google service account JSON (for containerized deployments)
    GOOGLE_SERVICE_ACCOUNT_JSON_B64: str = ""

    # Monitoring
    SENTRY_DSN: str = ""

    @property
    def cors_origins(self) -> list[str]:
        if self.CORS_ALLOWED_ORIGINS == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ALLOWED_ORIGINS.split(",") if o.strip()]

    def get_service_account_path(self) -> str | None:
        """Return path to Google service account JSON file.

        Prefers GOOGLE_SERVICE_ACCOUNT_FILE (direct path) if set.
        Falls back to decoding GOOGLE_SERVICE_ACCOUNT_JSON_B64 into a temp file
        for containerized deployments where mounting a file is impractical.
        Returns None if neither is configured.
        """
        if self.GOOGLE_SERVICE_ACCOUNT_FILE:
            return self.GOOGLE_SERVICE_ACCOUNT_FILE
        if self.GOOGLE_SERVICE_ACCOUNT_JSON_B64:
            import base64
            import os
            import tempfile

            decoded = base64.b64decode(self.GOOGLE_SERVICE_ACCOUNT_JSON_B64)
            tmp_path = os.path.join(tempfile.gettempdir(), "gcp-service-account.json")
            with open(tmp_path, "wb") as f:
                f.write(decoded)
            return tmp_path
        return None


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()

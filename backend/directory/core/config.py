# backend/directory/core/config.py
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: str = Field(default="development", alias="ENVIRONMENT")
    is_testing: bool = False  # Set to True when running tests

    # Storage
    database_url: str = Field(
        default="sqlite:///./directory.db",
        alias="DATABASE_URL",
        description="SQLAlchemy URL of the directory database",
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Bearer tokens are minted by the upstream identity provider with this shared secret
    secret_key: SecretStr = Field(
        default=SecretStr("dev-secret-key-change-me"),
        alias="SECRET_KEY",
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours

    # Public read API
    public_api_key_hash: Optional[str] = Field(
        default=None,
        alias="PUBLIC_API_KEY_HASH",
        description="Hex SHA-256 of the key accepted in the X-API-Key header",
    )

    # OpenAI
    openai_api_key: Optional[SecretStr] = Field(default=None, alias="OPENAI_API_KEY")
    openai_enhancement_model: str = Field(
        default="gpt-4o-mini",
        alias="OPENAI_ENHANCEMENT_MODEL",
        description="Model used to expand free-text search queries",
    )
    openai_chat_model: str = Field(
        default="gpt-4o-mini",
        alias="OPENAI_CHAT_MODEL",
        description="Model used for the directory assistant and recommendations",
    )
    openai_timeout_s: float = Field(
        default=4.0,
        alias="OPENAI_TIMEOUT_S",
        gt=0,
        description="Upper bound for a single completion call",
    )
    ai_enhancement_enabled: bool = Field(
        default=True,
        alias="AI_ENHANCEMENT_ENABLED",
        description="Master switch for AI query enhancement",
    )

    # Search
    search_candidate_cap: int = Field(
        default=1000,
        alias="SEARCH_CANDIDATE_CAP",
        ge=1,
        description="Maximum candidate rows fetched per search before scoring",
    )

    # HTTP
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        alias="ALLOWED_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("database_url")
    @classmethod
    def _normalize_postgres_scheme(cls, v: str) -> str:
        # Heroku/Render style URLs use the deprecated "postgres://" scheme
        if v.startswith("postgres://"):
            return "postgresql://" + v[len("postgres://") :]
        return v

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def openai_configured(self) -> bool:
        return self.openai_api_key is not None and bool(self.openai_api_key.get_secret_value())


settings = Settings()

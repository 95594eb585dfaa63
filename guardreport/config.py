"""Application configuration using Pydantic Settings."""

import logging
from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings loaded from environment variables (and .env) with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Application Settings
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=5000, description="Server port")

    # CORS Settings
    allowed_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # Database Configuration
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        validation_alias=AliasChoices("mongo_uri", "mongodb_url"),
        description="MongoDB connection string"
    )
    mongodb_database: str = Field(
        default="guardreport",
        description="Database holding the users and reports collections"
    )
    mongodb_timeout_ms: int = Field(
        default=5000,
        description="Server selection timeout for the MongoDB client"
    )

    # Mail Configuration
    email_host: str = Field(default="localhost", description="SMTP host")
    email_port: int = Field(default=465, description="SMTP port")
    email_user: str = Field(default="", description="SMTP user, also the sender address")
    email_password: str = Field(default="", description="SMTP password")
    email_use_tls: bool = Field(default=True, description="Connect with implicit TLS")
    email_timeout: float = Field(default=30.0, description="SMTP timeout in seconds")
    email_sender_name: str = Field(
        default="Väktarrapport",
        description="Display name used in the From header"
    )
    admin_email: str = Field(default="", description="Recipient of every report")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Observability
    logfire_token: str = Field(
        default="",
        description="Logfire observability token"
    )

    @field_validator("email_port", "port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Reject ports outside the TCP range."""
        if not 0 < v < 65536:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def cors_origins(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    return Settings()

"""Configuration management using Pydantic Settings."""

import base64
import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Only load .env file in development (not Lambda/production)
        env_file=".env" if os.getenv("AWS_EXECUTION_ENV") is None else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Management API (Meta)
    meta_url: str | None = None
    meta_token: str | None = None
    api_key: str | None = None
    api_secret: str | None = None

    # Deployment targets
    target_org: str | None = None
    lambda_provider_id: str | None = None

    # GitLab callback (all three enable the external_url update)
    gitlab_api_url: str | None = None
    gitlab_token: str | None = None
    api_gateway_url: str | None = None

    @field_validator(
        "meta_url",
        "meta_token",
        "api_key",
        "api_secret",
        "target_org",
        "lambda_provider_id",
        "gitlab_api_url",
        "gitlab_token",
        "api_gateway_url",
        mode="before",
    )
    @classmethod
    def convert_empty_string_to_none(cls, v):
        """Treat blank environment variables as unset."""
        if v is None:
            return None
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    # Application Configuration
    log_level: str = "INFO"
    log_debug: bool = False
    api_title: str = "Gestalt Lambda Deployer"
    api_version: str = "1.0.0"
    api_gateway_base_path: str = "/"

    # None keeps the transport blocking until the remote side answers
    http_timeout_seconds: float | None = None

    def require(self, name: str) -> str:
        """
        Return a configured value or fail before any remote call is made.

        Args:
            name: Settings attribute name (lower-case env var name)

        Returns:
            The configured value

        Raises:
            ConfigurationError: If the value is not set
        """
        value = getattr(self, name)
        if value is None:
            raise ConfigurationError(variable=name.upper())
        return value

    @property
    def gitlab_enabled(self) -> bool:
        """Whether the GitLab environment callback is configured."""
        return self.gitlab_api_url is not None

    def meta_credentials(self) -> str:
        """
        Build the Authorization header value for the management API.

        A precomputed token wins over key/secret pairs.

        Raises:
            ConfigurationError: If neither form of credentials is configured
        """
        if self.meta_token:
            if self.meta_token.split(" ", 1)[0] in ("Bearer", "Basic"):
                return self.meta_token
            return f"Bearer {self.meta_token}"
        api_key = self.require("api_key")
        api_secret = self.require("api_secret")
        encoded = base64.b64encode(f"{api_key}:{api_secret}".encode("utf-8"))
        return f"Basic {encoded.decode('ascii')}"


# Global settings instance
settings = Settings()

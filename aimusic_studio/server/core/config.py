"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Provider Configuration Models
# =====================================================================


class SunoConfig(BaseModel):
    """Suno API configuration."""

    api_key: Optional[str] = Field(default=None, alias="SUNO_API_KEY", description="Suno API key for authentication")
    base_url: str = Field(
        default="https://api.sunoapi.org/api/v1", alias="SUNO_BASE_URL", description="Suno REST API base URL"
    )
    callback_url: Optional[str] = Field(
        default=None,
        alias="SUNO_CALLBACK_URL",
        description="Public URL of this service's Suno webhook endpoint",
    )
    default_model: str = Field(default="V4_5", alias="SUNO_DEFAULT_MODEL", description="Default Suno model")

    model_config = {"populate_by_name": True}


class MurekaConfig(BaseModel):
    """Mureka API configuration."""

    api_key: Optional[str] = Field(
        default=None, alias="MUREKA_API_KEY", description="Mureka API key for authentication"
    )
    base_url: str = Field(default="https://api.mureka.com/v1", alias="MUREKA_BASE_URL", description="Mureka API base URL")
    health_url: str = Field(
        default="https://platform.mureka.ai/v1/health",
        alias="MUREKA_HEALTH_URL",
        description="Mureka availability check URL",
    )
    default_model: str = Field(default="mureka-v6", alias="MUREKA_DEFAULT_MODEL", description="Default Mureka model")

    model_config = {"populate_by_name": True}


class OpenAIConfig(BaseModel):
    """OpenAI API configuration."""

    api_key: Optional[str] = Field(
        default=None, alias="OPENAI_API_KEY", description="OpenAI API key for authentication"
    )
    model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL", description="Model used for prompt enhancement")

    model_config = {"populate_by_name": True}


class AuthConfig(BaseModel):
    """Authentication backend configuration."""

    url: Optional[str] = Field(
        default=None,
        alias="AUTH_URL",
        description="Base URL of the managed auth backend exposing /auth/v1/user",
    )
    api_key: Optional[str] = Field(default=None, alias="AUTH_API_KEY", description="Service key sent as 'apikey'")
    admin_token: Optional[str] = Field(
        default=None, alias="ADMIN_TOKEN", description="Static token required by admin endpoints"
    )

    model_config = {"populate_by_name": True}


class PollingConfig(BaseModel):
    """Provider polling and cleanup tunables."""

    poll_interval_seconds: float = Field(
        default=5.0, alias="PROVIDER_POLL_INTERVAL", description="Delay between provider status polls"
    )
    max_poll_attempts: int = Field(
        default=60, alias="PROVIDER_MAX_POLL_ATTEMPTS", description="Provider status polls before timing out"
    )
    lyrics_poll_interval_seconds: float = Field(
        default=3.0, alias="LYRICS_POLL_INTERVAL", description="Delay between lyrics status polls"
    )
    lyrics_max_poll_attempts: int = Field(
        default=20, alias="LYRICS_MAX_POLL_ATTEMPTS", description="Lyrics status polls before timing out"
    )
    processing_timeout_minutes: int = Field(
        default=15, alias="PROCESSING_TIMEOUT_MINUTES", description="Idle minutes before a processing job is stuck"
    )
    pending_timeout_minutes: int = Field(
        default=30, alias="PENDING_TIMEOUT_MINUTES", description="Age in minutes before a pending job is stuck"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    server_host: str = Field(default="0.0.0.0", alias="AIMUSIC_SERVER_HOST", description="Host address to bind to")
    server_port: int = Field(default=8000, alias="AIMUSIC_SERVER_PORT", description="Server port number")
    log_level: str = Field(
        default="INFO",
        alias="AIMUSIC_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./aimusic_studio.db",
        alias="DATABASE_URL",
        description="Async SQLAlchemy connection URL for the application database",
    )

    # =====================================================================
    # Flat provider / auth fields (grouped by the properties below)
    # =====================================================================
    suno_api_key: Optional[str] = Field(default=None, alias="SUNO_API_KEY")
    suno_base_url: str = Field(default="https://api.sunoapi.org/api/v1", alias="SUNO_BASE_URL")
    suno_callback_url: Optional[str] = Field(default=None, alias="SUNO_CALLBACK_URL")
    suno_default_model: str = Field(default="V4_5", alias="SUNO_DEFAULT_MODEL")

    mureka_api_key: Optional[str] = Field(default=None, alias="MUREKA_API_KEY")
    mureka_base_url: str = Field(default="https://api.mureka.com/v1", alias="MUREKA_BASE_URL")
    mureka_health_url: str = Field(default="https://platform.mureka.ai/v1/health", alias="MUREKA_HEALTH_URL")
    mureka_default_model: str = Field(default="mureka-v6", alias="MUREKA_DEFAULT_MODEL")

    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")

    auth_url: Optional[str] = Field(default=None, alias="AUTH_URL")
    auth_api_key: Optional[str] = Field(default=None, alias="AUTH_API_KEY")
    admin_token: Optional[str] = Field(default=None, alias="ADMIN_TOKEN")

    provider_poll_interval: float = Field(default=5.0, alias="PROVIDER_POLL_INTERVAL")
    provider_max_poll_attempts: int = Field(default=60, alias="PROVIDER_MAX_POLL_ATTEMPTS")
    lyrics_poll_interval: float = Field(default=3.0, alias="LYRICS_POLL_INTERVAL")
    lyrics_max_poll_attempts: int = Field(default=20, alias="LYRICS_MAX_POLL_ATTEMPTS")
    processing_timeout_minutes: int = Field(default=15, alias="PROCESSING_TIMEOUT_MINUTES")
    pending_timeout_minutes: int = Field(default=30, alias="PENDING_TIMEOUT_MINUTES")

    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def suno(self) -> SunoConfig:
        """Get Suno configuration from environment variables."""
        return SunoConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def mureka(self) -> MurekaConfig:
        """Get Mureka configuration from environment variables."""
        return MurekaConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def openai(self) -> OpenAIConfig:
        """Get OpenAI configuration from environment variables."""
        return OpenAIConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def auth(self) -> AuthConfig:
        """Get auth backend configuration from environment variables."""
        return AuthConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def polling(self) -> PollingConfig:
        """Get polling and cleanup tunables from environment variables."""
        return PollingConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()

"""
Application settings using Pydantic Settings.

Loads configuration from environment variables and .env file.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with validation and defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="", description="Optional log file path")
    log_json: bool = Field(default=True, description="Emit JSON log lines")

    # Security
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated CORS origins",
    )

    # Request limits
    max_request_bytes: int = Field(
        default=1048576, ge=1024, description="Max request body bytes (default 1MB)"
    )

    # Providers
    default_provider: str = Field(
        default="google",
        description="Provider used when a request omits one",
    )
    azure_api_version: str = Field(
        default="2024-10-21",
        description="Azure OpenAI API version when extraConfig.apiVersion is absent",
    )

    # Generation
    max_tool_steps: int = Field(
        default=5, ge=1, le=20, description="Max model calls per chat request when tools run"
    )
    connection_test_max_tokens: int = Field(
        default=5, ge=1, le=64, description="Output token bound for /chat/test"
    )
    disconnect_poll_seconds: float = Field(
        default=0.5, gt=0, description="How often a stream checks for client disconnect"
    )

    # Web search (Tavily)
    tavily_api_key: str = Field(default="", description="Tavily API key (server-held)")
    tavily_search_url: str = Field(
        default="https://api.tavily.com/search", description="Tavily search endpoint"
    )
    web_search_max_results: int = Field(
        default=5, ge=1, le=20, description="Results requested per search"
    )
    web_search_depth: str = Field(default="advanced", description="Tavily search depth")
    web_search_timeout_seconds: float = Field(
        default=30, gt=0, description="Web search request timeout"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return upper

    @field_validator("web_search_depth")
    @classmethod
    def validate_web_search_depth(cls, v: str) -> str:
        """Ensure search depth is one Tavily accepts."""
        valid = {"basic", "advanced"}
        lower = v.lower()
        if lower not in valid:
            raise ValueError(f"web_search_depth must be one of {valid}")
        return lower

    @field_validator("default_provider")
    @classmethod
    def validate_default_provider(cls, v: str) -> str:
        """Ensure default_provider names a catalogue entry."""
        from lightchat.app.providers.catalogue import PROVIDER_MAP

        lower = v.strip().lower()
        if lower not in PROVIDER_MAP:
            raise ValueError(f"default_provider must be one of {sorted(PROVIDER_MAP)}")
        return lower

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

"""
Application settings and configuration management using Pydantic Settings.
"""
from dataclasses import dataclass
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    app_name: str = Field(default="Rehla Tours Umrah Registration", description="Application name")
    app_env: str = Field(default="development", description="Environment (development, staging, production)")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./umrah_booking.db",
        description="Database connection URL"
    )

    # API Configuration
    api_prefix: str = Field(default="/api", description="Prefix for all API routes")
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        description="Allowed CORS origins (comma-separated)"
    )

    # WhatsApp API Configuration
    whatsapp_api_endpoint: str = Field(default="", description="WhatsApp API base URL")
    whatsapp_api_username: str = Field(default="", description="WhatsApp API basic auth username")
    whatsapp_api_password: str = Field(default="", description="WhatsApp API basic auth password")
    whatsapp_message_duration: int = Field(default=3600, ge=0, description="Message retention duration in seconds")
    whatsapp_request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout for WhatsApp API calls")

    # Company Information
    company_name: str = Field(default="Rehla Tours", description="Travel agency name")
    company_phone: str = Field(default="0812-3456-7890", description="Travel agency phone")
    company_website: str = Field(default="www.rehlatours.com", description="Travel agency website")

    # Booking
    booking_id_max_attempts: int = Field(default=5, ge=1, description="Attempts to find a free booking id")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed_levels:
            raise ValueError(f"log_level must be one of {allowed_levels}")
        return v_upper

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(f"app_env must be one of {allowed_envs}")
        return v_lower

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"


@dataclass(frozen=True)
class WhatsAppConfig:
    """Connection settings handed to the WhatsApp client and notification dispatcher."""

    endpoint: str = ""
    username: str = ""
    password: str = ""
    default_duration: int = 3600
    timeout: float = 30.0

    @property
    def is_configured(self) -> bool:
        """True when endpoint and both credentials are present."""
        return bool(self.endpoint and self.username and self.password)

    @property
    def base_url(self) -> str:
        return self.endpoint.rstrip("/")

    @classmethod
    def from_settings(cls, app_settings: "Settings") -> "WhatsAppConfig":
        """Build the config from application settings."""
        return cls(
            endpoint=app_settings.whatsapp_api_endpoint,
            username=app_settings.whatsapp_api_username,
            password=app_settings.whatsapp_api_password,
            default_duration=app_settings.whatsapp_message_duration,
            timeout=app_settings.whatsapp_request_timeout,
        )


# Global settings instance
settings = Settings()

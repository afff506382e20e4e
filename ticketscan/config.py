# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""Configuration management for ticketscan.

Uses Pydantic Settings for environment variable and .env file support.
"""

from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """FastAPI server settings."""

    model_config = SettingsConfigDict(env_prefix="TICKETSCAN_SERVER_")

    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )
    port: int = Field(
        default=8000,
        description="Port to listen on"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    csrf_enabled: bool = Field(
        default=True,
        description="Require X-CSRF-TOKEN on the verify endpoint"
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins"
    )


class ScannerSettings(BaseSettings):
    """Scanner client settings."""

    model_config = SettingsConfigDict(env_prefix="TICKETSCAN_SCANNER_")

    poll_interval_seconds: float = Field(
        default=0.1,
        description="Delay between decode attempts while scanning"
    )

    # Camera request
    facing_mode: Literal["environment", "user"] = Field(
        default="environment",
        description="Preferred camera (environment = rear facing)"
    )
    ideal_width: int = Field(
        default=640,
        description="Ideal frame width requested from the camera"
    )
    ideal_height: int = Field(
        default=480,
        description="Ideal frame height requested from the camera"
    )
    rear_device_index: int = Field(
        default=0,
        description="OpenCV device index used for facing_mode=environment"
    )
    front_device_index: int = Field(
        default=1,
        description="OpenCV device index used for facing_mode=user"
    )

    detector: Literal["opencv", "none"] = Field(
        default="opencv",
        description="QR decode backend ('none' disables decoding)"
    )

    # Verification service
    verify_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the verification service"
    )
    verify_path: str = Field(
        default="/api/verify",
        description="Path of the verification endpoint"
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Total timeout for the verify request (None = no timeout)"
    )


class Settings(BaseSettings):
    """Root settings for ticketscan.

    Settings are loaded from environment variables with TICKETSCAN_ prefix,
    or from a .env file in the working directory.

    Example environment variables:
        TICKETSCAN_SERVER_PORT=8000
        TICKETSCAN_SERVER_CSRF_ENABLED=false
        TICKETSCAN_SCANNER_POLL_INTERVAL_SECONDS=0.1
    """

    model_config = SettingsConfigDict(
        env_prefix="TICKETSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    scanner: ScannerSettings = Field(default_factory=ScannerSettings)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

"""
Environment configuration for module-launcher.

Loads configuration from environment variables using pydantic-settings.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Launcher settings loaded from MODULE_LAUNCHER_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MODULE_LAUNCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Master Configuration
    master_uri: str = Field(
        default="http://localhost:11311",
        description="Base URL of the master (service discovery and parameters)",
    )
    rpc_timeout: float = Field(default=30.0, gt=0, le=600, description="Timeout of one service call in seconds")
    service_wait_interval: float = Field(
        default=0.5, gt=0, le=10, description="Polling interval while waiting for a service"
    )

    # Instance Configuration
    node_name: str = Field(default="/module_launcher", description="Default instance name")

    # Admin Endpoint Configuration
    admin_host: str = Field(default="127.0.0.1", description="Bind address of the admin endpoint")
    admin_port: int = Field(default=0, ge=0, le=65535, description="Admin endpoint port, 0 for ephemeral")

    # Supervision Configuration
    poll_interval: float = Field(default=0.1, gt=0, le=5, description="Supervisor poll interval in seconds")
    heartbeat_period: float = Field(default=1.0, gt=0, le=60, description="Heartbeat period in seconds")
    heartbeat_timeout: float = Field(default=4.0, gt=0, le=300, description="Lease timeout after the last heartbeat")
    heartbeat_connect_timeout: float = Field(
        default=10.0, gt=0, le=600, description="Lease timeout before the first heartbeat"
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: Literal["text", "json"] = Field(
        default="text", description="Logging format - text for human-readable, json for structured logs"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from pathlib import Path
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. SLA rules themselves
    live in the YAML file referenced by ``sla_config_path``.
    """

    # ========== Application ==========
    app_name: str = Field(default="helpdesk-sla", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root logging level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== SLA Configuration ==========
    sla_config_path: Path = Field(
        default=Path("sla_settings.yaml"),
        description="Path to SLA settings YAML file"
    )
    watch_sla_config: bool = Field(
        default=True,
        description="Hot-reload the SLA settings file when it changes"
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()



# ========== Constants ==========

class PriorityLevel(str):
    """Ticket priority levels."""
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SLAType(str):
    """Types of SLA clocks."""
    RESPONSE = "response"
    RESOLUTION = "resolution"


# ========== Lists for validation ==========

VALID_PRIORITIES = [
    PriorityLevel.URGENT, PriorityLevel.HIGH,
    PriorityLevel.MEDIUM, PriorityLevel.LOW
]

# Upper bound on calendar days (and business windows) scanned per search.
MAX_CALENDAR_ITERATIONS = 366

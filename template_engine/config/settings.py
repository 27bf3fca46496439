"""
Application Settings
===================

Engine settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main engine settings with environment variable support."""

    # Application Configuration
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode, forces DEBUG logging")

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")

    # Rendering Defaults
    default_output_dir: Path = Field(default=Path("dist"), description="Default output directory")
    default_filename: str = Field(default="untitled", description="Default output base name")
    default_file_extension: str = Field(default=".html", description="Default markup file extension")
    default_style_format: str = Field(
        default="css", description="Default style output format: inline, css, scss"
    )
    default_formatter: Optional[str] = Field(
        default="html", description="Formatter applied to written markup"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("default_style_format")
    @classmethod
    def validate_style_format(cls, v: str) -> str:
        """Validate default style output format."""
        allowed = {"inline", "css", "scss"}
        if v not in allowed:
            raise ValueError(f"Style format must be one of: {allowed}")
        return v

    @field_validator("default_file_extension")
    @classmethod
    def validate_file_extension(cls, v: str) -> str:
        """Ensure the file extension carries a leading dot."""
        return v if v.startswith(".") else f".{v}"

    @field_validator("default_formatter", mode="before")
    @classmethod
    def parse_formatter(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty or 'none' as no formatter."""
        if isinstance(v, str) and v.strip().lower() in {"", "none"}:
            return None
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="TEMPLATE_ENGINE_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings

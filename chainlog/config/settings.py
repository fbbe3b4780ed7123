"""
Configuration for chainlog

Default logger options loaded from environment variables and/or a .env file
using pydantic-settings. Explicit constructor arguments on a Logger always win
over these values.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chainlog.core.levels import LogLevel, parse_level
from chainlog.exceptions import ChainlogError, ConfigurationError

_DIAGNOSTIC_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class LoggerSettings(BaseSettings):
    """
    Default options for new loggers.

    Values are read from ``CHAINLOG_*`` environment variables.
    """

    level: LogLevel = Field(LogLevel.DEBUG, validation_alias="CHAINLOG_LEVEL", description="Default level threshold.")
    colors: Optional[bool] = Field(None, validation_alias="CHAINLOG_COLORS", description="Force ANSI colors on or off; unset means detect from the output stream.")
    timestamp: Optional[str] = Field(None, validation_alias="CHAINLOG_TIMESTAMP", description="Timestamp mode ('iso', 'locale', 'time', 'unix'); unset disables timestamps.")
    depth: int = Field(4, validation_alias="CHAINLOG_DEPTH", description="Maximum nesting depth when inspecting arguments.")
    max_array_length: int = Field(100, validation_alias="CHAINLOG_MAX_ARRAY_LENGTH", description="Maximum number of sequence items or mapping entries shown.")
    diagnostics_level: str = Field("WARNING", validation_alias="CHAINLOG_DIAGNOSTICS_LEVEL", description="stdlib level for the library's own diagnostics.")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v):
        try:
            return parse_level(v)
        except ConfigurationError as e:
            raise ValueError(e.message) from None

    @field_validator("timestamp", mode="before")
    @classmethod
    def validate_timestamp(cls, v):
        if v is None or isinstance(v, bool):
            return "iso" if v else None
        text = str(v).strip().lower()
        if text in _TRUE_VALUES:
            return "iso"
        if text in _FALSE_VALUES:
            return None
        return text

    @field_validator("depth", "max_array_length")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be zero or greater")
        return v

    @field_validator("diagnostics_level", mode="before")
    @classmethod
    def validate_diagnostics_level(cls, v):
        name = str(v).strip().upper()
        if name not in _DIAGNOSTIC_LEVELS:
            raise ValueError(f"diagnostics level must be one of {', '.join(_DIAGNOSTIC_LEVELS)}")
        return name


# =============================================================================
# SINGLETON MANAGEMENT
# =============================================================================

_settings_instance: Optional[LoggerSettings] = None


def get_settings() -> LoggerSettings:
    """
    Get global settings instance (singleton pattern).

    Raises:
        ConfigurationError: If settings validation fails
    """
    global _settings_instance
    if _settings_instance is None:
        try:
            from dotenv import load_dotenv

            load_dotenv()
            _settings_instance = LoggerSettings()
        except ChainlogError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Settings initialization failed: {e}",
                error_code="SETTINGS_INIT_ERROR",
                context={"original_error": str(e), "error_type": type(e).__name__}
            ) from e
    return _settings_instance


def reset_settings() -> None:
    """
    Reset settings instance (primarily for testing).

    Forces recreation of settings on next get_settings() call.
    """
    global _settings_instance
    _settings_instance = None

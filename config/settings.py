from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

from core.levels import LogLevel, TimeFormat


class Settings(BaseSettings):
    """Default options for distributors and live views, read from env / .env."""

    # Distributor defaults (used when the registry creates the current distributor)
    level: LogLevel = LogLevel.INFORMATION
    console_output: bool = True
    notify_all: bool = True

    # Live view defaults
    view_log_level: LogLevel = LogLevel.INFORMATION
    view_show_source: bool = True
    view_time_format: TimeFormat = TimeFormat.COMPACT
    view_allow_clear: bool = True

    # Internal diagnostics (core.logging_utils)
    diagnostics_level: str = "WARNING"

    @field_validator("level", "view_log_level", mode="before")
    @classmethod
    def parse_level(cls, v):
        """Accept level names such as 'warning' or 'Debug' as well as integers."""
        if isinstance(v, str) and v.strip().isdigit():
            v = int(v)
        return LogLevel.parse(v)

    @field_validator("view_time_format", mode="before")
    @classmethod
    def parse_time_format(cls, v):
        return TimeFormat.parse(v)

    model_config = SettingsConfigDict(
        env_prefix="LIVELOG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()

"""
Logging Configuration.

Settings are read once at startup from `LN_LOG_*` environment variables
(or a `.env` file) and are immutable afterwards.
"""

from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .records import Level


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @classmethod
    def _missing_(cls, value: object) -> "LogLevel | None":
        if isinstance(value, str):
            key = value.strip().upper()
            if key == "WARNING":
                return cls.WARN
            if key in cls.__members__:
                return cls[key]
        return None

    def to_level(self) -> Level:
        return Level[self.value]


class LoggingSettings(BaseSettings):
    """Sink enablement, filtering and rotation configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LN_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: LogLevel = Field(default=LogLevel.DEBUG, description="Minimum level that reaches the sinks")
    console_enabled: bool = Field(default=True, description="Write to the platform console")
    file_enabled: bool = Field(default=False, description="Write to the rotating file ring")
    file_path_template: str = Field(
        default="logs/ln.{index}.log",
        description="Log file path; '{index}' is replaced by the ring position",
    )
    max_file_bytes: int = Field(default=1_000_000, gt=0, description="Size limit of a single log file")
    max_file_count: int = Field(default=3, ge=1, description="Number of files in the ring")
    left_justify_tags: bool = Field(default=True, description="Pad caller tags to a common column")
    console_tag: str = Field(default="ln", description="Tag handed to the console primitive")
    timestamp_format: str = Field(
        default="%b %d, %Y %I:%M:%S %p",
        description="File line timestamp format",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> object:
        if isinstance(value, str):
            return LogLevel(value)
        return value

    @model_validator(mode="after")
    def _check_template(self) -> "LoggingSettings":
        if self.max_file_count > 1 and "{index}" not in self.file_path_template:
            raise ValueError("file_path_template must contain '{index}' when max_file_count > 1")
        return self

    @property
    def min_level(self) -> Level:
        return self.level.to_level()

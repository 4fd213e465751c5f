from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.errors import ConstructionError
from core.levels import LogLevel


class LogMessage(BaseModel):
    """Immutable record of one log event.

    Equality is structural: two messages with the same source, timestamp,
    level and text compare equal.
    """

    model_config = ConfigDict(frozen=True)

    source: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)
    level: LogLevel = LogLevel.INFORMATION
    text: str

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConstructionError(f"Invalid log message: {exc}") from exc

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, v):
        return LogLevel.parse(v)

    @classmethod
    def create(
        cls,
        text: str,
        *args,
        source: str = "",
        level: LogLevel = LogLevel.INFORMATION,
    ) -> "LogMessage":
        """Build a message, substituting ``args`` into ``text`` printf-style."""
        if not isinstance(text, str):
            raise ConstructionError(f"Message text must be a string, got {type(text).__name__}")
        if args:
            try:
                text = text % args
            except (TypeError, ValueError, KeyError) as exc:
                raise ConstructionError(f"Cannot format {text!r} with {args!r}: {exc}") from exc
        return cls(source=source, level=level, text=text)

"""Projection configuration using pydantic-settings."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class ProjectionSettings(BaseSettings):
    """Runtime settings shared by projections.

    All settings can be configured via environment variables with the
    PROJECTIONIST_ prefix. For example:
    - PROJECTIONIST_RESTORE_LOG_LEVEL=DEBUG
    - PROJECTIONIST_RESTORE_PROGRESS_INTERVAL=10000

    Attributes:
        restore_log_level: Level used for restore start, progress and
            completion messages. Failures are always logged at ERROR.
        restore_progress_interval: Log a progress line every N replayed
            events. 0 disables progress logging.

    Example:
        >>> settings = ProjectionSettings(restore_progress_interval=500)
        >>> projection = TodoListProjection(settings=settings)
    """

    restore_log_level: str = "INFO"
    restore_progress_interval: int = Field(default=0, ge=0)

    model_config = {"env_prefix": "PROJECTIONIST_"}

    @field_validator("restore_log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown logging level: {value}")
        return level

    @property
    def restore_level(self) -> int:
        """Numeric logging level for restore messages."""
        return getattr(logging, self.restore_log_level)

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information
    """
    return datetime.now(tz=timezone.utc)


class Event(BaseModel):
    """Immutable record of something that happened in the domain.

    Events are produced by an event bus and consumed by projections. Each
    event carries a string ``type`` used to route it to a projection handler,
    plus any number of payload fields. Payload fields are not declared up
    front; they are accepted as extra attributes and read back the same way.

    Attributes:
        type: Event type identifier used for handler routing
        id: Unique identifier for this event instance
        aggregate_id: Optional ID of the aggregate that produced this event
        timestamp: When the event occurred (UTC timezone)

    Examples:
        >>> event = Event(type="itemAdded", listId="L1", name="a")
        >>> event.type
        'itemAdded'
        >>> event.name
        'a'
        >>> event.payload
        {'listId': 'L1', 'name': 'a'}
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = Field(min_length=1, description="Event type used for routing")
    id: ULID = Field(
        default_factory=ULID,
        description="Unique identifier for this event instance",
    )
    aggregate_id: ULID | None = Field(
        default=None,
        description="ID of the aggregate that produced this event",
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC timezone)",
    )

    @property
    def payload(self) -> dict[str, Any]:
        """Payload fields of the event, without the envelope metadata."""
        return dict(self.model_extra or {})

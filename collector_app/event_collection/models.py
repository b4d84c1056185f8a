"""
Data Models for Event Collection

Pydantic models validating the payloads the analytics client posts, and the
record shape written to the event store.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from analytics_client.event_types import EventType

MAX_BATCH_EVENTS = 10


def parse_iso_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z' for UTC."""
    return datetime.fromisoformat(str(value).replace('Z', '+00:00'))


def as_utc(moment: datetime) -> datetime:
    """Normalize a datetime to UTC; naive values are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class IncomingEvent(BaseModel):
    """A single event as posted by the analytics client."""
    event: str = Field(description="Event kind, one of the allowed event types")
    properties: Dict[str, Any] = Field(default_factory=dict, description="Event-specific properties")
    timestamp: str = Field(description="Client-side ISO-8601 timestamp")

    @field_validator("event")
    @classmethod
    def _check_event(cls, value: str) -> str:
        value = value.strip()
        if not EventType.is_valid(value):
            raise ValueError(f"unknown event type: {value!r}")
        return value

    @field_validator("timestamp")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        parse_iso_timestamp(value)
        return value


class BatchPayload(BaseModel):
    """A group of events posted to the batch endpoint."""
    events: List[IncomingEvent] = Field(
        min_length=1, max_length=MAX_BATCH_EVENTS, description="Between 1 and 10 events"
    )


class StoredEvent(BaseModel):
    """Event record as persisted by the collector."""
    event: str = Field(description="Event kind")
    properties: Dict[str, Any] = Field(default_factory=dict, description="Event-specific properties")
    timestamp: str = Field(description="Client-side ISO-8601 timestamp")
    received_at: str = Field(description="Collector receive time (ISO format)")
    path: Optional[str] = Field(default=None, description="Request path the event arrived on")
    ua: Optional[str] = Field(default=None, description="User agent of the poster")
    ip: Optional[str] = Field(default=None, description="Client IP address")

    @classmethod
    def from_incoming(cls, incoming: IncomingEvent, received_at: str,
                      path: Optional[str] = None, ua: Optional[str] = None,
                      ip: Optional[str] = None) -> "StoredEvent":
        """Create a stored record from a validated incoming event."""
        return cls(
            event=incoming.event,
            properties=incoming.properties,
            timestamp=incoming.timestamp,
            received_at=received_at,
            path=path,
            ua=ua,
            ip=ip
        )

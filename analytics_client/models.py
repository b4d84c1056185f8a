"""
Data Models for the Analytics Client

Defines the event record, the tracking request payloads and the
read-side aggregate shapes.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Event:
    """A single interaction event, immutable once recorded."""

    event: str
    timestamp: str
    properties: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Detach from the caller's dicts so later edits cannot rewrite the event
        object.__setattr__(self, "properties", copy.deepcopy(dict(self.properties)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire form sent to the collector."""
        return {
            "event": self.event,
            "properties": copy.deepcopy(self.properties),
            "timestamp": self.timestamp
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Event':
        """Create Event from its wire form."""
        return cls(
            event=data.get("event", ""),
            timestamp=data.get("timestamp", ""),
            properties=data.get("properties") or {}
        )


@dataclass
class SearchEvent:
    """Search request as reported by a search box."""

    query: str
    results_count: Optional[int] = None
    search_type: Optional[str] = None
    filters: Optional[Dict[str, Any]] = None


@dataclass
class FilterEvent:
    """Filter selection as reported by a filter sidebar or chip."""

    filter_type: str
    filter_value: Any
    page: Optional[str] = None


@dataclass(frozen=True)
class PopularSearch:
    """A query and how many times it was searched."""

    query: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"query": self.query, "count": self.count}

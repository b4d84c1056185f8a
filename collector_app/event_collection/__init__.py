"""
Event Collection Subsystem

Receives analytics events posted by the site and stores them for the admin
dashboard.
"""

from .factory import create_event_collection_module
from .models import BatchPayload, IncomingEvent, StoredEvent
from .store import EventStore

__all__ = ['create_event_collection_module', 'BatchPayload', 'IncomingEvent', 'StoredEvent', 'EventStore']

"""
Factory for creating the event collection module.
"""
from pathlib import Path
from .routes import create_event_collection_blueprint
from .store import EventStore


def create_event_collection_module(data_dir: Path) -> dict:
    """Create event collection module with service and routes.

    Args:
        data_dir: Directory to store collected analytics events

    Returns:
        Dictionary containing the service and blueprint
    """
    event_store = EventStore(data_dir)

    blueprint = create_event_collection_blueprint(event_store)

    return {
        "service": event_store,
        "blueprint": blueprint
    }

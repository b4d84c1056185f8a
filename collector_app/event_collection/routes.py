"""
Event Collection Routes

Flask routes receiving analytics events from the site and serving the
collected data back to the admin dashboard.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import Blueprint, request, jsonify
from pydantic import ValidationError

from .models import BatchPayload, IncomingEvent, StoredEvent, as_utc, parse_iso_timestamp
from .store import EventStore

logger = logging.getLogger(__name__)


def _read_json_payload() -> Optional[Dict[str, Any]]:
    """Read the request body as a JSON object, tolerating a missing content type."""
    payload = request.get_json(silent=True)
    if payload is None:
        raw = request.get_data(as_text=True) or ""
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            return None
    return payload if isinstance(payload, dict) else None


def _client_ip() -> Optional[str]:
    forwarded = request.headers.get('X-Forwarded-For')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr


def _to_stored(incoming: IncomingEvent) -> StoredEvent:
    return StoredEvent.from_incoming(
        incoming,
        received_at=datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds"),
        path=request.path,
        ua=request.headers.get("User-Agent"),
        ip=_client_ip()
    )


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "invalid payload")


def create_event_collection_blueprint(event_store: EventStore):
    """Create a Flask blueprint for event collection routes.

    Args:
        event_store: Store receiving collected events

    Returns:
        Flask blueprint with event collection routes
    """
    bp = Blueprint('event_collection', __name__, url_prefix='/api/analytics')

    @bp.route("", methods=["POST"])
    def ingest_event():
        """Ingest a single event."""
        payload = _read_json_payload()
        if payload is None:
            return jsonify({"error": "invalid-json"}), 400

        try:
            incoming = IncomingEvent(**payload)
        except ValidationError as exc:
            logger.info(f"Rejected analytics event: {_validation_message(exc)}")
            return jsonify({"error": _validation_message(exc)}), 400

        event_store.append([_to_stored(incoming)])
        return jsonify({"status": "ok"})

    @bp.route("/batch", methods=["POST"])
    def ingest_batch():
        """Ingest a batch of up to ten events."""
        payload = _read_json_payload()
        if payload is None:
            return jsonify({"error": "invalid-json"}), 400

        try:
            batch = BatchPayload(**payload)
        except ValidationError as exc:
            logger.info(f"Rejected analytics batch: {_validation_message(exc)}")
            return jsonify({"error": _validation_message(exc)}), 400

        accepted = event_store.append(_to_stored(incoming) for incoming in batch.events)
        return jsonify({"status": "ok", "accepted": accepted})

    @bp.route("/events", methods=["GET"])
    def get_events():
        """Get recently collected events."""
        limit = request.args.get("limit", type=int)
        events = event_store.get_events(limit=limit)
        return jsonify({
            "status": "ok",
            "events": [event.model_dump() for event in events]
        })

    @bp.route("/stats", methods=["GET"])
    def get_event_stats():
        """Get per-event-type counts."""
        return jsonify({
            "status": "ok",
            "stats": event_store.get_event_stats()
        })

    @bp.route("/popular-downloads", methods=["GET"])
    def get_popular_downloads():
        """Get the most clicked downloads."""
        limit = request.args.get("limit", default=10, type=int)
        return jsonify({
            "status": "ok",
            "downloads": event_store.get_popular_downloads(limit=limit)
        })

    @bp.route("/range", methods=["GET"])
    def get_events_by_range():
        """Get events received within a date range."""
        start_raw = request.args.get("start")
        end_raw = request.args.get("end")
        if not start_raw or not end_raw:
            return jsonify({"error": "start and end are required"}), 400

        try:
            start = as_utc(parse_iso_timestamp(start_raw))
            end = as_utc(parse_iso_timestamp(end_raw))
        except ValueError:
            return jsonify({"error": "invalid-date"}), 400

        if start > end:
            return jsonify({"error": "start must not be after end"}), 400

        events = event_store.get_events_by_date_range(start, end)
        return jsonify({
            "status": "ok",
            "events": [event.model_dump() for event in events]
        })

    return bp

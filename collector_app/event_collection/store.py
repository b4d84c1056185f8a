"""
Event Store

Append-only JSON-lines storage for collected analytics events, with the
read queries the admin dashboard uses.
"""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from analytics_client.event_types import EventType

from .models import StoredEvent, as_utc, parse_iso_timestamp

logger = logging.getLogger(__name__)


class EventStore:
    """File-backed store of collected events."""

    FILE_NAME = "analytics_events.jsonl"

    def __init__(self, data_dir: Path):
        """Initialize the event store.

        Args:
            data_dir: Directory where the events file is kept
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.events_file = self.data_dir / self.FILE_NAME
        self._lock = threading.Lock()

    def append(self, records: Iterable[StoredEvent]) -> int:
        """Append records to the store.

        Returns:
            Number of records written
        """
        lines = [json.dumps(record.model_dump(), ensure_ascii=False) for record in records]
        if not lines:
            return 0

        with self._lock:
            with open(self.events_file, 'a', encoding='utf-8') as f:
                f.write("\n".join(lines) + "\n")

        logger.debug(f"Stored {len(lines)} analytics events")
        return len(lines)

    def _load_records(self) -> List[StoredEvent]:
        if not self.events_file.exists():
            return []

        records = []
        with self._lock:
            with open(self.events_file, 'r', encoding='utf-8') as f:
                raw_lines = f.readlines()

        for line_no, line in enumerate(raw_lines, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(StoredEvent(**json.loads(line)))
            except (json.JSONDecodeError, ValueError) as e:
                logger.warning(f"Skipping malformed analytics record at line {line_no}: {e}")
        return records

    def get_events(self, limit: Optional[int] = None) -> List[StoredEvent]:
        """Get stored events, oldest first.

        Args:
            limit: Optional limit; keeps the most recent events
        """
        records = self._load_records()
        if limit is not None:
            records = records[-limit:] if limit > 0 else []
        return records

    def get_event_stats(self) -> Dict[str, int]:
        """Count stored events per event kind."""
        stats: Dict[str, int] = {}
        for record in self._load_records():
            stats[record.event] = stats.get(record.event, 0) + 1
        return stats

    def get_popular_downloads(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Rank downloads by number of download clicks.

        Downloads with equal counts keep the order they were first clicked in.
        """
        counts: Dict[str, int] = {}
        names: Dict[str, str] = {}
        for record in self._load_records():
            if record.event != EventType.DOWNLOAD_CLICK.value:
                continue
            download_id = record.properties.get("downloadId")
            if not download_id:
                continue
            counts[download_id] = counts.get(download_id, 0) + 1
            names.setdefault(download_id, record.properties.get("downloadName"))

        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [
            {"id": download_id, "name": names.get(download_id), "count": count}
            for download_id, count in ranked[:max(limit, 0)]
        ]

    def get_events_by_date_range(self, start: datetime, end: datetime) -> List[StoredEvent]:
        """Get events received between ``start`` and ``end`` inclusive, newest first."""
        start = as_utc(start)
        end = as_utc(end)

        matched = []
        for record in self._load_records():
            received = as_utc(parse_iso_timestamp(record.received_at))
            if start <= received <= end:
                matched.append((received, record))

        matched.sort(key=lambda item: item[0], reverse=True)
        return [record for _, record in matched]


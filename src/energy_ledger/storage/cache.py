"""JSON-file caches for extracted records and daily production."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Mapping

import structlog
from pydantic import ValidationError

from ..models.records import RECORD_ADAPTER, ExtractedRecord

logger = structlog.get_logger(__name__)


class JsonFileStore:
    """A flat ``str -> JSON value`` mapping persisted to one file."""

    def __init__(self, path: Path | str, autoload: bool = True):
        self.path = Path(path)
        self._entries: dict[str, Any] = {}
        if autoload:
            self.load()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def load(self) -> None:
        """Load entries from disk; a missing or corrupt file leaves the store empty."""
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("cache_load_failed", path=str(self.path), error=str(exc))
            self._entries = {}
            return
        if not isinstance(data, dict):
            logger.warning("cache_load_failed", path=str(self.path), error="top-level value is not an object")
            self._entries = {}
            return
        self._entries = data
        logger.info("cache_loaded", path=str(self.path), entries=len(self._entries))

    def save(self) -> None:
        """Write all entries to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._entries, indent=2, sort_keys=True), encoding="utf-8")
        logger.info("cache_saved", path=str(self.path), entries=len(self._entries))


class RecordCache(JsonFileStore):
    """Extracted records keyed by document identifier.

    Entries that no longer validate as a record (older layouts, manual edits)
    are treated as misses so the document is parsed again.
    """

    def get(self, document_id: str) -> ExtractedRecord | None:
        raw = self._entries.get(document_id)
        if raw is None:
            return None
        try:
            return RECORD_ADAPTER.validate_python(raw)
        except ValidationError as exc:
            logger.warning("record_cache_entry_invalid", document_id=document_id, errors=exc.error_count())
            return None

    def set(self, document_id: str, record: ExtractedRecord) -> None:
        self._entries[document_id] = record.model_dump(mode="json")


class DailyProductionCache(JsonFileStore):
    """Daily production (kWh) keyed by ISO date."""

    def as_mapping(self) -> dict[date, float]:
        series: dict[date, float] = {}
        for key, value in self._entries.items():
            try:
                series[date.fromisoformat(key)] = float(value)
            except (TypeError, ValueError):
                logger.warning("production_cache_entry_invalid", key=key)
        return series

    def update(self, daily_production: Mapping[date, float]) -> None:
        for day, kwh in daily_production.items():
            self._entries[day.isoformat()] = kwh

    def earliest_date(self) -> date | None:
        series = self.as_mapping()
        return min(series) if series else None

    def latest_date(self) -> date | None:
        series = self.as_mapping()
        return max(series) if series else None

"""Pipeline orchestrator: documents → records → monthly buckets → summaries."""
from __future__ import annotations

from datetime import date, timedelta

import structlog
from pydantic import BaseModel, Field

from .clients.production import DailyProductionClient, ProductionApiError
from .config import Settings
from .extraction.registry import BillParser
from .models.ledger import MonthlySummary
from .models.records import ElectricRecord, ExtractedRecord, SourceType
from .reconciliation.engine import ReconciliationEngine
from .sources.local import DocumentRef, LocalDocumentSource
from .storage.cache import DailyProductionCache, RecordCache
from .utils.hashing import compute_file_hash

logger = structlog.get_logger(__name__)

# Electric first so the grid bill's period bounds are in place before the
# other sources share its buckets; order within a type is oldest first.
SOURCE_ORDER = (SourceType.ELECTRIC, SourceType.SOLAR, SourceType.GAS)


class LedgerResult(BaseModel):
    """Monthly summaries plus what happened to each document in the batch."""

    summaries: list[MonthlySummary] = Field(default_factory=list)
    documents_seen: int = 0
    records_extracted: int = 0
    cache_hits: int = 0
    duplicates_skipped: int = 0
    failures: list[str] = Field(default_factory=list)
    production_days: int = 0

    @property
    def failure_count(self) -> int:
        return len(self.failures)


def production_window(records: list[ExtractedRecord]) -> tuple[date, date] | None:
    """Date range of daily production needed to reconcile *records*.

    Starts at the first of the month before the earliest billing period (or
    bill date), one day early for the billing-cycle shift; ends at the latest
    bill date.
    """
    if not records:
        return None

    starts: list[date] = []
    for record in records:
        if isinstance(record, ElectricRecord) and record.period_start is not None:
            starts.append(record.period_start)
        starts.append(record.bill_date)

    earliest = min(starts) - timedelta(days=1)
    start = (earliest.replace(day=1) - timedelta(days=1)).replace(day=1)
    end = max(record.bill_date for record in records)
    return start, end


class LedgerPipeline:
    """Builds the monthly energy ledger from bill documents."""

    def __init__(
        self,
        settings: Settings,
        source: LocalDocumentSource | None = None,
        parser: BillParser | None = None,
        record_cache: RecordCache | None = None,
        production_cache: DailyProductionCache | None = None,
        production_client: DailyProductionClient | None = None,
    ):
        self.settings = settings
        self.source = source or LocalDocumentSource(
            settings.documents_path,
            {source_type: settings.folder_for(source_type) for source_type in SourceType},
        )
        self.parser = parser or BillParser()
        self.record_cache = record_cache if record_cache is not None else RecordCache(settings.record_cache_path)
        self.production_cache = (
            production_cache if production_cache is not None
            else DailyProductionCache(settings.production_cache_path)
        )
        self.production_client = production_client

    # ── Extraction ─────────────────────────────────────────────────────────

    def collect_records(self, result: LedgerResult) -> list[ExtractedRecord]:
        """Extract (or load from cache) one record per distinct document.

        A failed document is recorded in ``result.failures`` and skipped.
        """
        records: list[ExtractedRecord] = []
        seen: set[str] = set()

        for source_type in SOURCE_ORDER:
            batch: list[ExtractedRecord] = []
            for ref in self.source.list_documents(source_type):
                result.documents_seen += 1
                record = self._load_record(ref, seen, result)
                if record is not None:
                    batch.append(record)

            batch.sort(key=lambda r: r.bill_date)
            records.extend(batch)
            logger.info("source_records_collected", source_type=source_type.value, records=len(batch))

        return records

    def _load_record(self, ref: DocumentRef, seen: set[str], result: LedgerResult) -> ExtractedRecord | None:
        try:
            raw_bytes = self.source.read(ref)
        except OSError as e:
            logger.error("document_read_failed", document=ref.name, error=str(e))
            result.failures.append(ref.name)
            return None

        document_id = compute_file_hash(raw_bytes)
        if document_id in seen:
            logger.info("document_duplicate_skipped", document=ref.name, document_id=document_id[:16])
            result.duplicates_skipped += 1
            return None
        seen.add(document_id)

        cached = self.record_cache.get(document_id)
        if cached is not None and cached.source_type == ref.source_type:
            result.cache_hits += 1
            return cached

        record = self.parser.extract(ref.source_type, raw_bytes)
        if record is None:
            logger.error("document_extraction_failed", document=ref.name, source_type=ref.source_type.value)
            result.failures.append(ref.name)
            return None

        self.record_cache.set(document_id, record)
        result.records_extracted += 1
        return record

    # ── Daily production ──────────────────────────────────────────────────

    async def load_daily_production(self, records: list[ExtractedRecord]) -> dict[date, float] | None:
        """Refresh the cached daily series from the API when configured.

        Returns the cached series (``None`` when empty). API failures are
        logged and the cached series is used as is.
        """
        window = production_window(records)
        if self.production_client is not None and window is not None:
            try:
                await self._refresh_production(*window)
            except (ProductionApiError, ValueError) as e:
                logger.error("daily_production_refresh_failed", error=str(e))

        series = self.production_cache.as_mapping()
        return series or None

    async def _refresh_production(self, start: date, end: date) -> None:
        client = self.production_client
        if client.site_id is None:
            await client.init()
        if client.system_start is not None and start < client.system_start:
            start = client.system_start

        earliest, latest = self.production_cache.earliest_date(), self.production_cache.latest_date()
        if earliest is not None and latest is not None and earliest <= start:
            start = max(start, latest + timedelta(days=1))
        if start > end:
            logger.info("daily_production_cache_current", latest=latest.isoformat() if latest else None)
            return

        fetched = await client.get_daily_production(start, end)
        self.production_cache.update(fetched)
        self.production_cache.save()

    # ── Run ───────────────────────────────────────────────────────────────

    async def run(self) -> LedgerResult:
        """Run the full ledger build."""
        result = LedgerResult()
        logger.info("pipeline_start", documents_path=str(self.settings.documents_path))

        records = self.collect_records(result)
        self.record_cache.save()

        engine = ReconciliationEngine(
            shift_day=self.settings.bucket_shift_day,
            production_shift_days=self.settings.production_shift_days,
            therm_kwh_factor=self.settings.therm_kwh_factor,
        )
        engine.add_records(records)

        daily_production = await self.load_daily_production(records)
        if daily_production is not None:
            engine.set_daily_production(daily_production)
            result.production_days = len(daily_production)

        result.summaries = engine.compute_metrics()

        logger.info(
            "pipeline_complete",
            documents=result.documents_seen,
            extracted=result.records_extracted,
            cache_hits=result.cache_hits,
            duplicates=result.duplicates_skipped,
            failures=result.failure_count,
            months=len(result.summaries),
        )
        return result

"""Monthly reconciliation of grid, solar and gas records."""
from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping

import structlog

from ..models.ledger import MonthlyBucket, MonthlySummary
from ..models.records import ElectricRecord, ExtractedRecord, GasRecord, SolarRecord
from .metrics import PRODUCTION_SHIFT_DAYS, THERM_KWH_FACTOR, summarize_bucket
from .months import BUCKET_SHIFT_DAY, month_key

logger = structlog.get_logger(__name__)


class ReconciliationEngine:
    """Accumulates records into monthly buckets and derives monthly summaries.

    Created empty, fed by sequential ``add_record`` calls, then read with
    ``compute_metrics``. Summing is order independent; the credit balance and
    billing period are last-write-wins, so electric records should be added
    oldest to newest. Adding the same record twice counts it twice.
    """

    def __init__(
        self,
        shift_day: int = BUCKET_SHIFT_DAY,
        production_shift_days: int = PRODUCTION_SHIFT_DAYS,
        therm_kwh_factor: float = THERM_KWH_FACTOR,
    ):
        self.shift_day = shift_day
        self.production_shift_days = production_shift_days
        self.therm_kwh_factor = therm_kwh_factor
        self._buckets: dict[str, MonthlyBucket] = {}
        self._daily_production: dict[date, float] | None = None

    @property
    def buckets(self) -> dict[str, MonthlyBucket]:
        return self._buckets

    def _bucket_for(self, day: date) -> MonthlyBucket:
        key = month_key(day, self.shift_day)
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = MonthlyBucket(month=key)
            self._buckets[key] = bucket
        return bucket

    def add_record(self, record: ExtractedRecord) -> str:
        """Add one record to its month; returns the bucket key."""
        if not isinstance(record, (ElectricRecord, SolarRecord, GasRecord)):
            raise TypeError(f"Unsupported record type: {type(record).__name__}")

        bucket = self._bucket_for(record.bill_date)
        totals, snapshot = bucket.totals, bucket.snapshot

        if isinstance(record, ElectricRecord):
            totals.electric_cost += record.cost
            totals.imported_kwh += record.imported_kwh
            totals.exported_kwh += record.exported_kwh
            totals.meter_production_kwh += record.meter_production_kwh
            if record.credit_balance > 0:
                snapshot.credit_balance = record.credit_balance
            if record.period_start is not None:
                snapshot.period_start = record.period_start
            if record.period_end is not None:
                snapshot.period_end = record.period_end
        elif isinstance(record, SolarRecord):
            totals.solar_cost += record.cost
            totals.solar_production_kwh += record.production_kwh
        else:
            totals.gas_cost += record.cost
            totals.gas_therms += record.therms

        return bucket.month

    def add_records(self, records: Iterable[ExtractedRecord]) -> None:
        for record in records:
            self.add_record(record)

    def set_daily_production(self, daily_production: Mapping[date, float]) -> None:
        """Install the externally sourced daily production series (date -> kWh)."""
        if self._daily_production is not None:
            logger.warning("daily_production_replaced", previous_days=len(self._daily_production))
        self._daily_production = dict(daily_production)
        logger.info("daily_production_set", days=len(self._daily_production))

    def compute_metrics(self) -> list[MonthlySummary]:
        """Return one summary per month, sorted by ``YYYY-MM`` key."""
        return [
            summarize_bucket(
                self._buckets[key],
                self._daily_production,
                shift_days_back=self.production_shift_days,
                therm_kwh_factor=self.therm_kwh_factor,
            )
            for key in sorted(self._buckets)
        ]

    def get_monthly_summaries(self) -> list[MonthlySummary]:
        return self.compute_metrics()

"""Solar provider bill extractor."""
from __future__ import annotations

from datetime import date

import structlog

from ..models.records import SolarRecord, SourceType
from ..parsing.dates import infer_billing_year, parse_month_name, parse_slash_date
from ..parsing.numbers import parse_amount, parse_energy
from .base import BillExtractor, ExtractionError, first_match, pattern

logger = structlog.get_logger(__name__)

# --------------------------------------------------
# Due date anchors the year: "Due Date 12/05/2024"
# --------------------------------------------------
DUE_DATE_PATTERNS = [
    pattern("due_date", r"Due\s+Date\s+(\d{1,2}/\d{1,2}/\d{4})", lambda m: parse_slash_date(m.group(1))),
]

# --------------------------------------------------
# Billing period prints month/day only: "Billing Period Oct 15 - Nov 14".
# Returns (end_month, end_day); the year is inferred from the due date.
# --------------------------------------------------
BILLING_PERIOD_PATTERNS = [
    pattern(
        "billing_period_end",
        r"Billing\s+Period\s+[A-Za-z]{3}\s+\d{1,2}\s*-\s*([A-Za-z]{3})\s+(\d{1,2})",
        lambda m: (parse_month_name(m.group(1)), int(m.group(2))),
    ),
]

# Bills without a billing period carry a full bill date
BILL_DATE_PATTERNS = [
    pattern("bill_date", r"Bill\s+Date[:\s]+(\d{1,2}/\d{1,2}/\d{4})", lambda m: parse_slash_date(m.group(1))),
]

# --------------------------------------------------
# Cost: "Total Due" may sit a few lines above its amount.
# Flat-rate statements only show "Monthly Charge $xx.xx".
# --------------------------------------------------
COST_PATTERNS = [
    pattern("total_due", r"Total\s+Due[\s\S]*?\$([\d,]+\.\d{2})", lambda m: parse_amount(m.group(1))),
    pattern("monthly_charge", r"Monthly\s+Charge\s*\$([\d,]+\.\d{2})", lambda m: parse_amount(m.group(1))),
]

PRODUCTION_PATTERNS = [
    pattern("electricity_produced", r"Electricity\s+Produced[\s\S]*?([\d,]+)\s*kWh", lambda m: parse_energy(m.group(1))),
]


class SolarBillExtractor(BillExtractor):
    source_type = SourceType.SOLAR

    def __init__(self, today: date | None = None):
        self._today = today

    def parse_text(self, text: str) -> SolarRecord:
        bill_date = self._resolve_bill_date(text)
        if bill_date is None:
            raise ExtractionError("solar bill has no billing period, bill date or due date")

        record = SolarRecord(
            bill_date=bill_date,
            cost=first_match(COST_PATTERNS, text) or 0.0,
            production_kwh=first_match(PRODUCTION_PATTERNS, text) or 0.0,
        )
        logger.debug("solar_bill_parsed", bill_date=bill_date.isoformat(), production=record.production_kwh)
        return record

    def _resolve_bill_date(self, text: str) -> date | None:
        due_date = first_match(DUE_DATE_PATTERNS, text)

        period_end = first_match(BILLING_PERIOD_PATTERNS, text)
        if period_end is not None:
            month, day = period_end
            year = infer_billing_year(month, due_date, today=self._today)
            try:
                return date(year, month, day)
            except ValueError as e:
                logger.warning("solar_period_end_invalid", year=year, month=month, day=day, error=str(e))

        return first_match(BILL_DATE_PATTERNS, text) or due_date

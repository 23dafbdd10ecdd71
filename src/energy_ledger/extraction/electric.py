"""Grid electric bill (net metering) extractor."""
from __future__ import annotations

from datetime import date

import structlog

from ..models.records import ElectricRecord, SourceType
from ..parsing.dates import parse_long_date
from ..parsing.numbers import parse_amount, parse_energy
from .base import BillExtractor, ExtractionError, first_match, pattern

logger = structlog.get_logger(__name__)

_LONG_DATE = r"[A-Za-z]{3}\s+\d{1,2},?\s+\d{4}"

# --------------------------------------------------
# Billing period
# Example:
# BILLING PERIOD            PAGE 1 of 3
# Oct 15, 2024 to Nov 14, 2024
# Page headers and line breaks can sit between the label and the dates.
# --------------------------------------------------
PERIOD_PATTERNS = [
    pattern(
        "billing_period_range",
        rf"BILLING PERIOD[\s\S]*?({_LONG_DATE})\s+to\s+({_LONG_DATE})",
        lambda m: (parse_long_date(m.group(1)), parse_long_date(m.group(2))),
    ),
    # Older bills: start date unreadable, only the "to" date survives
    pattern(
        "billing_period_end_only",
        rf"BILLING PERIOD[\s\S]*?to\s+({_LONG_DATE})",
        lambda m: (None, parse_long_date(m.group(1))),
    ),
]

# --------------------------------------------------
# Cost: "Current Charges + 123.45" is this cycle's delta.
# "Total Amount Due $123.45" includes carried balances, so only a fallback.
# --------------------------------------------------
COST_PATTERNS = [
    pattern("current_charges", r"Current\s+Charges\s*\+\s*([\d,]+\.\d{2})", lambda m: parse_amount(m.group(1))),
    pattern("total_due", r"Total\s+(?:Amount)?\s*Due\s*:?\s*\$([\d,]+\.\d{2})", lambda m: parse_amount(m.group(1))),
]

# --------------------------------------------------
# Net usage (signed): the "Total Usage" line of the Delivery Services
# section. Negative means more was sent to the grid than taken.
# --------------------------------------------------
NET_USAGE_PATTERNS = [
    pattern(
        "delivery_total_usage",
        r"Delivery\s+Services[\s\S]*?Total\s+Usage[\s\S]*?([-\d,]+)\s*kWh",
        lambda m: parse_energy(m.group(1)),
    ),
]

# --------------------------------------------------
# Meter-reported production: the "Energy" line of the incentive program
# section. Printed negative on some bills; stored as a magnitude.
# --------------------------------------------------
PRODUCTION_PATTERNS = [
    pattern(
        "smart_program_energy",
        r"MA\s+SMART\s+Incentive\s+Program[\s\S]*?Energy[\s\S]*?([-\d,]+)\s*kWh",
        lambda m: abs(parse_energy(m.group(1))),
    ),
]

# --------------------------------------------------
# Credit bank: "Credit Balance -$ 1,234.56" (rolling balance, not a delta)
# --------------------------------------------------
CREDIT_PATTERNS = [
    pattern("credit_balance", r"Credit\s+Balance\s*-\$\s*([\d,]+\.\d{2})", lambda m: abs(parse_amount(m.group(1)))),
]


class ElectricBillExtractor(BillExtractor):
    source_type = SourceType.ELECTRIC

    def parse_text(self, text: str) -> ElectricRecord:
        period: tuple[date | None, date] | None = first_match(PERIOD_PATTERNS, text)
        if period is None:
            raise ExtractionError("electric bill has no billing period end date")
        period_start, period_end = period

        net_usage = first_match(NET_USAGE_PATTERNS, text) or 0.0
        record = ElectricRecord.from_net_usage(
            net_usage,
            bill_date=period_end,
            period_start=period_start,
            # End-only fallback dates the bill but leaves both bounds unset
            period_end=period_end if period_start is not None else None,
            cost=first_match(COST_PATTERNS, text) or 0.0,
            meter_production_kwh=first_match(PRODUCTION_PATTERNS, text) or 0.0,
            credit_balance=first_match(CREDIT_PATTERNS, text) or 0.0,
        )
        logger.debug(
            "electric_bill_parsed",
            bill_date=record.bill_date.isoformat(),
            net_usage=net_usage,
            cost=record.cost,
        )
        return record

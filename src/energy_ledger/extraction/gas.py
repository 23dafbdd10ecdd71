"""Gas bill extractor."""
from __future__ import annotations

import structlog

from ..models.records import GasRecord, SourceType
from ..parsing.dates import parse_slash_date
from ..parsing.numbers import parse_amount, parse_energy
from .base import BillExtractor, ExtractionError, first_match, pattern

logger = structlog.get_logger(__name__)

# Statement Date: 12/02/24 (two-digit years on recent bills, four on older ones)
DATE_PATTERNS = [
    pattern("statement_date", r"Statement\s+Date:\s+(\d{1,2}/\d{1,2}/\d{2,4})", lambda m: parse_slash_date(m.group(1))),
]

COST_PATTERNS = [
    pattern("total_amount_due", r"Total\s+Amount\s+Due\s*\$([\d,]+\.\d{2})", lambda m: parse_amount(m.group(1))),
]

# --------------------------------------------------
# Usage closes the meter calculation line:
# "... x 1.0370 = 84 Therms Billed Usage"
# Some statements drop the equation and print only the figure.
# --------------------------------------------------
THERMS_PATTERNS = [
    pattern("therms_equation", r"=\s*([\d,]+)\s*Therms\s+Billed\s+Usage", lambda m: parse_energy(m.group(1))),
    pattern("therms_billed", r"([\d,]+)\s*Therms\s+Billed\s+Usage", lambda m: parse_energy(m.group(1))),
]


class GasBillExtractor(BillExtractor):
    source_type = SourceType.GAS

    def parse_text(self, text: str) -> GasRecord:
        bill_date = first_match(DATE_PATTERNS, text)
        if bill_date is None:
            raise ExtractionError("gas bill has no statement date")

        record = GasRecord(
            bill_date=bill_date,
            cost=first_match(COST_PATTERNS, text) or 0.0,
            therms=first_match(THERMS_PATTERNS, text) or 0.0,
        )
        logger.debug("gas_bill_parsed", bill_date=bill_date.isoformat(), therms=record.therms)
        return record

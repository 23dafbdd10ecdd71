"""Test solar provider bill extraction."""
from datetime import date

import pytest
from energy_ledger.extraction.base import ExtractionError
from energy_ledger.extraction.solar import SolarBillExtractor
from energy_ledger.models.records import SourceType
from tests.factories import SOLAR_BILL_TEXT


@pytest.fixture
def extractor():
    return SolarBillExtractor(today=date(2025, 6, 1))


class TestSolarBill:
    def test_full_bill(self, extractor):
        record = extractor.parse_text(SOLAR_BILL_TEXT)

        assert record.source_type == SourceType.SOLAR
        assert record.bill_date == date(2024, 11, 14)
        assert record.cost == 120.50
        assert record.production_kwh == 845.0

    def test_december_period_due_in_january(self, extractor):
        text = "Billing Period Nov 15 - Dec 14\nDue Date 01/05/2025\nElectricity Produced 410 kWh"
        assert extractor.parse_text(text).bill_date == date(2024, 12, 14)

    def test_january_period_due_in_february(self, extractor):
        text = "Billing Period Dec 15 - Jan 14\nDue Date 02/05/2025"
        assert extractor.parse_text(text).bill_date == date(2025, 1, 14)

    def test_no_due_date_uses_current_year(self, extractor):
        text = "Billing Period Apr 15 - May 14\nMonthly Charge $120.50"
        assert extractor.parse_text(text).bill_date == date(2025, 5, 14)

    def test_bill_date_fallback(self, extractor):
        text = "Bill Date: 11/20/2024\nDue Date 12/05/2024\nMonthly Charge $120.50"
        assert extractor.parse_text(text).bill_date == date(2024, 11, 20)

    def test_due_date_fallback(self, extractor):
        text = "Due Date 12/05/2024\nMonthly Charge $120.50"
        assert extractor.parse_text(text).bill_date == date(2024, 12, 5)

    def test_monthly_charge_fallback(self, extractor):
        text = "Billing Period Oct 15 - Nov 14\nDue Date 12/05/2024\nMonthly Charge $1,120.50"
        assert extractor.parse_text(text).cost == 1120.50

    def test_production_with_separator(self, extractor):
        text = "Due Date 12/05/2024\nElectricity Produced this period: 1,045 kWh"
        assert extractor.parse_text(text).production_kwh == 1045.0

    def test_no_dates_raises(self, extractor):
        with pytest.raises(ExtractionError):
            extractor.parse_text("Electricity Produced 845 kWh\nMonthly Charge $120.50")

    def test_extract_no_dates_returns_none(self, extractor):
        assert extractor.extract(b"Electricity Produced 845 kWh") is None

"""Test gas bill extraction."""
from datetime import date

import pytest
from energy_ledger.extraction.base import ExtractionError
from energy_ledger.extraction.gas import GasBillExtractor
from energy_ledger.models.records import SourceType
from tests.factories import GAS_BILL_TEXT


@pytest.fixture
def extractor():
    return GasBillExtractor()


class TestGasBill:
    def test_full_bill(self, extractor):
        record = extractor.parse_text(GAS_BILL_TEXT)

        assert record.source_type == SourceType.GAS
        assert record.bill_date == date(2024, 12, 2)
        assert record.cost == 98.76
        assert record.therms == 87.0

    def test_four_digit_year(self, extractor):
        text = "Statement Date: 1/3/2023\nTotal Amount Due $1,204.10"
        record = extractor.parse_text(text)
        assert record.bill_date == date(2023, 1, 3)
        assert record.cost == 1204.10

    def test_therms_without_equation(self, extractor):
        text = "Statement Date: 12/02/24\nUsage: 1,087 Therms Billed Usage"
        assert extractor.parse_text(text).therms == 1087.0

    def test_missing_usage_defaults_to_zero(self, extractor):
        record = extractor.parse_text("Statement Date: 12/02/24")
        assert record.therms == 0.0
        assert record.cost == 0.0

    def test_missing_date_raises(self, extractor):
        with pytest.raises(ExtractionError):
            extractor.parse_text("Total Amount Due $98.76")

    def test_invalid_date_raises(self, extractor):
        with pytest.raises(ExtractionError):
            extractor.parse_text("Statement Date: 13/45/24")

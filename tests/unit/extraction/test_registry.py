"""Test source-type dispatch and document-level failure handling."""
from datetime import date

import pytest
from energy_ledger.extraction.base import UnknownSourceTypeError, first_match, pattern
from energy_ledger.models.records import ElectricRecord, GasRecord, SolarRecord, SourceType
from energy_ledger.parsing.numbers import parse_amount
from tests.factories import ELECTRIC_BILL_TEXT, GAS_BILL_TEXT, SOLAR_BILL_TEXT


class TestBillParser:
    def test_dispatch_by_source_type(self, bill_parser):
        assert isinstance(bill_parser.extract(SourceType.ELECTRIC, ELECTRIC_BILL_TEXT.encode()), ElectricRecord)
        assert isinstance(bill_parser.extract(SourceType.SOLAR, SOLAR_BILL_TEXT.encode()), SolarRecord)
        assert isinstance(bill_parser.extract(SourceType.GAS, GAS_BILL_TEXT.encode()), GasRecord)

    def test_accepts_string_source_type(self, bill_parser):
        record = bill_parser.parse_text("gas", GAS_BILL_TEXT)
        assert record.bill_date == date(2024, 12, 2)

    def test_unknown_source_type_raises(self, bill_parser):
        with pytest.raises(UnknownSourceTypeError):
            bill_parser.extract("water", b"Statement Date: 12/02/24")

    def test_extractor_reused(self, bill_parser):
        assert bill_parser.get_extractor(SourceType.GAS) is bill_parser.get_extractor("gas")

    def test_image_without_text_returns_none(self, bill_parser):
        assert bill_parser.extract(SourceType.GAS, b"\x89PNG\r\n\x1a\n\x00\x00") is None

    def test_undecodable_bytes_return_none(self, bill_parser):
        assert bill_parser.extract(SourceType.GAS, b"\xff\xfe\xfa\x00 not text") is None

    def test_broken_pdf_returns_none(self, bill_parser):
        assert bill_parser.extract(SourceType.ELECTRIC, b"%PDF-1.4\nthis is not really a pdf") is None

    def test_empty_document_returns_none(self, bill_parser):
        assert bill_parser.extract(SourceType.SOLAR, b"") is None


class TestFirstMatch:
    PATTERNS = [
        pattern("primary", r"Primary\s+([\d,.]+)", lambda m: parse_amount(m.group(1))),
        pattern("fallback", r"Fallback\s+([\d,]+\.\d{2})", lambda m: parse_amount(m.group(1))),
    ]

    def test_first_pattern_wins(self):
        assert first_match(self.PATTERNS, "Fallback 2.00 Primary 1.00") == 1.00

    def test_falls_back_when_first_missing(self):
        assert first_match(self.PATTERNS, "Fallback 2.00") == 2.00

    def test_malformed_match_falls_through(self):
        assert first_match(self.PATTERNS, "Primary ,., Fallback 2.00") == 2.00

    def test_nothing_matches(self):
        assert first_match(self.PATTERNS, "no figures here") is None

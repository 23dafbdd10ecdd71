"""Source-type dispatch for the bill extractors."""
from __future__ import annotations

from ..models.records import ExtractedRecord, SourceType
from .base import BillExtractor, UnknownSourceTypeError
from .electric import ElectricBillExtractor
from .gas import GasBillExtractor
from .solar import SolarBillExtractor

EXTRACTORS: dict[SourceType, type[BillExtractor]] = {
    SourceType.ELECTRIC: ElectricBillExtractor,
    SourceType.SOLAR: SolarBillExtractor,
    SourceType.GAS: GasBillExtractor,
}


class BillParser:
    """Routes documents to the extractor for their source type.

    Extractors are created on first use and reused afterwards.
    """

    def __init__(self):
        self._extractors: dict[SourceType, BillExtractor] = {}

    def get_extractor(self, source_type: SourceType | str) -> BillExtractor:
        try:
            key = SourceType(source_type)
        except ValueError:
            raise UnknownSourceTypeError(f"No extractor for source type: {source_type!r}") from None

        if key not in self._extractors:
            self._extractors[key] = EXTRACTORS[key]()
        return self._extractors[key]

    def extract(self, source_type: SourceType | str, raw_bytes: bytes) -> ExtractedRecord | None:
        """Extract a record from raw bytes; ``None`` when the document is unusable."""
        return self.get_extractor(source_type).extract(raw_bytes)

    def parse_text(self, source_type: SourceType | str, text: str) -> ExtractedRecord:
        """Extract a record from already-extracted text; raises ``ExtractionError``."""
        return self.get_extractor(source_type).parse_text(text)

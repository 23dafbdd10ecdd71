"""Shared machinery for vendor bill extractors.

Each vendor module lists, per field, the patterns it knows in priority order.
``first_match`` walks that list and returns the first value that both matches
and converts; the order encodes how a vendor's layout drifted over time.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Sequence

import structlog

from ..models.records import ExtractedRecord, SourceType
from ..utils.pdf import extract_document_text

logger = structlog.get_logger(__name__)


class ExtractionError(Exception):
    """A document yielded no usable record (missing date, unreadable file)."""


class DocumentDecodeError(ExtractionError):
    """No text could be extracted from the document bytes."""


class UnknownSourceTypeError(ValueError):
    """Extraction was requested for a source type with no extractor."""


@dataclass(frozen=True)
class FieldPattern:
    """One candidate location for a field: a regex plus its value converter."""

    name: str
    regex: re.Pattern[str]
    convert: Callable[[re.Match[str]], Any]


def pattern(name: str, regex: str, convert: Callable[[re.Match[str]], Any], flags: int = re.IGNORECASE) -> FieldPattern:
    return FieldPattern(name=name, regex=re.compile(regex, flags), convert=convert)


def first_match(patterns: Sequence[FieldPattern], text: str) -> Any | None:
    """Return the converted value of the first pattern that matches *text*.

    A match whose value does not convert (``ValueError``) is logged and the
    next pattern is tried. Returns ``None`` when nothing usable is found.
    """
    for candidate in patterns:
        m = candidate.regex.search(text)
        if m is None:
            continue
        try:
            return candidate.convert(m)
        except ValueError as exc:
            logger.warning(
                "field_value_malformed",
                pattern=candidate.name,
                fragment=m.group(0)[-80:],
                error=str(exc),
            )
    return None


class BillExtractor(ABC):
    """Turns one vendor's bill into a typed record."""

    source_type: ClassVar[SourceType]

    def extract(self, raw_bytes: bytes) -> ExtractedRecord | None:
        """Extract a record from raw document bytes.

        Never raises: undecodable documents and bills without a date are
        logged and yield ``None``.
        """
        try:
            try:
                text = extract_document_text(raw_bytes)
            except Exception as e:
                raise DocumentDecodeError(str(e)) from e
            return self.parse_text(text)
        except ExtractionError as e:
            logger.warning("extraction_failed", source_type=self.source_type.value, error=str(e))
            return None
        except Exception as e:
            logger.error("extraction_error", source_type=self.source_type.value, error=str(e))
            return None

    @abstractmethod
    def parse_text(self, text: str) -> ExtractedRecord:
        """Build a record from extracted text; raise ``ExtractionError`` without a date."""
        ...

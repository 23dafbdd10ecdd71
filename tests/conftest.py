"""Shared test fixtures."""
import pytest

from energy_ledger.config import Settings
from energy_ledger.extraction.registry import BillParser
from energy_ledger.reconciliation.engine import ReconciliationEngine


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every path into a temporary directory."""
    return Settings(
        documents_path=tmp_path / "bills",
        record_cache_path=tmp_path / "bill_cache.json",
        production_cache_path=tmp_path / "production_cache.json",
        output_path=tmp_path / "energy_ledger.json",
    )


@pytest.fixture
def bill_parser():
    return BillParser()


@pytest.fixture
def engine():
    return ReconciliationEngine()

"""Monthly ledger models used by the reconciliation engine.

A bucket keeps summed totals and last-write-wins fields in separate models so
that snapshot values (credit bank, billing period) never go through the
summation path.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field


class ProductionSource(StrEnum):
    DAILY_SERIES = "daily_series"
    METER = "meter"
    INVERTER = "inverter"


# ---------------------------------------------------------------------------
# Accumulators
# ---------------------------------------------------------------------------


class BucketTotals(BaseModel):
    """Values summed across every record assigned to the month."""

    electric_cost: float = 0.0
    imported_kwh: float = 0.0
    exported_kwh: float = 0.0
    meter_production_kwh: float = 0.0
    solar_cost: float = 0.0
    solar_production_kwh: float = 0.0
    gas_cost: float = 0.0
    gas_therms: float = 0.0


class BillingSnapshot(BaseModel):
    """Values overwritten by the most recent electric record, never summed."""

    credit_balance: float = 0.0
    period_start: date | None = None
    period_end: date | None = None


class MonthlyBucket(BaseModel):
    """Mutable accumulator for one ``YYYY-MM`` key."""

    month: str
    totals: BucketTotals = Field(default_factory=BucketTotals)
    snapshot: BillingSnapshot = Field(default_factory=BillingSnapshot)


# ---------------------------------------------------------------------------
# Derived output
# ---------------------------------------------------------------------------


class MonthlySummary(BaseModel):
    """A bucket plus the metrics derived from it."""

    month: str
    totals: BucketTotals
    snapshot: BillingSnapshot

    billing_period_production: float | None = None
    production_source: ProductionSource
    total_production: float
    self_use: float
    true_consumption: float
    net_position: float
    total_cost: float
    effective_rate: float
    gas_kwh_equivalent: float
    total_energy_cost: float
    total_energy_kwh: float

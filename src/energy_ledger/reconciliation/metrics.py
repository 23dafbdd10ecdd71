"""Derived monthly metrics: production source selection, self-use, rates.

Pure functions over one accumulated bucket. Order of derivation:

1. total production (daily series > meter > inverter)
2. self-use = max(0, production - export)
3. true consumption = self-use + import
4. net position = production - consumption
5. total electric cost = grid + solar
6. effective rate = cost / consumption (0 when no consumption)
7. gas kWh equivalent = therms x 29.3
8. totals across electric and gas
"""
from __future__ import annotations

import math
from datetime import date
from typing import Mapping

from ..models.ledger import MonthlyBucket, MonthlySummary, ProductionSource
from ..parsing.dates import shift_days
from .months import month_bounds

# Fixed therm conversion; the precise factor is 29.3071.
THERM_KWH_FACTOR = 29.3

# Daily inverter readings are stamped one day ahead of the grid meter's
# billing-period boundaries.
PRODUCTION_SHIFT_DAYS = 1


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def billing_period_production(
    bucket: MonthlyBucket,
    daily_production: Mapping[date, float],
    shift_days_back: int = PRODUCTION_SHIFT_DAYS,
) -> float:
    """Sum the daily series over the bucket's billing period, rounded to whole kWh.

    With both period bounds the window is ``[start - shift, end - shift]``
    inclusive; without them it is the bucket's calendar month.
    """
    start, end = bucket.snapshot.period_start, bucket.snapshot.period_end
    if start is not None and end is not None:
        window_start = shift_days(start, -shift_days_back)
        window_end = shift_days(end, -shift_days_back)
    else:
        window_start, window_end = month_bounds(bucket.month)

    total = sum(kwh for day, kwh in daily_production.items() if window_start <= day <= window_end)
    return _round_half_up(total)


def select_production(
    bucket: MonthlyBucket,
    daily_production: Mapping[date, float] | None,
    shift_days_back: int = PRODUCTION_SHIFT_DAYS,
) -> tuple[float, ProductionSource, float | None]:
    """Pick total production for a bucket.

    Returns ``(total_production, source, billing_period_sum)``; the sum is
    ``None`` when no daily series was supplied.
    """
    period_sum = None
    if daily_production is not None:
        period_sum = billing_period_production(bucket, daily_production, shift_days_back)
        if period_sum > 0:
            return period_sum, ProductionSource.DAILY_SERIES, period_sum

    if bucket.totals.meter_production_kwh > 0:
        return bucket.totals.meter_production_kwh, ProductionSource.METER, period_sum
    return bucket.totals.solar_production_kwh, ProductionSource.INVERTER, period_sum


def summarize_bucket(
    bucket: MonthlyBucket,
    daily_production: Mapping[date, float] | None = None,
    *,
    shift_days_back: int = PRODUCTION_SHIFT_DAYS,
    therm_kwh_factor: float = THERM_KWH_FACTOR,
) -> MonthlySummary:
    """Derive the monthly summary for one bucket."""
    totals = bucket.totals

    total_production, source, period_sum = select_production(bucket, daily_production, shift_days_back)
    self_use = max(0.0, total_production - totals.exported_kwh)
    true_consumption = self_use + totals.imported_kwh
    net_position = total_production - true_consumption

    total_cost = totals.electric_cost + totals.solar_cost
    effective_rate = total_cost / true_consumption if true_consumption > 0 else 0.0

    gas_kwh = totals.gas_therms * therm_kwh_factor

    return MonthlySummary(
        month=bucket.month,
        totals=totals.model_copy(),
        snapshot=bucket.snapshot.model_copy(),
        billing_period_production=period_sum,
        production_source=source,
        total_production=total_production,
        self_use=self_use,
        true_consumption=true_consumption,
        net_position=net_position,
        total_cost=total_cost,
        effective_rate=effective_rate,
        gas_kwh_equivalent=gas_kwh,
        total_energy_cost=total_cost + totals.gas_cost,
        total_energy_kwh=true_consumption + gas_kwh,
    )

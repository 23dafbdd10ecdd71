"""Typed records produced by the bill extractors.

One frozen model per source type, united by a discriminated union on
``source_type`` so cached JSON validates straight back into the right variant.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class SourceType(StrEnum):
    ELECTRIC = "electric"
    SOLAR = "solar"
    GAS = "gas"


# ---------------------------------------------------------------------------
# Record variants
# ---------------------------------------------------------------------------


class ElectricRecord(BaseModel):
    """Grid bill with net metering: import/export, meter production, credit bank."""

    model_config = ConfigDict(frozen=True)

    source_type: Literal[SourceType.ELECTRIC] = SourceType.ELECTRIC
    bill_date: date
    cost: float = Field(default=0.0, ge=0.0)
    imported_kwh: float = Field(default=0.0, ge=0.0)
    exported_kwh: float = Field(default=0.0, ge=0.0)
    meter_production_kwh: float = Field(default=0.0, ge=0.0)
    credit_balance: float = Field(default=0.0, ge=0.0)
    period_start: date | None = None
    period_end: date | None = None

    @model_validator(mode="after")
    def _check_net_direction(self) -> ElectricRecord:
        if self.imported_kwh > 0 and self.exported_kwh > 0:
            raise ValueError("imported_kwh and exported_kwh cannot both be positive")
        return self

    @classmethod
    def from_net_usage(cls, net_usage_kwh: float, **fields) -> ElectricRecord:
        """Split a signed net usage figure: positive is import, negative is export."""
        return cls(
            imported_kwh=net_usage_kwh if net_usage_kwh > 0 else 0.0,
            exported_kwh=-net_usage_kwh if net_usage_kwh < 0 else 0.0,
            **fields,
        )


class SolarRecord(BaseModel):
    """Solar provider bill: inverter-reported production and the monthly charge."""

    model_config = ConfigDict(frozen=True)

    source_type: Literal[SourceType.SOLAR] = SourceType.SOLAR
    bill_date: date
    cost: float = Field(default=0.0, ge=0.0)
    production_kwh: float = Field(default=0.0, ge=0.0)


class GasRecord(BaseModel):
    """Gas bill: therms billed and amount due."""

    model_config = ConfigDict(frozen=True)

    source_type: Literal[SourceType.GAS] = SourceType.GAS
    bill_date: date
    cost: float = Field(default=0.0, ge=0.0)
    therms: float = Field(default=0.0, ge=0.0)


ExtractedRecord = Annotated[
    Union[ElectricRecord, SolarRecord, GasRecord],
    Field(discriminator="source_type"),
]

RECORD_ADAPTER: TypeAdapter[ExtractedRecord] = TypeAdapter(ExtractedRecord)

"""Application configuration via environment variables with LEDGER_ prefix."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.records import SourceType


class Settings(BaseSettings):
    """Energy ledger configuration.

    All settings are read from environment variables prefixed with ``LEDGER_``.
    API tokens are wrapped in ``SecretStr`` so they are never accidentally
    logged or serialised.
    """

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = False

    # ── Bill documents (one folder per source type) ───────────────────────
    documents_path: Path = Path("./bills")
    electric_folder: str = "electric"
    solar_folder: str = "solar"
    gas_folder: str = "gas"

    # ── Caches & output ───────────────────────────────────────────────────
    record_cache_path: Path = Path(".bill_cache.json")
    production_cache_path: Path = Path(".production_cache.json")
    output_path: Path = Path("energy_ledger.json")

    # ── Reconciliation heuristics ─────────────────────────────────────────
    bucket_shift_day: int = Field(default=20, ge=1, le=28)
    production_shift_days: int = Field(default=1, ge=0)
    therm_kwh_factor: float = Field(default=29.3, gt=0.0)

    # ── Daily production API ──────────────────────────────────────────────
    # Leave the auth token empty to run from bills (and cached series) only
    production_api_url: str = "https://gateway.sunrun.com"
    production_auth_token: SecretStr = SecretStr("")
    production_refresh_token: SecretStr = SecretStr("")
    production_timeout: int = 30
    production_utc_offset: str = "-04:00"

    @property
    def production_api_enabled(self) -> bool:
        return bool(self.production_auth_token.get_secret_value())

    def folder_for(self, source_type: SourceType) -> str:
        return {
            SourceType.ELECTRIC: self.electric_folder,
            SourceType.SOLAR: self.solar_folder,
            SourceType.GAS: self.gas_folder,
        }[source_type]

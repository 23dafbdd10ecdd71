"""Solar provider performance API client: daily production series."""
from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

import httpx
import structlog

logger = structlog.get_logger(__name__)

# Default retry configuration
MAX_RETRIES = 3
RETRY_DELAYS = [1.0, 2.0, 4.0]

USER_PATH = "/portal-auth/get-user"
DAILY_PRODUCTION_PATH = "/performance-api/v1/site-production-daily/{site_id}"


class ProductionApiError(Exception):
    """The performance API rejected a request or returned an unusable payload."""


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class DailyProductionClient:
    """Async client for the solar provider's daily production endpoint.

    ``init()`` must be awaited before ``get_daily_production`` to resolve the
    site id and the system start date from the account.
    """

    def __init__(
        self,
        auth_token: str,
        refresh_token: str = "",
        base_url: str = "https://gateway.sunrun.com",
        timeout: int = 30,
        utc_offset: str = "-04:00",
        retry_delays: list[float] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not auth_token:
            raise ValueError("auth_token is required for the production API")

        self._utc_offset = utc_offset
        self._retry_delays = retry_delays or RETRY_DELAYS
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {auth_token}", "Refreshtoken": refresh_token},
            timeout=float(timeout),
            transport=transport,
        )
        self.site_id: str | None = None
        self.system_start: date | None = None

    async def __aenter__(self) -> DailyProductionClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        last_exception: Exception | None = None

        for attempt in range(MAX_RETRIES + 1):
            try:
                response = await self._client.get(path, params=params)
                if _is_retryable_status(response.status_code):
                    raise httpx.HTTPStatusError(
                        f"Retryable status {response.status_code}", request=response.request, response=response,
                    )
                if response.is_error:
                    raise ProductionApiError(
                        f"{path} failed: {response.status_code} {response.reason_phrase}"
                    )
                try:
                    return response.json()
                except ValueError as exc:
                    raise ProductionApiError(f"{path} returned invalid JSON") from exc

            except (httpx.TransportError, httpx.HTTPStatusError) as exc:
                last_exception = exc
                if attempt < MAX_RETRIES:
                    delay = self._retry_delays[min(attempt, len(self._retry_delays) - 1)]
                    logger.warning("production_api_retry", attempt=attempt + 1, delay=delay, path=path, error=str(exc))
                    await asyncio.sleep(delay)
                else:
                    logger.error("production_api_exhausted_retries", attempts=MAX_RETRIES + 1, path=path, error=str(exc))
            except httpx.HTTPError as exc:
                raise ProductionApiError(f"{path} failed: {exc}") from exc

        raise ProductionApiError(f"{path} failed after {MAX_RETRIES + 1} attempts: {last_exception}")

    async def init(self) -> None:
        """Resolve the site id and system start date from the account."""
        data = await self._get_json(USER_PATH)

        opportunities = data.get("opportunitiesWithContracts") if isinstance(data, dict) else None
        if not isinstance(opportunities, list) or not opportunities:
            raise ProductionApiError("No opportunities found in account")

        opportunity = opportunities[0]
        if not isinstance(opportunity, dict):
            raise ProductionApiError("Account opportunity is not an object")
        contract = opportunity.get("contract") or {}
        if not isinstance(contract, dict):
            raise ProductionApiError("Account contract is not an object")

        site_id = opportunity.get("prospect_id")
        start = contract.get("sunrunStart")
        if not site_id or not start:
            raise ProductionApiError("Account data has no site id or system start date")

        self.site_id = str(site_id)
        self.system_start = date.fromisoformat(str(start)[:10])
        logger.info("production_api_ready", site_id=self.site_id, system_start=self.system_start.isoformat())

    async def get_daily_production(self, start: date, end: date) -> dict[date, float]:
        """Fetch daily production (kWh) for the inclusive range ``[start, end]``."""
        if self.site_id is None:
            raise ProductionApiError("Client not initialised; await init() first")

        params = {
            "startDate": f"{start.isoformat()}T00:00:00.000{self._utc_offset}",
            "endDate": f"{end.isoformat()}T00:00:00.000{self._utc_offset}",
        }
        data = await self._get_json(DAILY_PRODUCTION_PATH.format(site_id=self.site_id), params=params)

        if not isinstance(data, list):
            logger.warning("production_api_unexpected_payload", payload_type=type(data).__name__)
            return {}

        series: dict[date, float] = {}
        for item in data:
            if not isinstance(item, dict):
                continue
            raw_day = item.get("date") or item.get("timestamp")
            if not isinstance(raw_day, str) or not raw_day:
                continue
            try:
                day = date.fromisoformat(raw_day[:10])
            except ValueError:
                logger.warning("production_api_bad_date", value=raw_day)
                continue
            try:
                series[day] = float(item.get("systemProduction") or 0.0)
            except (TypeError, ValueError):
                logger.warning("production_api_bad_value", day=day.isoformat(), value=item.get("systemProduction"))

        logger.info("production_api_fetched", start=start.isoformat(), end=end.isoformat(), days=len(series))
        return series

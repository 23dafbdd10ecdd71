"""Test the daily production API client against a mock transport."""
from datetime import date

import httpx
import pytest
from energy_ledger.clients.production import DailyProductionClient, ProductionApiError

USER_PAYLOAD = {
    "opportunitiesWithContracts": [
        {"prospect_id": "P-1234", "contract": {"sunrunStart": "2023-04-12T00:00:00.000Z"}},
    ],
}

DAILY_PAYLOAD = [
    {"date": "2024-10-14", "systemProduction": 21.5},
    {"timestamp": "2024-10-15T04:00:00.000Z", "systemProduction": 18.25},
    {"date": "2024-10-16", "systemProduction": None},
    {"date": "not-a-date", "systemProduction": 99.0},
    "garbage",
]


def make_client(handler, **kwargs) -> DailyProductionClient:
    return DailyProductionClient(
        auth_token="token-abc",
        refresh_token="refresh-xyz",
        base_url="https://api.example.test",
        retry_delays=[0.0],
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def routing_handler(requests: list[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/portal-auth/get-user":
            return httpx.Response(200, json=USER_PAYLOAD)
        if request.url.path == "/performance-api/v1/site-production-daily/P-1234":
            return httpx.Response(200, json=DAILY_PAYLOAD)
        return httpx.Response(404)
    return handler


class TestDailyProductionClient:
    def test_token_required(self):
        with pytest.raises(ValueError):
            DailyProductionClient(auth_token="")

    @pytest.mark.asyncio
    async def test_init_resolves_site(self):
        requests: list[httpx.Request] = []
        async with make_client(routing_handler(requests)) as client:
            await client.init()

        assert client.site_id == "P-1234"
        assert client.system_start == date(2023, 4, 12)
        assert requests[0].headers["Authorization"] == "Bearer token-abc"
        assert requests[0].headers["Refreshtoken"] == "refresh-xyz"

    @pytest.mark.asyncio
    async def test_daily_production_parsed(self):
        requests: list[httpx.Request] = []
        async with make_client(routing_handler(requests)) as client:
            await client.init()
            series = await client.get_daily_production(date(2024, 10, 14), date(2024, 10, 16))

        assert series == {
            date(2024, 10, 14): 21.5,
            date(2024, 10, 15): 18.25,
            date(2024, 10, 16): 0.0,
        }
        params = requests[-1].url.params
        assert params["startDate"] == "2024-10-14T00:00:00.000-04:00"
        assert params["endDate"] == "2024-10-16T00:00:00.000-04:00"

    @pytest.mark.asyncio
    async def test_requires_init(self):
        async with make_client(routing_handler([])) as client:
            with pytest.raises(ProductionApiError):
                await client.get_daily_production(date(2024, 10, 1), date(2024, 10, 31))

    @pytest.mark.asyncio
    async def test_retries_server_errors(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503)
            return httpx.Response(200, json=USER_PAYLOAD)

        async with make_client(handler) as client:
            await client.init()

        assert len(calls) == 2
        assert client.site_id == "P-1234"

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        async with make_client(handler) as client:
            with pytest.raises(ProductionApiError, match="after 4 attempts"):
                await client.init()

        assert len(calls) == 4

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(401)

        async with make_client(handler) as client:
            with pytest.raises(ProductionApiError, match="401"):
                await client.init()

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_account_without_opportunities(self):
        def handler(request):
            return httpx.Response(200, json={"opportunitiesWithContracts": []})

        async with make_client(handler) as client:
            with pytest.raises(ProductionApiError, match="No opportunities"):
                await client.init()

    @pytest.mark.asyncio
    async def test_unexpected_payload_is_empty_series(self):
        def handler(request):
            if request.url.path == "/portal-auth/get-user":
                return httpx.Response(200, json=USER_PAYLOAD)
            return httpx.Response(200, json={"error": "maintenance"})

        async with make_client(handler) as client:
            await client.init()
            assert await client.get_daily_production(date(2024, 10, 1), date(2024, 10, 2)) == {}

    @pytest.mark.asyncio
    async def test_other_http_errors_wrapped(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.TooManyRedirects("loop", request=request)

        async with make_client(handler) as client:
            with pytest.raises(ProductionApiError, match="loop"):
                await client.init()

        assert len(calls) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"opportunitiesWithContracts": ["P-1"]},
        {"opportunitiesWithContracts": [{"prospect_id": "P-1", "contract": "active"}]},
        {"opportunitiesWithContracts": {"prospect_id": "P-1"}},
    ])
    async def test_malformed_account_rejected(self, payload):
        def handler(request):
            return httpx.Response(200, json=payload)

        async with make_client(handler) as client:
            with pytest.raises(ProductionApiError):
                await client.init()
        assert client.site_id is None

    @pytest.mark.asyncio
    async def test_non_numeric_production_skipped(self):
        def handler(request):
            if request.url.path == "/portal-auth/get-user":
                return httpx.Response(200, json=USER_PAYLOAD)
            return httpx.Response(200, json=[
                {"date": "2024-10-01", "systemProduction": "n/a"},
                {"date": "2024-10-02", "systemProduction": {"kwh": 3}},
                {"date": 20241003, "systemProduction": 4.0},
                {"date": "2024-10-04", "systemProduction": 12.5},
            ])

        async with make_client(handler) as client:
            await client.init()
            series = await client.get_daily_production(date(2024, 10, 1), date(2024, 10, 4))

        assert series == {date(2024, 10, 4): 12.5}

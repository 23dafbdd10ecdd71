#!/usr/bin/env python3
"""Build the monthly energy ledger from the bill folders."""
import asyncio
import json
import sys

# Load .env file
from dotenv import load_dotenv
load_dotenv()

from energy_ledger.clients.production import DailyProductionClient
from energy_ledger.config import Settings
from energy_ledger.pipeline import LedgerPipeline
from energy_ledger.utils.logging import setup_logging


async def main() -> int:
    """Run the pipeline, save the summaries and print a monthly table."""
    settings = Settings()
    setup_logging(settings.log_level, json_output=settings.log_json)

    client = None
    if settings.production_api_enabled:
        client = DailyProductionClient(
            auth_token=settings.production_auth_token.get_secret_value(),
            refresh_token=settings.production_refresh_token.get_secret_value(),
            base_url=settings.production_api_url,
            timeout=settings.production_timeout,
            utc_offset=settings.production_utc_offset,
        )

    try:
        pipeline = LedgerPipeline(settings, production_client=client)
        result = await pipeline.run()
    finally:
        if client is not None:
            await client.aclose()

    with open(settings.output_path, "w") as f:
        json.dump([s.model_dump(mode="json") for s in result.summaries], f, indent=2)

    print(f"{'Month':<8} {'Prod kWh':>9} {'Used kWh':>9} {'Net kWh':>9} {'Cost $':>9} {'$/kWh':>7} {'Gas $':>8}")
    print("-" * 66)
    for s in result.summaries:
        print(
            f"{s.month:<8} {s.total_production:>9.0f} {s.true_consumption:>9.0f} {s.net_position:>9.0f} "
            f"{s.total_cost:>9.2f} {s.effective_rate:>7.3f} {s.totals.gas_cost:>8.2f}"
        )

    print(f"\nDocuments: {result.documents_seen} (extracted {result.records_extracted}, "
          f"cached {result.cache_hits}, duplicates {result.duplicates_skipped})")
    if result.failures:
        print(f"Failed documents ({result.failure_count}): {', '.join(result.failures)}")
    print(f"Ledger saved to: {settings.output_path}")
    return 1 if result.failures and not result.summaries else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

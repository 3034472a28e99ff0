"""
Command-line insight for one transaction.

How to run:
    python -m trust_insight.cli --to 0xDest... --chain-id eip155:1 --user 0xMe... --origin https://app.example

Env: INSIGHT_NETWORK, INSIGHT_GRAPHQL_URL, INSIGHT_REQUEST_TIMEOUT,
TRUSTED_CIRCLE_TTL_SECONDS, INSIGHT_STATE_DB_PATH (optional; in-memory cache when unset).

Prints the insight as JSON on stdout; logs go to stderr unless LOG_STREAM=stdout.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from trust_insight.config.settings import Settings, get_settings
from trust_insight.core.exceptions import TrustInsightError
from trust_insight.data_provider.client import GraphQLDataProvider
from trust_insight.database.state_store import MemoryStateStore, SQLiteStateStore, StateStoreBackend
from trust_insight.insight.models import TransactionInsight
from trust_insight.insight.pipeline import InsightPipeline
from trust_insight.insight_logging import get_logger
from trust_insight.trusted_circle.cache import TrustedCircleCache
from trust_insight.trusted_circle.service import TrustedCircleService

logger = get_logger(__name__)


def build_state_store(settings: Settings) -> StateStoreBackend:
    if settings.state_db_path is not None:
        return SQLiteStateStore(settings.state_db_path)
    return MemoryStateStore()


async def run_insight(
    settings: Settings,
    to_address: str,
    chain_id: str,
    user_address: str | None,
    origin_url: str | None,
) -> TransactionInsight:
    cache = TrustedCircleCache(build_state_store(settings), ttl_seconds=settings.trusted_circle_ttl_seconds)
    async with GraphQLDataProvider(settings.chain.backend_url, timeout=settings.request_timeout) as provider:
        service = TrustedCircleService(provider, cache, settings.chain)
        pipeline = InsightPipeline(provider, service, settings.chain)
        return await pipeline.run(to_address, chain_id, user_address=user_address, origin_url=origin_url)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Trust insight for an outgoing transaction")
    parser.add_argument("--to", required=True, dest="to_address", help="Destination address")
    parser.add_argument("--chain-id", default="eip155:1", help="CAIP-2 chain id of the transaction")
    parser.add_argument("--user", dest="user_address", default=None, help="Sending (connected) address")
    parser.add_argument("--origin", dest="origin_url", default=None, help="Requesting web origin")
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
        insight = asyncio.run(
            run_insight(settings, args.to_address, args.chain_id, args.user_address, args.origin_url)
        )
    except TrustInsightError as e:
        logger.error("insight_cli_failed", error=str(e))
        return 1
    json.dump(insight.to_dict(), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

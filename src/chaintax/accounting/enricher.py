"""Price enrichment: attach a USD snapshot price and normalized fields to raw transactions."""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from chaintax.accounting.parsing import parse_decimals, parse_int, parse_timestamp
from chaintax.domain.models.market import TokenPrice
from chaintax.domain.models.transaction import EnrichedTransaction, RawTransaction
from chaintax.exceptions import ExternalServiceError
from chaintax.infra.data_source import TransactionDataSource

logger = logging.getLogger(__name__)

NATIVE_TOKEN = "ETH"


def resolve_token_address(tx: RawTransaction) -> str:
    """Token contract for the transfer; the to-address for plain calls, native token otherwise."""
    return tx.contract_address or tx.token_address or tx.to_address or NATIVE_TOKEN


def distinct_token_addresses(transactions: list[RawTransaction]) -> list[str]:
    seen: dict[str, None] = {}
    for tx in transactions:
        address = tx.contract_address or tx.token_address or tx.to_address
        if address:
            seen.setdefault(address, None)
    return list(seen)


def build_price_map(prices: list[TokenPrice]) -> dict[str, Decimal]:
    return {p.contract_address.lower(): p.price_usd for p in prices}


async def fetch_price_map(
    source: TransactionDataSource,
    chain: str,
    transactions: list[RawTransaction],
    network: str | None = None,
) -> dict[str, Decimal]:
    """One batch price lookup for every token in the batch. Best-effort: failure → empty map."""
    addresses = distinct_token_addresses(transactions)
    if not addresses:
        return {}
    try:
        prices = await source.fetch_prices(chain, addresses, network=network)
    except ExternalServiceError:
        logger.warning("Price lookup failed for %d tokens on %s, continuing without prices", len(addresses), chain, exc_info=True)
        return {}
    return build_price_map(prices)


def enrich_transaction(
    tx: RawTransaction,
    price_map: dict[str, Decimal],
    now: datetime | None = None,
) -> EnrichedTransaction:
    token_address = resolve_token_address(tx)
    price = price_map.get(token_address.lower())

    timestamp, fallback = parse_timestamp(tx.block_timestamp, now)
    if fallback:
        logger.warning(
            "Unusable timestamp %r for %s, using current time", tx.block_timestamp, tx.transaction_hash,
        )

    return EnrichedTransaction(
        transaction_hash=tx.transaction_hash,
        block_number=parse_int(tx.block_number, 0),
        timestamp=timestamp,
        from_address=tx.from_address,
        to_address=tx.to_address,
        value=tx.value or "0",
        token_address=token_address,
        token_symbol=tx.token_symbol or NATIVE_TOKEN,
        decimals=parse_decimals(tx.decimals),
        gas_fee=tx.gas_fee,
        method_selector=tx.method_selector,
        price_usd=price if price is not None else Decimal(0),
        price_missing=price is None,
        timestamp_fallback=fallback,
    )


def enrich_transactions(
    transactions: list[RawTransaction],
    price_map: dict[str, Decimal],
    now: datetime | None = None,
) -> list[EnrichedTransaction]:
    """Enrich a batch with one snapshot price per token (not a historical price per row)."""
    now = now or datetime.now(timezone.utc)
    enriched = [enrich_transaction(tx, price_map, now) for tx in transactions]
    missing = sum(1 for tx in enriched if tx.price_missing)
    if missing:
        logger.info("%d of %d transactions have no price, valued at 0", missing, len(enriched))
    return enriched

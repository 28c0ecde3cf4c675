from datetime import date
from decimal import Decimal

import pytest

from chaintax.domain.models.market import TokenPrice
from chaintax.domain.models.transaction import RawTransaction
from chaintax.exceptions import ExternalServiceError
from chaintax.infra.data_source import TransactionDataSource


class FakeDataSource(TransactionDataSource):
    """In-memory provider: fixed transactions + prices, records calls."""

    def __init__(
        self,
        transactions: list[dict] | None = None,
        prices: dict[str, str] | None = None,
        fail_transactions: bool = False,
        fail_prices: bool = False,
    ) -> None:
        self.transactions = transactions or []
        self.prices = prices or {}
        self.fail_transactions = fail_transactions
        self.fail_prices = fail_prices
        self.price_requests: list[list[str]] = []
        self.transaction_requests: list[tuple] = []

    async def fetch_transactions(
        self, address: str, chain: str, start_date: date, end_date: date, network: str | None = None
    ) -> list[RawTransaction]:
        self.transaction_requests.append((address, chain, start_date, end_date, network))
        if self.fail_transactions:
            raise ExternalServiceError("Nodit returned 503")
        return [RawTransaction.model_validate(tx) for tx in self.transactions]

    async def fetch_prices(
        self, chain: str, contract_addresses: list[str], network: str | None = None
    ) -> list[TokenPrice]:
        self.price_requests.append(list(contract_addresses))
        if self.fail_prices:
            raise ExternalServiceError("price endpoint down")
        return [
            TokenPrice(contract_address=address, price_usd=Decimal(self.prices[address]))
            for address in contract_addresses
            if address in self.prices
        ]


@pytest.fixture()
def fake_source_factory():
    return FakeDataSource

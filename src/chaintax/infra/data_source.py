"""Abstract boundary between the tax pipeline and a blockchain-data provider."""

from abc import ABC, abstractmethod
from datetime import date

from chaintax.domain.models.market import TokenPrice
from chaintax.domain.models.transaction import RawTransaction


class TransactionDataSource(ABC):
    """Strategy interface for fetching an account's transactions and token prices."""

    @abstractmethod
    async def fetch_transactions(
        self,
        address: str,
        chain: str,
        start_date: date,
        end_date: date,
        network: str | None = None,
    ) -> list[RawTransaction]:
        """Transactions whose block time falls in [start 00:00:00Z, end 23:59:59Z].

        Order is the provider's, not guaranteed chronological. Raises
        ExternalServiceError on any network or provider failure.
        """

    @abstractmethod
    async def fetch_prices(
        self, chain: str, contract_addresses: list[str], network: str | None = None
    ) -> list[TokenPrice]:
        """Current USD price per contract address. Missing tokens are simply absent."""

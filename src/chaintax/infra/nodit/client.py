"""Nodit Web3 Data API client (token, transfer and transaction endpoints)."""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from chaintax.domain.enums.chain import Chain
from chaintax.domain.models.market import TokenHolder, TokenPrice
from chaintax.domain.models.transaction import RawTransaction
from chaintax.exceptions import ExternalServiceError, ProviderUnavailableError, UnsupportedChainError
from chaintax.infra.data_source import TransactionDataSource
from chaintax.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

# Nodit uses one base URL per chain + network: {base}/{chain}/{network}/...
BASE_URL = "https://web3.nodit.io/v1"

PAGE_SIZE = 1000  # Nodit max rpp
MAX_PAGES = 100


def _to_decimal(value: Any) -> Decimal | None:
    """Missing → 0; unparseable or non-finite (NaN, Infinity) → None."""
    if value is None or value == "":
        return Decimal(0)
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def _parse_updated_at(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


class NoditClient(TransactionDataSource):
    def __init__(
        self,
        api_key: str,
        http_client: RateLimitedClient,
        base_url: str = BASE_URL,
        network: str = "mainnet",
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._network = network

    def _url(self, chain: str, path: str, network: str | None = None) -> str:
        try:
            chain_value = Chain(chain).value
        except ValueError:
            raise UnsupportedChainError(chain) from None
        return f"{self._base_url}/{chain_value}/{network or self._network}{path}"

    @retry(
        retry=retry_if_exception_type(ProviderUnavailableError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        reraise=True,
    )
    async def _post(self, url: str, payload: dict[str, Any]) -> Any:
        headers = {"x-api-key": self._api_key, "Content-Type": "application/json"}
        try:
            resp = await self._http.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderUnavailableError(f"Nodit request to {url} failed: {e}") from e

        # Rate limit or server error → retriable
        if resp.status_code == 429 or resp.status_code >= 500:
            raise ProviderUnavailableError(f"Nodit returned {resp.status_code} for {url}")

        if resp.status_code >= 400:
            logger.error("Nodit API error %d for %s: %s", resp.status_code, url, resp.text)
            raise ExternalServiceError(f"Nodit API error {resp.status_code}: {resp.text}")

        try:
            return resp.json()
        except ValueError as e:
            raise ExternalServiceError(f"Nodit returned invalid JSON for {url}") from e

    @staticmethod
    def _items(data: Any) -> list[dict]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return data.get("items") or []
        return []

    # -- Transactions --

    async def get_transactions_by_account(
        self,
        chain: str,
        account: str,
        start_date: date | str,
        end_date: date | str,
        network: str | None = None,
    ) -> list[dict]:
        """All transactions in [start 00:00:00Z, end 23:59:59Z], following the page cursor."""
        url = self._url(chain, "/transaction/getTransactionsByAccount", network)
        payload: dict[str, Any] = {
            "accountAddress": account,
            "fromDate": f"{start_date}T00:00:00+00:00",
            "toDate": f"{end_date}T23:59:59+00:00",
            "rpp": PAGE_SIZE,
            "withCount": False,
            "withLogs": False,
            "withDecode": False,
        }

        items: list[dict] = []
        for _ in range(MAX_PAGES):
            data = await self._post(url, payload)
            items.extend(self._items(data))

            cursor = data.get("cursor") if isinstance(data, dict) else None
            if not cursor:
                break
            payload = {**payload, "cursor": cursor}
        else:
            logger.warning(
                "Stopped paging transactions for %s on %s after %d pages, returning partial results",
                account, chain, MAX_PAGES,
            )

        logger.info("Fetched %d transactions for %s on %s (%s to %s)", len(items), account, chain, start_date, end_date)
        return items

    # -- Tokens --

    async def get_token_prices(
        self, chain: str, contracts: list[str], network: str | None = None
    ) -> list[TokenPrice]:
        if not contracts:
            return []
        url = self._url(chain, "/token/getTokenPricesByContracts", network)
        data = await self._post(url, {"contractAddresses": contracts, "currency": "USD"})

        prices: list[TokenPrice] = []
        try:
            for index, item in enumerate(self._items(data)):
                contract = (item.get("contract") or {}).get("address")
                if not contract:
                    # Response is positional when the contract object is omitted
                    if index >= len(contracts):
                        continue
                    contract = contracts[index]

                price = _to_decimal(item.get("price"))
                if price is None:
                    logger.warning(
                        "Unusable price %r for %s on %s, treating as missing", item.get("price"), contract, chain,
                    )
                    continue
                prices.append(TokenPrice(
                    contract_address=contract,
                    price_usd=price,
                    price_change_24h=_to_decimal(item.get("percentChangeFor24h")) or Decimal(0),
                    timestamp=_parse_updated_at(item.get("updatedAt")),
                ))
        except (AttributeError, TypeError, ValidationError) as e:
            raise ExternalServiceError(f"Malformed Nodit price response for {chain}: {e}") from e

        logger.info("Fetched %d prices for %d tokens on %s", len(prices), len(contracts), chain)
        return prices

    async def get_tokens_owned(self, chain: str, account: str) -> list[dict]:
        url = self._url(chain, "/token/getTokensOwnedByAccount")
        data = await self._post(url, {"accountAddress": account, "withCount": False})
        return self._items(data)

    async def get_transfers(self, chain: str, account: str, limit: int = 50) -> list[dict]:
        url = self._url(chain, "/token/getTokenTransfersByAccount")
        data = await self._post(url, {"accountAddress": account, "rpp": limit, "withCount": False})
        return self._items(data)

    async def get_balance_changes(self, chain: str, account: str) -> list[dict]:
        # Nodit has no balance-change endpoint
        self._url(chain, "")
        logger.warning("Balance changes are not available from Nodit (%s, %s)", chain, account)
        return []

    async def get_token_holders(self, chain: str, contract_address: str) -> list[TokenHolder]:
        url = self._url(chain, "/token/getTokenHoldersByContract")
        data = await self._post(url, {"contractAddress": contract_address, "withCount": False})
        return [
            TokenHolder(address=item.get("ownerAddress", ""), balance=str(item.get("balance", "0")))
            for item in self._items(data)
        ]

    async def get_token_metadata(self, chain: str, contracts: list[str]) -> list[dict]:
        if not contracts:
            return []
        url = self._url(chain, "/token/getTokenContractMetadataByContracts")
        data = await self._post(url, {"contractAddresses": contracts})
        return self._items(data)

    # -- TransactionDataSource --

    async def fetch_transactions(
        self,
        address: str,
        chain: str,
        start_date: date,
        end_date: date,
        network: str | None = None,
    ) -> list[RawTransaction]:
        items = await self.get_transactions_by_account(chain, address, start_date, end_date, network)
        try:
            return [RawTransaction.model_validate(item) for item in items]
        except ValidationError as e:
            raise ExternalServiceError(f"Malformed Nodit transaction for {address} on {chain}: {e}") from e

    async def fetch_prices(
        self, chain: str, contract_addresses: list[str], network: str | None = None
    ) -> list[TokenPrice]:
        return await self.get_token_prices(chain, contract_addresses, network)

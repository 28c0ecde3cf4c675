"""Market data returned by the provider (prices, holders)."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class TokenPrice(BaseModel):
    contract_address: str
    price_usd: Decimal = Decimal(0)
    price_change_24h: Decimal = Decimal(0)
    timestamp: datetime | None = None


class TokenHolder(BaseModel):
    address: str
    balance: str
    percentage: Decimal = Decimal(0)  # Provider does not report supply share

"""Schemas for the dashboard pass-through endpoints. Field names follow the provider's camelCase."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from chaintax.domain.models.market import TokenPrice


class AccountRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_address: Optional[str] = Field(None, alias="accountAddress")
    chain: str = "ethereum"


class TransfersRequest(AccountRequest):
    limit: int = Field(50, ge=1, le=1000)


class TokenPricesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contract_addresses: Optional[Any] = Field(None, alias="contractAddresses")
    chain: str = "ethereum"


class ItemsResponse(BaseModel):
    items: list[dict[str, Any]]


class TokenPricesResponse(BaseModel):
    prices: list[TokenPrice]

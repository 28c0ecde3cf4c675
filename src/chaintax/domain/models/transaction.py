"""Transaction records flowing through the tax pipeline: raw → enriched → classified."""

from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from chaintax.domain.enums.tax import TransactionType

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class RawTransaction(BaseModel):
    """One transaction as returned by the data provider. Accepts provider camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    transaction_hash: str = Field("", validation_alias=_alias("transactionHash", "transaction_hash", "hash"))
    block_number: str | None = Field(None, validation_alias=_alias("blockNumber", "block_number"))
    block_timestamp: str | None = Field(
        None, validation_alias=_alias("blockTimestamp", "block_timestamp", "timestamp")
    )
    from_address: str | None = Field(None, validation_alias=_alias("from", "from_address"))
    to_address: str | None = Field(None, validation_alias=_alias("to", "to_address"))
    value: str | None = None  # integer string, token base units
    contract_address: str | None = Field(None, validation_alias=_alias("contractAddress", "contract_address"))
    token_address: str | None = Field(None, validation_alias=_alias("tokenAddress", "token_address"))
    token_symbol: str | None = Field(None, validation_alias=_alias("tokenSymbol", "token_symbol"))
    decimals: str | None = None
    gas_fee: str | None = Field(None, validation_alias=_alias("gasFee", "gas_fee"))
    method_id: str | None = Field(None, validation_alias=_alias("methodId", "method_id"))
    input: str | None = None

    @field_validator(
        "block_number", "block_timestamp", "value", "decimals", "gas_fee", mode="before"
    )
    @classmethod
    def _stringify(cls, v: object) -> object:
        # Providers mix numbers and numeric strings for the same field
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("transaction_hash", mode="before")
    @classmethod
    def _hash_or_empty(cls, v: object) -> object:
        return "" if v is None else v

    @property
    def method_selector(self) -> str | None:
        """4-byte function selector: explicit methodId, else the head of the calldata."""
        if self.method_id:
            return self.method_id.lower()
        if self.input and len(self.input) >= 10 and self.input.startswith("0x"):
            return self.input[:10].lower()
        return None


class EnrichedTransaction(BaseModel):
    """RawTransaction with normalized fields, a USD snapshot price and data-quality flags."""

    model_config = ConfigDict(frozen=True)

    transaction_hash: str
    block_number: int = 0
    timestamp: datetime
    from_address: str | None = None
    to_address: str | None = None
    value: str = "0"
    token_address: str
    token_symbol: str = "ETH"
    decimals: int = 18
    gas_fee: str | None = None
    method_selector: str | None = None
    price_usd: Decimal = Decimal(0)
    price_missing: bool = False
    timestamp_fallback: bool = False


class ClassifiedTransaction(EnrichedTransaction):
    transaction_type: TransactionType

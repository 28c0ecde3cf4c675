"""Domain types for lot accounting and tax reports."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator, model_validator

from chaintax.domain.enums.chain import Chain
from chaintax.domain.enums.tax import CostBasisMethod, TaxClassification, TransactionType


class Lot(BaseModel):
    """An undisposed acquisition. Mutated in place as sells consume it."""

    amount: Decimal
    unit_cost_usd: Decimal
    acquired_at: datetime


class Disposal(BaseModel):
    """Result of consuming lots for one sell."""

    requested_amount: Decimal
    consumed_amount: Decimal = Decimal(0)
    cost_basis_usd: Decimal = Decimal(0)
    oldest_acquired_at: datetime | None = None  # None = no lot consumed


class TaxableEvent(BaseModel):
    """One buy, sell or airdrop row of the tax report."""

    id: str  # "<tx hash>-<position in batch>"
    transaction_hash: str
    timestamp: datetime
    type: TransactionType
    token_symbol: str
    token_address: str
    amount: Decimal
    price_usd: Decimal
    cost_basis: Decimal | None = None
    proceeds: Decimal | None = None
    gain_loss: Decimal | None = None
    fee_usd: Decimal | None = None
    classification: TaxClassification


class TaxSummary(BaseModel):
    total_gains: Decimal = Decimal(0)
    total_losses: Decimal = Decimal(0)
    net_gain_loss: Decimal = Decimal(0)
    short_term_gains: Decimal = Decimal(0)
    long_term_gains: Decimal = Decimal(0)
    total_income: Decimal = Decimal(0)
    total_fees: Decimal = Decimal(0)
    total_transactions: int = 0


class TaxReportRequest(BaseModel):
    address: str
    start_date: date  # ISO format: "2025-01-01"
    end_date: date  # ISO format: "2025-12-31"
    country: str
    cost_basis_method: CostBasisMethod = CostBasisMethod.FIFO
    chain: Chain = Chain.ETHEREUM
    network: str = "mainnet"

    @field_validator("address")
    @classmethod
    def _strip_address(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("address must not be empty")
        return v

    @model_validator(mode="after")
    def _check_period(self) -> "TaxReportRequest":
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class DataQuality(BaseModel):
    """Counts of rows where a safe default replaced missing or malformed data."""

    transactions: int = 0
    missing_prices: int = 0
    fallback_timestamps: int = 0
    skipped_zero_amount: int = 0


class ReportMetadata(BaseModel):
    address: str
    period: str
    country: str
    method: CostBasisMethod
    chain: Chain
    generated_at: datetime
    data_quality: DataQuality = DataQuality()


class TaxReport(BaseModel):
    summary: TaxSummary
    taxable_events: list[TaxableEvent]
    metadata: ReportMetadata

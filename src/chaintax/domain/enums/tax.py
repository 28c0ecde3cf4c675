from enum import Enum


class TransactionType(str, Enum):
    """Semantic label derived from transfer direction relative to the queried address."""

    BUY = "buy"
    SELL = "sell"
    AIRDROP = "airdrop"
    BURN = "burn"
    TRANSFER = "transfer"
    APPROVAL = "approval"
    UNKNOWN = "unknown"


class CostBasisMethod(str, Enum):
    """Which acquisition lots a disposal is deemed to consume."""

    FIFO = "fifo"
    LIFO = "lifo"
    AVERAGE_COST = "average_cost"


class TaxClassification(str, Enum):
    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"
    INCOME = "income"
    NON_TAXABLE = "non_taxable"

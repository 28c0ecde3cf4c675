from chaintax.domain.enums.chain import Chain
from chaintax.domain.enums.tax import CostBasisMethod, TaxClassification, TransactionType

__all__ = [
    "Chain",
    "CostBasisMethod",
    "TaxClassification",
    "TransactionType",
]

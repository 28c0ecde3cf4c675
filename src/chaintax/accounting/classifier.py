"""Direction-based transaction classification relative to the queried address.

A heuristic, not ground truth: exchange-mediated transfers and moves between
the owner's own wallets are labeled by direction alone.
"""

import logging

from chaintax.accounting.parsing import parse_base_units
from chaintax.domain.enums.tax import TransactionType
from chaintax.domain.models.transaction import ZERO_ADDRESS, ClassifiedTransaction, EnrichedTransaction

logger = logging.getLogger(__name__)

# ERC-20 function selectors that override the direction-based label
METHOD_OVERRIDES: dict[str, TransactionType] = {
    "0xa9059cbb": TransactionType.TRANSFER,  # transfer(address,uint256)
    "0x095ea7b3": TransactionType.APPROVAL,  # approve(address,uint256)
}


def _same_address(a: str | None, b: str) -> bool:
    return a is not None and a.lower() == b.lower()


def classify_transaction(tx: EnrichedTransaction, address: str) -> TransactionType:
    is_incoming = _same_address(tx.to_address, address)
    is_outgoing = _same_address(tx.from_address, address)

    tx_type = TransactionType.UNKNOWN
    if is_incoming and not is_outgoing:
        if tx.from_address is None or tx.from_address.lower() == ZERO_ADDRESS:
            tx_type = TransactionType.AIRDROP  # mint
        elif parse_base_units(tx.value) == 0:
            tx_type = TransactionType.AIRDROP
        else:
            tx_type = TransactionType.BUY
    elif is_outgoing and not is_incoming:
        if tx.to_address is not None and tx.to_address.lower() == ZERO_ADDRESS:
            tx_type = TransactionType.BURN
        else:
            tx_type = TransactionType.SELL
    elif is_incoming and is_outgoing:
        tx_type = TransactionType.TRANSFER

    selector = (tx.method_selector or "").lower()
    if selector in METHOD_OVERRIDES:
        tx_type = METHOD_OVERRIDES[selector]

    return tx_type


def classify_transactions(
    transactions: list[EnrichedTransaction], address: str
) -> list[ClassifiedTransaction]:
    classified = [
        ClassifiedTransaction(**tx.model_dump(), transaction_type=classify_transaction(tx, address))
        for tx in transactions
    ]
    logger.debug(
        "Classified %d transactions for %s: %s",
        len(classified), address, [tx.transaction_type.value for tx in classified],
    )
    return classified

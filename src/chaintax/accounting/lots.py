"""Lot accounting: per-token acquisition lots, consumed on sells by FIFO, LIFO or average cost.

Pure in-memory state, no I/O. Transactions are processed in the order given;
consumption order (and therefore every cost basis) depends on it.
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal

from chaintax.accounting.parsing import parse_usd, token_amount
from chaintax.domain.enums.tax import CostBasisMethod, TaxClassification, TransactionType
from chaintax.domain.models.tax import Disposal, Lot, TaxableEvent
from chaintax.domain.models.transaction import ClassifiedTransaction

logger = logging.getLogger(__name__)

# Held strictly longer than this → long-term
LONG_TERM_HOLDING_PERIOD = timedelta(days=365)


def classify_holding_period(acquired_at: datetime, disposed_at: datetime) -> TaxClassification:
    if disposed_at - acquired_at > LONG_TERM_HOLDING_PERIOD:
        return TaxClassification.LONG_TERM
    return TaxClassification.SHORT_TERM


def _blend_average_cost(lots: list[Lot]) -> None:
    """Rewrite every remaining lot's unit cost with the amount-weighted average, in place."""
    total_amount = sum((lot.amount for lot in lots), Decimal(0))
    if total_amount <= 0:
        return
    total_cost = sum((lot.amount * lot.unit_cost_usd for lot in lots), Decimal(0))
    average = total_cost / total_amount
    for lot in lots:
        lot.unit_cost_usd = average


class LotInventory:
    """Ordered acquisition lots per token address. Appends at the tail; the method picks the end consumed."""

    def __init__(self, method: CostBasisMethod) -> None:
        self._method = method
        self._lots: dict[str, list[Lot]] = defaultdict(list)

    @property
    def method(self) -> CostBasisMethod:
        return self._method

    def lots(self, token_address: str) -> list[Lot]:
        return list(self._lots.get(token_address, []))

    def balance(self, token_address: str) -> Decimal:
        return sum((lot.amount for lot in self._lots.get(token_address, [])), Decimal(0))

    def acquire(self, token_address: str, amount: Decimal, unit_cost_usd: Decimal, acquired_at: datetime) -> Lot:
        lot = Lot(amount=amount, unit_cost_usd=unit_cost_usd, acquired_at=acquired_at)
        self._lots[token_address].append(lot)
        return lot

    def dispose(self, token_address: str, amount: Decimal) -> Disposal:
        """Consume lots for a sale of ``amount``. Stops early when the inventory runs out."""
        lots = self._lots[token_address]
        remaining = amount
        consumed_total = Decimal(0)
        cost_basis = Decimal(0)
        oldest: datetime | None = None

        while remaining > 0 and lots:
            if self._method == CostBasisMethod.LIFO:
                index = len(lots) - 1
            else:
                if self._method == CostBasisMethod.AVERAGE_COST:
                    _blend_average_cost(lots)
                index = 0

            lot = lots[index]
            used = min(remaining, lot.amount)

            cost_basis += used * lot.unit_cost_usd
            consumed_total += used
            remaining -= used
            lot.amount -= used
            if oldest is None or lot.acquired_at < oldest:
                oldest = lot.acquired_at

            if lot.amount <= 0:
                lots.pop(index)

        if remaining > 0:
            logger.warning(
                "Disposal of %s %s exceeds inventory by %s; cost basis covers held lots only",
                amount, token_address, remaining,
            )

        return Disposal(
            requested_amount=amount,
            consumed_amount=consumed_total,
            cost_basis_usd=cost_basis,
            oldest_acquired_at=oldest,
        )


class LotAccountant:
    """Turns classified transactions into taxable events, one run per report."""

    def __init__(self, method: CostBasisMethod) -> None:
        self.inventory = LotInventory(method)
        self.skipped_zero_amount = 0

    def process(self, transactions: list[ClassifiedTransaction]) -> list[TaxableEvent]:
        events: list[TaxableEvent] = []
        for index, tx in enumerate(transactions):
            event = self._process_one(index, tx)
            if event is not None:
                events.append(event)

        logger.info(
            "Calculated %d taxable events from %d transactions (%s)",
            len(events), len(transactions), self.inventory.method.value,
        )
        return events

    def _process_one(self, index: int, tx: ClassifiedTransaction) -> TaxableEvent | None:
        if tx.transaction_type not in (TransactionType.BUY, TransactionType.AIRDROP, TransactionType.SELL):
            logger.debug("Transaction %s (%s) has no tax effect", tx.transaction_hash, tx.transaction_type.value)
            return None

        amount = token_amount(tx.value, tx.decimals)
        if amount <= 0:
            self.skipped_zero_amount += 1
            logger.debug("Skipping zero-amount transaction %s", tx.transaction_hash)
            return None

        event_fields = {
            "id": f"{tx.transaction_hash}-{index}",
            "transaction_hash": tx.transaction_hash,
            "timestamp": tx.timestamp,
            "type": tx.transaction_type,
            "token_symbol": tx.token_symbol or "UNKNOWN",
            "token_address": tx.token_address,
            "amount": amount,
            "price_usd": tx.price_usd,
        }
        total_value = amount * tx.price_usd

        if tx.transaction_type == TransactionType.SELL:
            disposal = self.inventory.dispose(tx.token_address, amount)
            acquired_at = disposal.oldest_acquired_at or tx.timestamp
            return TaxableEvent(
                **event_fields,
                cost_basis=disposal.cost_basis_usd,
                proceeds=total_value,
                gain_loss=total_value - disposal.cost_basis_usd,
                fee_usd=parse_usd(tx.gas_fee) * tx.price_usd,
                classification=classify_holding_period(acquired_at, tx.timestamp),
            )

        self.inventory.acquire(tx.token_address, amount, tx.price_usd, tx.timestamp)

        if tx.transaction_type == TransactionType.AIRDROP:
            return TaxableEvent(
                **event_fields,
                proceeds=total_value,
                gain_loss=total_value,  # full value is income
                classification=TaxClassification.INCOME,
            )

        # Buys carry a display-only short_term label; no disposal has happened yet
        return TaxableEvent(
            **event_fields,
            cost_basis=total_value,
            classification=TaxClassification.SHORT_TERM,
        )


def calculate_taxable_events(
    transactions: list[ClassifiedTransaction], method: CostBasisMethod
) -> list[TaxableEvent]:
    """Run a fresh inventory over ``transactions`` in the order given."""
    return LotAccountant(method).process(transactions)

"""Tests for the summary aggregator."""

from datetime import datetime, timezone
from decimal import Decimal
from itertools import permutations

from chaintax.accounting.summary import aggregate_tax_summary
from chaintax.domain.enums.tax import TaxClassification, TransactionType
from chaintax.domain.models.tax import TaxableEvent


def _event(
    tx_type: str,
    classification: str,
    gain_loss: str | None = None,
    fee: str | None = None,
    n: int = 0,
) -> TaxableEvent:
    return TaxableEvent(
        id=f"0x{n}-{n}",
        transaction_hash=f"0x{n}",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        type=TransactionType(tx_type),
        token_symbol="TKN",
        token_address="0xToken",
        amount=Decimal("1"),
        price_usd=Decimal("1"),
        gain_loss=Decimal(gain_loss) if gain_loss is not None else None,
        fee_usd=Decimal(fee) if fee is not None else None,
        classification=TaxClassification(classification),
    )


def _mixed_events() -> list[TaxableEvent]:
    return [
        _event("buy", "short_term", n=1),
        _event("sell", "short_term", "100", fee="2", n=2),
        _event("sell", "long_term", "40", fee="1.5", n=3),
        _event("sell", "long_term", "-30", n=4),
        _event("sell", "short_term", "-5", fee="0", n=5),
        _event("airdrop", "income", "50", n=6),
    ]


class TestAggregateTaxSummary:
    def test_empty(self):
        summary = aggregate_tax_summary([])
        assert summary.total_transactions == 0
        assert summary.net_gain_loss == Decimal(0)

    def test_routes_by_classification(self):
        summary = aggregate_tax_summary(_mixed_events())

        assert summary.total_gains == Decimal("140")
        assert summary.short_term_gains == Decimal("100")
        assert summary.long_term_gains == Decimal("40")
        assert summary.total_losses == Decimal("35")
        assert summary.net_gain_loss == Decimal("105")
        assert summary.total_income == Decimal("50")
        assert summary.total_fees == Decimal("3.5")
        assert summary.total_transactions == 6

    def test_airdrop_income_not_counted_as_gain(self):
        summary = aggregate_tax_summary([_event("airdrop", "income", "50")])
        assert summary.total_income == Decimal("50")
        assert summary.total_gains == Decimal(0)
        assert summary.total_losses == Decimal(0)

    def test_buy_events_count_but_carry_no_gain(self):
        summary = aggregate_tax_summary([_event("buy", "short_term")])
        assert summary.total_transactions == 1
        assert summary.total_gains == Decimal(0)
        assert summary.short_term_gains == Decimal(0)

    def test_invariants(self):
        summary = aggregate_tax_summary(_mixed_events())
        assert summary.net_gain_loss == summary.total_gains - summary.total_losses
        assert summary.total_gains == summary.short_term_gains + summary.long_term_gains

    def test_order_independent(self):
        events = _mixed_events()
        expected = aggregate_tax_summary(events)
        for ordering in permutations(events):
            assert aggregate_tax_summary(list(ordering)) == expected

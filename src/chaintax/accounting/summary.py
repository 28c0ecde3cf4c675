"""Reduce taxable events to report totals. Order-independent."""

from decimal import Decimal

from chaintax.domain.enums.tax import TaxClassification
from chaintax.domain.models.tax import TaxableEvent, TaxSummary


def aggregate_tax_summary(events: list[TaxableEvent]) -> TaxSummary:
    total_gains = Decimal(0)
    total_losses = Decimal(0)
    short_term_gains = Decimal(0)
    long_term_gains = Decimal(0)
    total_income = Decimal(0)
    total_fees = Decimal(0)

    for event in events:
        gain_loss = event.gain_loss or Decimal(0)

        if event.classification == TaxClassification.INCOME:
            total_income += gain_loss
        elif gain_loss > 0:
            total_gains += gain_loss
            if event.classification == TaxClassification.SHORT_TERM:
                short_term_gains += gain_loss
            elif event.classification == TaxClassification.LONG_TERM:
                long_term_gains += gain_loss
        elif gain_loss < 0:
            total_losses += abs(gain_loss)

        if event.fee_usd:
            total_fees += event.fee_usd

    return TaxSummary(
        total_gains=total_gains,
        total_losses=total_losses,
        net_gain_loss=total_gains - total_losses,
        short_term_gains=short_term_gains,
        long_term_gains=long_term_gains,
        total_income=total_income,
        total_fees=total_fees,
        total_transactions=len(events),
    )

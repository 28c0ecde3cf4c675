"""TaxEngine: orchestrates fetch → price enrichment → classification → lot accounting → summary."""

import logging
from datetime import datetime, timezone

from chaintax.accounting.classifier import classify_transactions
from chaintax.accounting.enricher import enrich_transactions, fetch_price_map
from chaintax.accounting.lots import LotAccountant
from chaintax.accounting.summary import aggregate_tax_summary
from chaintax.domain.models.tax import DataQuality, ReportMetadata, TaxReport, TaxReportRequest
from chaintax.exceptions import ChainTaxError, TaxReportError
from chaintax.infra.data_source import TransactionDataSource

logger = logging.getLogger(__name__)


class TaxEngine:
    """Generate a tax report for one address. Every run recomputes from scratch."""

    def __init__(self, data_source: TransactionDataSource) -> None:
        self._source = data_source

    async def generate_report(self, request: TaxReportRequest, now: datetime | None = None) -> TaxReport:
        """Run the full pipeline. Provider failures abort the run as a TaxReportError."""
        now = now or datetime.now(timezone.utc)
        chain = request.chain.value
        logger.info(
            "Generating tax report for %s on %s (%s to %s, %s)",
            request.address, chain, request.start_date, request.end_date, request.cost_basis_method.value,
        )

        try:
            # 1. Fetch raw transactions
            transactions = await self._source.fetch_transactions(
                request.address, chain, request.start_date, request.end_date, network=request.network,
            )
            # 2. Snapshot prices (best-effort) + normalize
            price_map = await fetch_price_map(self._source, chain, transactions, network=request.network)
        except ChainTaxError as e:
            logger.error("Tax report for %s failed: %s", request.address, e)
            raise TaxReportError(f"Failed to generate tax report: {e}") from e

        enriched = enrich_transactions(transactions, price_map, now=now)

        # 3. Classify by direction relative to the queried address
        classified = classify_transactions(enriched, request.address)

        # 4. Lots + taxable events (order-sensitive)
        accountant = LotAccountant(request.cost_basis_method)
        events = accountant.process(classified)

        # 5. Aggregate
        summary = aggregate_tax_summary(events)

        data_quality = DataQuality(
            transactions=len(enriched),
            missing_prices=sum(1 for tx in enriched if tx.price_missing),
            fallback_timestamps=sum(1 for tx in enriched if tx.timestamp_fallback),
            skipped_zero_amount=accountant.skipped_zero_amount,
        )
        if data_quality.fallback_timestamps:
            logger.warning(
                "%d transactions for %s had unusable timestamps; holding periods for them are unreliable",
                data_quality.fallback_timestamps, request.address,
            )

        return TaxReport(
            summary=summary,
            taxable_events=events,
            metadata=ReportMetadata(
                address=request.address,
                period=f"{request.start_date.isoformat()} to {request.end_date.isoformat()}",
                country=request.country,
                method=request.cost_basis_method,
                chain=request.chain,
                generated_at=now,
                data_quality=data_quality,
            ),
        )


async def generate_tax_report(request: TaxReportRequest, data_source: TransactionDataSource) -> TaxReport:
    return await TaxEngine(data_source).generate_report(request)

"""Generate one tax report against the live Nodit API and print it as JSON.

Usage:
    NODIT_API_KEY=... PYTHONPATH=src python scripts/generate_report.py \
        0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045 2024-01-01 2024-12-31 \
        --method fifo --chain ethereum --country US
"""

import argparse
import asyncio
import logging
import sys

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("generate_report")

# Suppress noisy loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a crypto tax report for one address")
    parser.add_argument("address")
    parser.add_argument("start_date", help="YYYY-MM-DD")
    parser.add_argument("end_date", help="YYYY-MM-DD")
    parser.add_argument("--method", default="fifo", choices=["fifo", "lifo", "average_cost"])
    parser.add_argument("--chain", default=None, help="defaults to settings.default_chain")
    parser.add_argument("--country", default="US")
    return parser.parse_args(argv)


async def main(argv: list[str]) -> int:
    from chaintax.accounting.tax_engine import TaxEngine
    from chaintax.config import settings
    from chaintax.domain.models.tax import TaxReportRequest
    from chaintax.exceptions import TaxReportError
    from chaintax.infra.http.rate_limited_client import RateLimitedClient
    from chaintax.infra.nodit.client import NoditClient

    args = parse_args(argv)
    request = TaxReportRequest(
        address=args.address,
        start_date=args.start_date,
        end_date=args.end_date,
        country=args.country,
        cost_basis_method=args.method,
        chain=args.chain or settings.default_chain,
        network=settings.nodit_network,
    )

    async with RateLimitedClient(
        rate_per_second=settings.nodit_rate_per_second, timeout=settings.http_timeout,
    ) as http_client:
        nodit = NoditClient(
            settings.nodit_api_key, http_client,
            base_url=settings.nodit_base_url, network=settings.nodit_network,
        )
        try:
            report = await TaxEngine(nodit).generate_report(request)
        except TaxReportError:
            logger.exception("Report generation failed")
            return 1

    print(report.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))

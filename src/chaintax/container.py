from dependency_injector import containers, providers

from chaintax.accounting.tax_engine import TaxEngine
from chaintax.config import Settings
from chaintax.infra.http.rate_limited_client import RateLimitedClient
from chaintax.infra.nodit.client import NoditClient


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["chaintax.api.deps"])

    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.nodit_rate_per_second,
        timeout=settings.provided.http_timeout,
    )

    nodit_client = providers.Singleton(
        NoditClient,
        api_key=settings.provided.nodit_api_key,
        http_client=http_client,
        base_url=settings.provided.nodit_base_url,
        network=settings.provided.nodit_network,
    )

    # Fresh engine per report; no state shared between runs
    tax_engine = providers.Factory(
        TaxEngine,
        data_source=nodit_client,
    )

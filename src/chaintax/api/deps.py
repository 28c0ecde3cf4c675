from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from chaintax.accounting.tax_engine import TaxEngine
from chaintax.container import Container
from chaintax.infra.nodit.client import NoditClient


@inject
def get_nodit_client(
    client: NoditClient = Depends(Provide[Container.nodit_client]),
) -> NoditClient:
    return client


@inject
def get_tax_engine(
    engine: TaxEngine = Depends(Provide[Container.tax_engine]),
) -> TaxEngine:
    return engine

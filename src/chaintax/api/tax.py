"""Tax API: generate a cost-basis tax report for one address."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from chaintax.accounting.tax_engine import TaxEngine
from chaintax.api.deps import get_tax_engine
from chaintax.domain.models.tax import TaxReport, TaxReportRequest
from chaintax.exceptions import TaxReportError

router = APIRouter(prefix="/api/tax", tags=["tax"])

EngineDep = Annotated[TaxEngine, Depends(get_tax_engine)]


@router.post("/report", response_model=TaxReport)
async def generate_tax_report(body: TaxReportRequest, engine: EngineDep) -> TaxReport:
    """Fetch, price, classify and account for all transactions of an address in the period."""
    try:
        return await engine.generate_report(body)
    except TaxReportError as e:
        raise HTTPException(status_code=502, detail=str(e))

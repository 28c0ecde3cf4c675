"""Dashboard pass-through endpoints: holdings, transfers, prices and balance changes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from chaintax.api.deps import get_nodit_client
from chaintax.api.schemas.portfolio import (
    AccountRequest,
    ItemsResponse,
    TokenPricesRequest,
    TokenPricesResponse,
    TransfersRequest,
)
from chaintax.exceptions import ExternalServiceError, UnsupportedChainError
from chaintax.infra.nodit.client import NoditClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["portfolio"])

NoditDep = Annotated[NoditClient, Depends(get_nodit_client)]


def _require_account(body: AccountRequest) -> str:
    if not body.account_address:
        raise HTTPException(status_code=400, detail="Account address is required")
    return body.account_address


@router.post("/getTokensByAccount", response_model=ItemsResponse)
async def get_tokens_by_account(body: AccountRequest, nodit: NoditDep) -> ItemsResponse:
    account = _require_account(body)
    try:
        tokens = await nodit.get_tokens_owned(body.chain, account)
    except UnsupportedChainError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExternalServiceError:
        logger.exception("Error fetching tokens for %s", account)
        raise HTTPException(status_code=500, detail="Failed to fetch tokens")
    return ItemsResponse(items=tokens)


@router.post("/getTokenTransfersByAccount", response_model=ItemsResponse)
async def get_token_transfers_by_account(body: TransfersRequest, nodit: NoditDep) -> ItemsResponse:
    account = _require_account(body)
    try:
        transfers = await nodit.get_transfers(body.chain, account, body.limit)
    except UnsupportedChainError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExternalServiceError:
        logger.exception("Error fetching transfers for %s", account)
        raise HTTPException(status_code=500, detail="Failed to fetch transfers")
    return ItemsResponse(items=transfers)


@router.post("/getTokenPrices", response_model=TokenPricesResponse)
async def get_token_prices(body: TokenPricesRequest, nodit: NoditDep) -> TokenPricesResponse:
    if not body.contract_addresses or not isinstance(body.contract_addresses, list):
        raise HTTPException(status_code=400, detail="Contract addresses array is required")
    try:
        prices = await nodit.get_token_prices(body.chain, [str(c) for c in body.contract_addresses])
    except UnsupportedChainError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExternalServiceError:
        logger.exception("Error fetching token prices on %s", body.chain)
        raise HTTPException(status_code=500, detail="Failed to fetch token prices")
    return TokenPricesResponse(prices=prices)


@router.post("/getTokenBalanceChangesByAccount", response_model=ItemsResponse)
async def get_token_balance_changes_by_account(body: AccountRequest, nodit: NoditDep) -> ItemsResponse:
    account = _require_account(body)
    try:
        changes = await nodit.get_balance_changes(body.chain, account)
    except UnsupportedChainError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ItemsResponse(items=changes)

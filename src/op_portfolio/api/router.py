"""Portfolio REST API: accounts with statistics, and the portfolio overview."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.dependencies import get_accounts_loader, get_portfolio_service
from src.op_broker.domain.session import BrokerSession
from src.op_common.errors import PortfolioNotCachedError
from src.op_common.response import ApiResponse, success_response
from src.op_gateway.auth.dependencies import get_current_session
from src.op_portfolio.application.accounts import AccountsLoader
from src.op_portfolio.application.service import PortfolioService

router = APIRouter(tags=["portfolio"])


@router.get("/accounts")
async def list_accounts(
    session: Annotated[BrokerSession, Depends(get_current_session)],
    loader: Annotated[AccountsLoader, Depends(get_accounts_loader)],
    portfolio: Annotated[PortfolioService, Depends(get_portfolio_service)],
    request: Request,
) -> ApiResponse:
    accounts = await loader.load(session)
    report = portfolio.compute_stats(accounts)
    resp = success_response(report.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/portfolio/overview")
async def portfolio_overview(
    session: Annotated[BrokerSession, Depends(get_current_session)],
    loader: Annotated[AccountsLoader, Depends(get_accounts_loader)],
    portfolio: Annotated[PortfolioService, Depends(get_portfolio_service)],
    request: Request,
) -> ApiResponse:
    """Cache-only view; never calls upstream."""
    accounts = await loader.cached(session.username)
    if accounts is None:
        raise PortfolioNotCachedError()
    report = portfolio.compute_stats(accounts)
    resp = success_response(report.portfolio.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp

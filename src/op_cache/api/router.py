"""Cache REST API: inspect, invalidate and refresh the caller's cache."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.dependencies import get_accounts_loader, get_cache_service
from src.op_broker.domain.session import BrokerSession
from src.op_cache.application.schemas import InvalidateResponse, RefreshResponse
from src.op_cache.application.service import CacheService
from src.op_common.datetime_utils import utc_now
from src.op_common.response import ApiResponse, success_response
from src.op_gateway.auth.dependencies import get_current_session
from src.op_portfolio.application.accounts import AccountsLoader

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/info")
async def cache_info(
    session: Annotated[BrokerSession, Depends(get_current_session)],
    cache: Annotated[CacheService, Depends(get_cache_service)],
    request: Request,
) -> ApiResponse:
    data = await cache.get_detailed_cache_info(session.username)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.delete("")
async def invalidate_cache(
    session: Annotated[BrokerSession, Depends(get_current_session)],
    cache: Annotated[CacheService, Depends(get_cache_service)],
    request: Request,
) -> ApiResponse:
    ok = await cache.invalidate_user(session.username)
    data = InvalidateResponse(success=ok, timestamp=utc_now().isoformat(timespec="seconds"))
    resp = success_response(
        data.model_dump(),
        message="Cache invalidated successfully" if ok else "Failed to invalidate cache",
    )
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/refresh")
async def refresh_cache(
    session: Annotated[BrokerSession, Depends(get_current_session)],
    loader: Annotated[AccountsLoader, Depends(get_accounts_loader)],
    request: Request,
) -> ApiResponse:
    accounts = await loader.refresh(session)
    data = RefreshResponse(
        accounts_count=len(accounts),
        timestamp=utc_now().isoformat(timespec="seconds"),
    )
    resp = success_response(data.model_dump(), message="Cache refreshed successfully")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp

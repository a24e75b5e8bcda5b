"""Auth API router: login against the upstream broker.

Ref: POST /api/v1/login {"user": ..., "pass": ...} -> {"jwt": ...}
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from config.settings import Settings, get_settings
from src.dependencies import get_auth_service
from src.op_common.response import ApiResponse, success_response
from src.op_gateway.api.schemas import LoginRequest, LoginResponse
from src.op_gateway.auth.service import AuthService

router = APIRouter(tags=["auth"])


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Log in with upstream broker credentials",
)
async def login(
    request: Request,
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ApiResponse:
    token = await auth.authenticate(body.username, body.password)

    data = LoginResponse(jwt=token, expires_in=settings.JWT_TTL)
    resp = success_response(data.model_dump(), message="Login successful")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp

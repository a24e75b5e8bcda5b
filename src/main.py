"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config.settings import Settings, get_settings
from src.op_broker.infrastructure.client import OddoApiClient
from src.op_cache.api.router import router as cache_router
from src.op_common.errors import AppError
from src.op_common.response import error_response
from src.op_gateway.api.router import router as auth_router
from src.op_gateway.middleware.request_log import RequestLogMiddleware
from src.op_portfolio.api.router import router as portfolio_router
from src.op_storage.application.factory import create_storage_manager

VERSION = "0.1.0"


def create_app(settings: Settings) -> FastAPI:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: build storage + upstream client. Shutdown: close them."""
        # Startup
        app.state.storage = create_storage_manager(settings)
        app.state.broker = OddoApiClient(settings.ODDO_BASE_URI, timeout=settings.UPSTREAM_TIMEOUT)
        yield
        # Shutdown
        await app.state.broker.aclose()
        await app.state.storage.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(exc.code, exc.message)
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = ", ".join(".".join(str(p) for p in e["loc"][1:]) for e in exc.errors())
        resp = error_response(9003, f"Invalid request: {fields or 'body'}")
        return JSONResponse(status_code=400, content=resp.model_dump())

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(portfolio_router, prefix="/api/v1")
    app.include_router(cache_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    return app


app = create_app(get_settings())

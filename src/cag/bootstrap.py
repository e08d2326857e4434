from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from uuid import uuid4

from fastapi import FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bfx.contracts import BfxApiClient
from bfx.errors import BfxError
from mkt.errors import MktCryptoNotFoundError
from ods.errors import OdsStorageError
from ops.errors import OpsInsufficientBalanceError, OpsValidationError
from thr.errors import ThrStorageError, ThrValidationError

from .config import GatewayConfig
from .models import CreateOrderRequest, build_error_body
from .service import GatewayService, map_error

API_PREFIX = "/api/v1"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_LOGGER = logging.getLogger("cryptoconnector.cag")


def _request_id(request: Request, header_value: str | None) -> str:
    if header_value:
        request.state.request_id = header_value
        return header_value
    prior = getattr(request.state, "request_id", None)
    if prior:
        return prior
    incoming = request.headers.get("X-Request-Id")
    request.state.request_id = incoming or f"req-{uuid4().hex[:12]}"
    return request.state.request_id


def _int_or_default(value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def create_app(
    config: GatewayConfig | None = None,
    *,
    exchange_client: BfxApiClient | None = None,
    now_fn: Callable[[], datetime] | None = None,
) -> FastAPI:
    config = config or GatewayConfig()
    app = FastAPI(title="Crypto Connector", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    service = GatewayService(config, exchange_client=exchange_client, now_fn=now_fn)

    def _error_response(request: Request, exc: Exception) -> JSONResponse:
        request_id = _request_id(request, None)
        status_code, code, message = map_error(exc)
        if status_code >= 500:
            _LOGGER.error(
                "Request failed: request_id=%s path=%s error=%s",
                request_id,
                request.url.path,
                exc,
                exc_info=exc,
            )
        payload = build_error_body(request_id=request_id, code=code, message=message)
        return JSONResponse(status_code=status_code, content=payload)

    @app.exception_handler(ThrValidationError)
    async def _handle_thr_validation(request: Request, exc: ThrValidationError) -> JSONResponse:
        return _error_response(request, exc)

    @app.exception_handler(OpsValidationError)
    async def _handle_ops_validation(request: Request, exc: OpsValidationError) -> JSONResponse:
        return _error_response(request, exc)

    @app.exception_handler(OpsInsufficientBalanceError)
    async def _handle_insufficient_balance(request: Request, exc: OpsInsufficientBalanceError) -> JSONResponse:
        return _error_response(request, exc)

    @app.exception_handler(MktCryptoNotFoundError)
    async def _handle_not_found(request: Request, exc: MktCryptoNotFoundError) -> JSONResponse:
        return _error_response(request, exc)

    @app.exception_handler(ThrStorageError)
    async def _handle_thr_storage(request: Request, exc: ThrStorageError) -> JSONResponse:
        return _error_response(request, exc)

    @app.exception_handler(OdsStorageError)
    async def _handle_ods_storage(request: Request, exc: OdsStorageError) -> JSONResponse:
        return _error_response(request, exc)

    @app.exception_handler(BfxError)
    async def _handle_exchange(request: Request, exc: BfxError) -> JSONResponse:
        return _error_response(request, exc)

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        return _error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        request_id = _request_id(request, None)
        fields = ", ".join(".".join(str(part) for part in error.get("loc", ())) for error in exc.errors())
        payload = build_error_body(
            request_id=request_id,
            code="INVALID_REQUEST",
            message=f"invalid request: {fields}" if fields else "invalid request",
        )
        return JSONResponse(status_code=400, content=payload)

    @app.get(f"{API_PREFIX}/trade-history/statistics")
    async def trade_statistics(
        request: Request,
        asset_filter: str = Query(default="all"),
        time_filter: str = Query(default="all"),
        x_request_id: str | None = Header(default=None, alias="X-Request-Id"),
    ) -> dict:
        _request_id(request, x_request_id)
        return service.get_trade_statistics(asset_filter, time_filter)

    @app.get(f"{API_PREFIX}/trade-history/transactions")
    async def trade_transactions(
        request: Request,
        asset_filter: str = Query(default="all"),
        time_filter: str = Query(default="all"),
        page: str | None = Query(default=None),
        limit: str | None = Query(default=None),
        x_request_id: str | None = Header(default=None, alias="X-Request-Id"),
    ) -> dict:
        _request_id(request, x_request_id)
        return service.get_trade_transactions(
            asset_filter,
            time_filter,
            _int_or_default(page, DEFAULT_PAGE),
            _int_or_default(limit, DEFAULT_LIMIT),
        )

    @app.get(f"{API_PREFIX}/crypto/market")
    async def crypto_market(
        request: Request,
        x_request_id: str | None = Header(default=None, alias="X-Request-Id"),
    ) -> dict:
        _request_id(request, x_request_id)
        return service.get_market_data()

    @app.get(f"{API_PREFIX}/crypto/{{crypto_id}}")
    async def crypto_detail(
        crypto_id: str,
        request: Request,
        x_request_id: str | None = Header(default=None, alias="X-Request-Id"),
    ) -> dict:
        _request_id(request, x_request_id)
        return service.get_crypto(crypto_id)

    @app.get(f"{API_PREFIX}/crypto/{{crypto_id}}/chart")
    async def crypto_chart(
        crypto_id: str,
        request: Request,
        period: str | None = Query(default=None),
        x_request_id: str | None = Header(default=None, alias="X-Request-Id"),
    ) -> dict:
        _request_id(request, x_request_id)
        return service.get_chart(crypto_id, period)

    @app.post(f"{API_PREFIX}/orders", status_code=201)
    async def create_order(
        body: CreateOrderRequest,
        request: Request,
        x_request_id: str | None = Header(default=None, alias="X-Request-Id"),
    ) -> dict:
        request_id = _request_id(request, x_request_id)
        _LOGGER.info("Create order requested: request_id=%s pair=%s", request_id, body.pair)
        return service.create_order(body)

    @app.get(f"{API_PREFIX}/balance")
    async def balance(
        request: Request,
        x_request_id: str | None = Header(default=None, alias="X-Request-Id"),
    ) -> dict:
        _request_id(request, x_request_id)
        return service.get_balance()

    return app

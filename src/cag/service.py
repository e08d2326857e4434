from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from bfx.api_client import LiveBfxApiClient, MockBfxApiClient
from bfx.contracts import BfxApiClient
from bfx.gateway import DefaultBfxGateway
from mkt.errors import MktCryptoNotFoundError
from mkt.service import MktService
from ods.bootstrap import initialize_database
from ods.repository import OdsRepository
from ops.errors import OpsInsufficientBalanceError, OpsValidationError
from ops.service import CreateOrderCommand, OpsService
from thr.errors import ThrValidationError
from thr.mapper import statistics_to_payload, transaction_page_to_payload
from thr.repository import ThrRepository
from thr.service import ThrService

from .config import GatewayConfig
from .models import CreateOrderRequest

INTERNAL_ERROR_CODE = "INTERNAL_SERVER_ERROR"
INTERNAL_ERROR_MESSAGE = "internal server error"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_exchange_client(config: GatewayConfig) -> BfxApiClient:
    if config.exchange_mode == "live":
        return LiveBfxApiClient(
            base_url=config.bitflyer_api_url,
            api_key=config.bitflyer_api_key,
            api_secret=config.bitflyer_api_secret,
        )
    return MockBfxApiClient()


def map_error(error: Exception) -> tuple[int, str, str]:
    if isinstance(error, (ThrValidationError, OpsValidationError)):
        return 400, error.code, error.message
    if isinstance(error, OpsInsufficientBalanceError):
        return 402, error.code, error.message
    if isinstance(error, MktCryptoNotFoundError):
        return 404, error.code, str(error)
    return 500, INTERNAL_ERROR_CODE, INTERNAL_ERROR_MESSAGE


class GatewayService:
    def __init__(
        self,
        config: GatewayConfig,
        *,
        exchange_client: BfxApiClient | None = None,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        self._logger = logging.getLogger("cryptoconnector.cag")
        self.config = config
        self._now_fn = now_fn or _utc_now
        self.exchange_gateway = DefaultBfxGateway(exchange_client or build_exchange_client(config))
        self.ops_service = OpsService(
            self.exchange_gateway,
            repository_factory=self._open_ods_repository,
            now_fn=self._now_fn,
        )
        initialize_database(config.db_path).close()
        self._logger.info(
            "Gateway service ready: db_path=%s exchange_mode=%s",
            config.db_path,
            config.exchange_mode,
        )

    def _open_ods_repository(self) -> OdsRepository:
        return OdsRepository(db_path=self.config.db_path)

    def _open_thr_repository(self) -> ThrRepository:
        return ThrRepository(db_path=self.config.db_path, now_fn=self._now_fn)

    def get_trade_statistics(self, asset_filter: str, time_filter: str) -> dict[str, Any]:
        with self._open_thr_repository() as repository:
            statistics = ThrService(repository).get_trade_statistics(asset_filter, time_filter)
        return statistics_to_payload(statistics)

    def get_trade_transactions(self, asset_filter: str, time_filter: str, page: int, limit: int) -> dict[str, Any]:
        with self._open_thr_repository() as repository:
            result = ThrService(repository).get_trade_transactions(asset_filter, time_filter, page, limit)
        return transaction_page_to_payload(result)

    def get_market_data(self) -> dict[str, Any]:
        with self._open_ods_repository() as repository:
            return MktService(repository, self.exchange_gateway, now_fn=self._now_fn).get_market_data()

    def get_crypto(self, crypto_id: str) -> dict[str, Any]:
        with self._open_ods_repository() as repository:
            return MktService(repository, self.exchange_gateway, now_fn=self._now_fn).get_crypto(crypto_id)

    def get_chart(self, crypto_id: str, period: str | None) -> dict[str, Any]:
        with self._open_ods_repository() as repository:
            return MktService(repository, self.exchange_gateway, now_fn=self._now_fn).get_chart(crypto_id, period)

    def create_order(self, body: CreateOrderRequest) -> dict[str, Any]:
        command = CreateOrderCommand(
            pair=body.pair,
            order_type=body.orderType,
            price=body.price,
            amount=body.amount,
        )
        return self.ops_service.create_order(command)

    def get_balance(self) -> dict[str, Any]:
        return self.ops_service.get_balance()

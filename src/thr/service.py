from __future__ import annotations

import logging

from .errors import ThrStorageError
from .models import TradeStatistics, TransactionPage
from .validators import validate_filters, validate_pagination


class ThrService:
    """Entry point for trade history reads.

    Validation always runs before the repository is touched. Storage failures are
    re-raised as ``ThrStorageError`` with the failing operation prefixed; they are
    never retried here.
    """

    def __init__(self, repository) -> None:
        self.repository = repository
        self._logger = logging.getLogger("cryptoconnector.thr")

    def get_trade_statistics(self, asset_filter: str, time_filter: str) -> TradeStatistics:
        validate_filters(asset_filter, time_filter)
        try:
            return self.repository.get_statistics(asset_filter, time_filter)
        except ThrStorageError as exc:
            self._logger.error(
                "Trade statistics query failed: asset_filter=%s time_filter=%s error=%s",
                asset_filter,
                time_filter,
                exc,
            )
            raise exc.with_context("failed to get trade statistics") from exc

    def get_trade_transactions(self, asset_filter: str, time_filter: str, page: int, limit: int) -> TransactionPage:
        validate_filters(asset_filter, time_filter)
        validate_pagination(page, limit)
        try:
            return self.repository.get_transactions(asset_filter, time_filter, page, limit)
        except ThrStorageError as exc:
            self._logger.error(
                "Trade transactions query failed: asset_filter=%s time_filter=%s page=%s limit=%s error=%s",
                asset_filter,
                time_filter,
                page,
                limit,
                exc,
            )
            raise exc.with_context("failed to get trade transactions") from exc

from __future__ import annotations

from mkt.catalog import supported_symbols

from .errors import ThrInvalidFilterError, ThrInvalidPaginationError

ASSET_FILTER_ALL = "all"
TIME_FILTER_ALL = "all"
TIME_FILTER_7DAYS = "7days"

ASSET_FILTERS: tuple[str, ...] = (ASSET_FILTER_ALL, *supported_symbols())
TIME_FILTERS: tuple[str, ...] = (TIME_FILTER_ALL, TIME_FILTER_7DAYS)

MIN_PAGE = 1
MIN_LIMIT = 1
MAX_LIMIT = 100


def validate_filters(asset_filter: str, time_filter: str) -> None:
    if asset_filter not in ASSET_FILTERS:
        raise ThrInvalidFilterError(field="asset_filter", value=asset_filter, allowed=ASSET_FILTERS)
    if time_filter not in TIME_FILTERS:
        raise ThrInvalidFilterError(field="time_filter", value=time_filter, allowed=TIME_FILTERS)


def validate_pagination(page: int, limit: int) -> None:
    if page < MIN_PAGE:
        raise ThrInvalidPaginationError(field="page", value=page, bound=f">= {MIN_PAGE}")
    if limit < MIN_LIMIT:
        raise ThrInvalidPaginationError(field="limit", value=limit, bound=f">= {MIN_LIMIT}")
    if limit > MAX_LIMIT:
        raise ThrInvalidPaginationError(field="limit", value=limit, bound=f"<= {MAX_LIMIT}")

from .api_client import LiveBfxApiClient, MockBfxApiClient, urllib_transport
from .contracts import BfxApiClient, BfxGateway, OrderAcceptance, SendChildOrderRequest, Ticker
from .errors import (
    BfxAuthFailedError,
    BfxAuthMissingError,
    BfxBalanceNotFoundError,
    BfxError,
    BfxRateLimitedError,
    BfxResponseInvalidError,
    BfxTimeoutError,
    BfxUpstreamUnavailableError,
)
from .gateway import DefaultBfxGateway

__all__ = [
    "BfxApiClient",
    "BfxGateway",
    "LiveBfxApiClient",
    "MockBfxApiClient",
    "DefaultBfxGateway",
    "urllib_transport",
    "Ticker",
    "SendChildOrderRequest",
    "OrderAcceptance",
    "BfxError",
    "BfxAuthFailedError",
    "BfxAuthMissingError",
    "BfxBalanceNotFoundError",
    "BfxRateLimitedError",
    "BfxResponseInvalidError",
    "BfxTimeoutError",
    "BfxUpstreamUnavailableError",
]

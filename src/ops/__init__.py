from .errors import (
    OpsInsufficientBalanceError,
    OpsInvalidAmountError,
    OpsInvalidPriceError,
    OpsInvalidRequestError,
    OpsUnsupportedPairError,
    OpsValidationError,
)
from .service import CreateOrderCommand, OpsService

__all__ = [
    "CreateOrderCommand",
    "OpsInsufficientBalanceError",
    "OpsInvalidAmountError",
    "OpsInvalidPriceError",
    "OpsInvalidRequestError",
    "OpsService",
    "OpsUnsupportedPairError",
    "OpsValidationError",
]

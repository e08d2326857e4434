from __future__ import annotations

from decimal import Decimal


class OpsValidationError(ValueError):
    def __init__(self, code: str, field: str, value: object, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.field = field
        self.value = value
        self.message = message


class OpsInvalidPriceError(OpsValidationError):
    def __init__(self, value: object) -> None:
        super().__init__("INVALID_PRICE", "price", value, "price must be greater than 0")


class OpsInvalidAmountError(OpsValidationError):
    def __init__(self, value: object, message: str = "amount must be greater than 0") -> None:
        super().__init__("INVALID_AMOUNT", "amount", value, message)


class OpsUnsupportedPairError(OpsValidationError):
    def __init__(self, value: object) -> None:
        super().__init__("UNSUPPORTED_PAIR", "pair", value, f"unsupported trading pair: {value}")


class OpsInvalidRequestError(OpsValidationError):
    def __init__(self, field: str, value: object, message: str) -> None:
        super().__init__("INVALID_REQUEST", field, value, message)


class OpsInsufficientBalanceError(RuntimeError):
    code = "INSUFFICIENT_BALANCE"

    def __init__(self, required: Decimal, available: Decimal) -> None:
        self.message = (
            f"insufficient balance: required {format(required, 'f')} JPY, available {format(available, 'f')} JPY"
        )
        super().__init__(self.message)
        self.required = required
        self.available = available

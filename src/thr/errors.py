from __future__ import annotations


class ThrValidationError(ValueError):
    def __init__(self, code: str, field: str, value: object, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.field = field
        self.value = value
        self.message = message


class ThrInvalidFilterError(ThrValidationError):
    def __init__(self, field: str, value: object, allowed: tuple[str, ...]) -> None:
        label = "asset filter" if field == "asset_filter" else "time filter"
        super().__init__(
            "INVALID_FILTER",
            field,
            value,
            f"invalid {label}: {value}. Valid values are: {', '.join(allowed)}",
        )
        self.allowed = allowed


class ThrInvalidPaginationError(ThrValidationError):
    def __init__(self, field: str, value: object, bound: str) -> None:
        super().__init__(
            "INVALID_PAGINATION",
            field,
            value,
            f"invalid {field}: {value}. {field.capitalize()} must be {bound}",
        )
        self.bound = bound


class ThrStorageError(RuntimeError):
    code = "STORAGE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def with_context(self, context: str) -> "ThrStorageError":
        return type(self)(f"{context}: {self.message}")

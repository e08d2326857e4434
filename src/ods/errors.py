from __future__ import annotations


class OdsStorageError(RuntimeError):
    code = "STORAGE_ERROR"

    def __init__(self, operation: str, cause: Exception) -> None:
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
        self.cause = cause

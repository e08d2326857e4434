from __future__ import annotations


class MktCryptoNotFoundError(LookupError):
    code = "NOT_FOUND"

    def __init__(self, crypto_id: str) -> None:
        super().__init__(f"cryptocurrency not found: {crypto_id}")
        self.crypto_id = crypto_id

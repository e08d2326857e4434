from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CreateOrderRequest(BaseModel):
    pair: str = Field(min_length=1, max_length=16)
    orderType: str = Field(min_length=1, max_length=16)
    price: float
    amount: float


def build_error_body(*, request_id: str, code: str, message: str) -> dict[str, Any]:
    return {"error": code, "message": message, "requestId": request_id}

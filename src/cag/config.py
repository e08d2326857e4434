from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Mapping, cast

from bfx.api_client import DEFAULT_BASE_URL
from ods.bootstrap import DEFAULT_DB_PATH

ExchangeMode = Literal["mock", "live"]

DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


def _clean(value: str | None) -> str:
    text = (value or "").strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        text = text[1:-1].strip()
    return text


def _parse_port(value: str) -> int:
    if not value:
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError as exc:
        raise ValueError(f"SERVER_PORT must be an integer: {value}") from exc
    if not 0 < port < 65536:
        raise ValueError(f"SERVER_PORT out of range: {port}")
    return port


@dataclass(frozen=True)
class GatewayConfig:
    db_path: str = str(DEFAULT_DB_PATH)
    exchange_mode: ExchangeMode = "mock"
    bitflyer_api_url: str = DEFAULT_BASE_URL
    bitflyer_api_key: str = ""
    bitflyer_api_secret: str = ""
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GatewayConfig":
        env = os.environ if environ is None else environ

        mode = _clean(env.get("EXCHANGE_MODE")).lower() or "mock"
        if mode not in ("mock", "live"):
            raise ValueError(f"EXCHANGE_MODE must be mock or live: {mode}")

        origins = tuple(
            origin for origin in (_clean(part) for part in _clean(env.get("CORS_ORIGINS")).split(",")) if origin
        )

        return cls(
            db_path=_clean(env.get("CONNECTOR_DB_PATH")) or str(DEFAULT_DB_PATH),
            exchange_mode=cast(ExchangeMode, mode),
            bitflyer_api_url=_clean(env.get("BITFLYER_API_URL")) or DEFAULT_BASE_URL,
            bitflyer_api_key=_clean(env.get("BITFLYER_API_KEY")),
            bitflyer_api_secret=_clean(env.get("BITFLYER_API_SECRET")),
            cors_origins=origins or DEFAULT_CORS_ORIGINS,
            log_level=(_clean(env.get("CONNECTOR_LOG_LEVEL")) or "INFO").upper(),
            host=_clean(env.get("SERVER_HOST")) or DEFAULT_HOST,
            port=_parse_port(_clean(env.get("SERVER_PORT"))),
        )

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from cag.bootstrap import create_app
from cag.config import GatewayConfig


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    log_dir = Path("runtime") / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "connector.log"

    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not any(isinstance(handler, logging.StreamHandler) for handler in root_logger.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

    resolved = str(log_path.resolve())
    if not any(
        isinstance(handler, TimedRotatingFileHandler) and getattr(handler, "baseFilename", "") == resolved
        for handler in root_logger.handlers
    ):
        file_handler = TimedRotatingFileHandler(
            filename=log_path,
            when="midnight",
            backupCount=30,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


config = GatewayConfig.from_env()
_configure_logging(config.log_level)

app = create_app(config)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host=config.host, port=config.port, reload=False)

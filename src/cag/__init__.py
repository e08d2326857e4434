from .bootstrap import create_app
from .config import GatewayConfig

__all__ = ["GatewayConfig", "create_app"]

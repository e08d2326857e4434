from .bootstrap import initialize_database, run_migrations
from .errors import OdsStorageError
from .models import BuyOrder, DailyAveragePrice, PriceHistory, SellOrder
from .repository import OdsRepository

__all__ = [
    "initialize_database",
    "run_migrations",
    "OdsRepository",
    "OdsStorageError",
    "BuyOrder",
    "SellOrder",
    "PriceHistory",
    "DailyAveragePrice",
]

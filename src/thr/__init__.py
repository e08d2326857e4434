from .errors import ThrInvalidFilterError, ThrInvalidPaginationError, ThrStorageError, ThrValidationError
from .models import MatchedTrade, Pagination, TradeStatistics, Transaction, TransactionPage
from .repository import ThrRepository
from .service import ThrService

__all__ = [
    "ThrRepository",
    "ThrService",
    "ThrValidationError",
    "ThrInvalidFilterError",
    "ThrInvalidPaginationError",
    "ThrStorageError",
    "MatchedTrade",
    "Transaction",
    "TradeStatistics",
    "Pagination",
    "TransactionPage",
]

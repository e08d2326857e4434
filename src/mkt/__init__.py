from .catalog import CRYPTO_ASSETS, CryptoAsset, classify_product_code, find_by_id, find_by_pair, find_by_symbol
from .errors import MktCryptoNotFoundError
from .service import MktService

__all__ = [
    "CRYPTO_ASSETS",
    "CryptoAsset",
    "MktCryptoNotFoundError",
    "MktService",
    "classify_product_code",
    "find_by_id",
    "find_by_pair",
    "find_by_symbol",
]

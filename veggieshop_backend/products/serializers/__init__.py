from .category import CategorySerializer
from .offer import OfferSerializer, OfferWriteSerializer
from .product import PriceRangeQuerySerializer, ProductSerializer, ProductWriteSerializer

__all__ = [
    "CategorySerializer",
    "ProductSerializer",
    "ProductWriteSerializer",
    "PriceRangeQuerySerializer",
    "OfferSerializer",
    "OfferWriteSerializer",
]

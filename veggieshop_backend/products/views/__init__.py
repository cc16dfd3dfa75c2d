# products/views/__init__.py

"""
Catalog views package exports (router imports).
"""

from .category import CategoryViewSet
from .offer import OfferViewSet
from .product import ProductViewSet

__all__ = [
    "CategoryViewSet",
    "ProductViewSet",
    "OfferViewSet",
]

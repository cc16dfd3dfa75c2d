"""
PATH: products/models/__init__.py

Catalog models export surface.
"""

from .category import Category
from .offer import Offer
from .product import Product

__all__ = [
    "Category",
    "Product",
    "Offer",
]

# products/urls.py

"""
CATALOG URLS

Mounted at /api/ by backend.urls:
- /api/categories/...
- /api/products/...
- /api/offers/...
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import CategoryViewSet, OfferViewSet, ProductViewSet

router = DefaultRouter()
# /api/ already serves the project root view
router.include_root_view = False

router.register(r"categories", CategoryViewSet, basename="categories")
router.register(r"products", ProductViewSet, basename="products")
router.register(r"offers", OfferViewSet, basename="offers")

urlpatterns = [
    path("", include(router.urls)),
]

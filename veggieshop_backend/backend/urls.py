"""
PROJECT URLS

All API routes live under /api/

- /api/auth/...        login, register, refresh, password reset, sessions
- /api/users/...       accounts
- /api/categories/...  catalog categories
- /api/products/...    catalog products
- /api/offers/...      time-boxed promotions
- /api/orders/...      customer orders

Operational:
- /api/health/ (AllowAny) checks DB connectivity.
- Django admin path is configurable via env var (ADMIN_PATH).
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import admin
from django.db import connections
from django.db.utils import OperationalError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from users.urls import auth_urlpatterns, user_urlpatterns

logger = logging.getLogger(__name__)


# ------------------ API ROOT (PUBLIC) ------------------
@extend_schema(
    responses={
        200: {
            "type": "object",
            "properties": {
                "message": {"type": "string"},
                "auth": {"type": "object"},
                "docs": {"type": "object"},
                "modules": {"type": "object"},
            },
        }
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response(
        {
            "message": "VeggieShop API is running",
            "auth": {
                "register": "/api/auth/register/",
                "login": "/api/auth/login/",
                "refresh": "/api/auth/refresh/",
                "logout": "/api/auth/logout/",
                "me": "/api/auth/me/",
            },
            "docs": {
                "swagger": "/api/docs/",
                "schema": "/api/schema/",
            },
            "modules": {
                "users": "/api/users/",
                "categories": "/api/categories/",
                "products": "/api/products/",
                "offers": "/api/offers/",
                "orders": "/api/orders/",
            },
        }
    )


# ------------------ HEALTH CHECK (PUBLIC) ------------------
@extend_schema(
    responses={
        200: {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "db": {"type": "string"},
            },
        },
        503: {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "db": {"type": "string"},
                "error": {"type": "string"},
            },
        },
    },
)
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    Confirms the app is responding and the DB answers a trivial query.
    """
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except OperationalError as e:
        logger.warning("Health check failed", extra={"error": str(e)})
        return Response(
            {"status": "degraded", "db": "down", "error": str(e)}, status=503
        )
    return Response({"status": "ok", "db": "ok"})


# ------------------ ADMIN PATH (HARDENED) ------------------
# Keep trailing slash. Do NOT expose a custom path in public docs.
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


# ------------------ API ROUTES (ALL UNDER /api/) ------------------
api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # OpenAPI / Swagger
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # Auth & Users
    path("auth/", include(auth_urlpatterns)),
    path("users/", include(user_urlpatterns)),
    # Catalog
    path("", include("products.urls")),
    # Orders
    path("orders/", include("orders.urls")),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    # Visiting / takes you to Swagger docs
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]

# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Public catalog browsing (AllowAny): list, detail, featured, by category,
  name search, price range filter
- Admin product management (create / update / delete)

Key rules:
- Storefront reads return ONLY active products.
- Admins may pass include_inactive=true on list + category listing,
  and can open inactive products by id.
- Every product carries a server-computed final_price.
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from common.responses import api_created, api_no_content, api_ok
from permissions.roles import IsAdminOrReadOnly, is_admin
from products.serializers import (
    PriceRangeQuerySerializer,
    ProductSerializer,
    ProductWriteSerializer,
)
from products.services import product_service

INCLUDE_INACTIVE_PARAM = OpenApiParameter(
    name="include_inactive",
    type=bool,
    location=OpenApiParameter.QUERY,
    required=False,
    description="Admins only: also return deactivated products.",
)


def _truthy(raw) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes")


class ProductViewSet(viewsets.GenericViewSet):
    """
    Product endpoints.

    Public:
    - GET /api/products/
    - GET /api/products/<id>/
    - GET /api/products/featured/
    - GET /api/products/category/<category_id>/
    - GET /api/products/search/?name=<text>
    - GET /api/products/filter/?min=<price>&max=<price>

    Admin:
    - POST /api/products/
    - PUT /api/products/<id>/
    - DELETE /api/products/<id>/
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]
    lookup_value_regex = r"\d+"
    ordering_fields = ["id", "name", "price", "sold_count", "created_at"]

    @property
    def ordering(self):
        # featured/search/filter keep their service ordering unless ?sort= is given
        return ["id"] if self.action in {"list", "by_category"} else None

    def _include_inactive(self) -> bool:
        return is_admin(self.request.user) and _truthy(
            self.request.query_params.get("include_inactive")
        )

    def get_queryset(self):
        return product_service.list_products(include_inactive=self._include_inactive())

    def _page(self, qs):
        qs = self.filter_queryset(qs)
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    # -----------------------------
    # Public reads
    # -----------------------------
    @extend_schema(parameters=[INCLUDE_INACTIVE_PARAM])
    def list(self, request):
        return self._page(self.get_queryset())

    def retrieve(self, request, pk=None):
        product = product_service.get_product(
            pk, include_inactive=is_admin(request.user)
        )
        return api_ok(self.get_serializer(product).data)

    @action(detail=False, methods=["get"], url_path="featured")
    def featured(self, request):
        return self._page(product_service.list_featured())

    @extend_schema(
        parameters=[INCLUDE_INACTIVE_PARAM],
        responses={
            200: ProductSerializer(many=True),
            404: OpenApiResponse(description="Category not found"),
        },
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"category/(?P<category_id>\d+)",
    )
    def by_category(self, request, category_id=None):
        return self._page(
            product_service.list_by_category(
                category_id, include_inactive=self._include_inactive()
            )
        )

    @extend_schema(
        parameters=[OpenApiParameter("name", str, OpenApiParameter.QUERY, required=True)],
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):
        return self._page(product_service.search_by_name(request.query_params.get("name", "")))

    @extend_schema(
        parameters=[
            OpenApiParameter("min", float, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("max", float, OpenApiParameter.QUERY, required=True),
        ],
        responses={
            200: ProductSerializer(many=True),
            400: OpenApiResponse(description="Missing, non-finite, oversized or inverted bounds"),
        },
    )
    @action(detail=False, methods=["get"], url_path="filter")
    def filter_by_price(self, request):
        bounds = PriceRangeQuerySerializer(data=request.query_params)
        bounds.is_valid(raise_exception=True)
        return self._page(
            product_service.filter_by_price(
                min_price=bounds.validated_data["min"],
                max_price=bounds.validated_data["max"],
            )
        )

    # -----------------------------
    # Admin writes
    # -----------------------------
    @extend_schema(request=ProductWriteSerializer, responses={201: ProductSerializer})
    def create(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = product_service.create_product(**serializer.validated_data)
        return api_created(self.get_serializer(product).data)

    @extend_schema(request=ProductWriteSerializer, responses={200: ProductSerializer})
    def update(self, request, pk=None):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = product_service.update_product(product_id=pk, **serializer.validated_data)
        return api_ok(self.get_serializer(product).data)

    @extend_schema(responses={204: None})
    def destroy(self, request, pk=None):
        product_service.delete_product(product_id=pk)
        return api_no_content()

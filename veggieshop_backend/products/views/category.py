# products/views/category.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from common.responses import api_created, api_no_content, api_ok
from permissions.roles import IsAdminOrReadOnly
from products.serializers import CategorySerializer
from products.services import category_service


class CategoryViewSet(viewsets.GenericViewSet):
    """
    Category API

    Policy:
    - Anyone can READ categories (storefront navigation needs this)
    - Only ADMIN can CREATE/UPDATE/DELETE
    """

    serializer_class = CategorySerializer
    permission_classes = [IsAdminOrReadOnly]
    lookup_value_regex = r"\d+"
    ordering_fields = ["id", "name"]

    @property
    def ordering(self):
        # search keeps the service ordering (by name) unless ?sort= is given
        return ["id"] if self.action == "list" else None

    def get_queryset(self):
        return category_service.list_categories()

    def list(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(CategorySerializer(page, many=True).data)

    def retrieve(self, request, pk=None):
        return api_ok(CategorySerializer(category_service.get_category(pk)).data)

    def create(self, request):
        serializer = CategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = category_service.create_category(**serializer.validated_data)
        return api_created(CategorySerializer(category).data)

    def update(self, request, pk=None):
        serializer = CategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = category_service.update_category(category_id=pk, **serializer.validated_data)
        return api_ok(CategorySerializer(category).data)

    def destroy(self, request, pk=None):
        category_service.delete_category(category_id=pk)
        return api_no_content()

    @extend_schema(
        parameters=[OpenApiParameter("name", str, OpenApiParameter.QUERY, required=True)],
        responses={200: CategorySerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):
        qs = self.filter_queryset(
            category_service.search_categories(request.query_params.get("name", ""))
        )
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(CategorySerializer(page, many=True).data)

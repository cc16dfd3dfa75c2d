# orders/views/order.py

"""
ORDER VIEWSET (/api/orders/)

Policy:
- POST /                                   any signed-in user
- GET  /                                   admin (filters: status, created_*, *_total)
- GET  /<id>/                              admin or the order's owner
- GET  /user/<user_id>/                    admin or that user
- GET  /user/<user_id>/status/<status>/    admin or that user
- GET  /status/<status>/                   admin
- PUT  /<id>/status/                       admin  (body {"status": ...} or ?status=)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from common.exceptions import BadRequestError, DomainAccessDeniedError
from common.responses import api_created, api_no_content, api_ok
from orders.filters import OrderFilter
from orders.serializers import CreateOrderSerializer, OrderSerializer, OrderStatusSerializer
from orders.services import order_service
from permissions.roles import (
    IsAdmin,
    IsAdminOrOrderOwner,
    IsAdminOrSelf,
    IsAuthenticatedUser,
    is_admin,
)

STATUS_REGEX = r"[A-Za-z_]+"


class OrderViewSet(viewsets.GenericViewSet):
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    lookup_value_regex = r"\d+"
    ordering_fields = ["id", "created_at", "total_price", "status"]
    ordering = ["-created_at", "-id"]

    def get_queryset(self):
        return order_service.list_orders(
            status=(self.request.query_params.get("status") or "").strip() or None
        )

    def get_permissions(self):
        if self.action in {"list", "by_status", "update_status"}:
            return [IsAdmin()]
        if self.action in {"by_user", "by_user_and_status"}:
            return [IsAdminOrSelf()]
        if self.action == "retrieve":
            return [IsAdminOrOrderOwner()]
        return [IsAuthenticatedUser()]

    def _page(self, qs):
        qs = self.filter_queryset(qs)
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(OrderSerializer(page, many=True).data)

    # -----------------------------
    # Place order
    # -----------------------------
    @extend_schema(
        request=CreateOrderSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(description="Empty order, bad quantity or inactive product"),
            404: OpenApiResponse(description="User or product not found"),
        },
    )
    def create(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user_id = data.get("user_id") or request.user.pk
        if user_id != request.user.pk and not is_admin(request.user):
            raise DomainAccessDeniedError("You can only place orders for yourself.")

        order = order_service.create_order(user_id=user_id, items=data["items"])
        return api_created(OrderSerializer(order).data)

    # -----------------------------
    # Reads
    # -----------------------------
    @extend_schema(
        parameters=[OpenApiParameter("status", str, OpenApiParameter.QUERY, required=False)],
        responses={200: OrderSerializer(many=True)},
    )
    def list(self, request):
        return self._page(self.get_queryset())

    def retrieve(self, request, pk=None):
        order = order_service.get_order(pk)
        self.check_object_permissions(request, order)
        return api_ok(OrderSerializer(order).data)

    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>\d+)")
    def by_user(self, request, user_id=None):
        return self._page(order_service.list_orders_for_user(user_id))

    @action(
        detail=False,
        methods=["get"],
        url_path=rf"user/(?P<user_id>\d+)/status/(?P<status>{STATUS_REGEX})",
    )
    def by_user_and_status(self, request, user_id=None, status=None):
        return self._page(order_service.list_orders_for_user(user_id, status=status))

    @action(detail=False, methods=["get"], url_path=rf"status/(?P<status>{STATUS_REGEX})")
    def by_status(self, request, status=None):
        return self._page(order_service.list_orders_by_status(status))

    # -----------------------------
    # Admin status change
    # -----------------------------
    @extend_schema(
        request=OrderStatusSerializer,
        parameters=[OpenApiParameter("status", str, OpenApiParameter.QUERY, required=False)],
        responses={
            204: None,
            400: OpenApiResponse(description="Unknown status or illegal transition"),
            404: OpenApiResponse(description="Order not found"),
        },
    )
    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request, pk=None):
        raw = request.query_params.get("status")
        if not raw and isinstance(request.data, dict):
            raw = request.data.get("status")
        if not raw:
            raise BadRequestError(
                "status is required",
                field_errors={"status": "This field is required."},
            )

        order_service.update_status(order_id=pk, status=raw)
        return api_no_content()

# users/views/users.py

"""
USER ACCOUNT VIEWSET (/api/users/)

Policy:
- register/            public
- list                 admin
- me/, me/password/    any signed-in user (self)
- retrieve / update    admin or self
- role/                admin
- destroy              admin (users with orders are disabled, not removed)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny

from common.responses import api_created, api_no_content, api_ok
from permissions.roles import IsAdmin, IsAdminOrSelf, IsAuthenticatedUser
from users.serializers import (
    ChangePasswordSerializer,
    RegisterSerializer,
    RoleUpdateSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from users.services import user_service


class UserViewSet(viewsets.GenericViewSet):
    serializer_class = UserSerializer
    lookup_value_regex = r"\d+"
    ordering_fields = ["id", "name", "email", "role", "created_at"]
    ordering = ["id"]

    def get_queryset(self):
        params = self.request.query_params
        return user_service.list_users(
            role=(params.get("role") or "").strip() or None,
            query=(params.get("q") or "").strip() or None,
        )

    def get_permissions(self):
        if self.action == "register":
            return [AllowAny()]
        if self.action in {"list", "destroy", "change_role"}:
            return [IsAdmin()]
        if self.action in {"retrieve", "update"}:
            return [IsAdminOrSelf()]
        return [IsAuthenticatedUser()]

    # -----------------------------
    # Admin listing
    # -----------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter("role", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                "q", str, OpenApiParameter.QUERY, required=False,
                description="Matches name or email (case-insensitive).",
            ),
        ],
        responses={200: UserSerializer(many=True)},
    )
    def list(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(UserSerializer(page, many=True).data)

    @extend_schema(responses={200: UserSerializer})
    def retrieve(self, request, pk=None):
        return api_ok(UserSerializer(user_service.get_user(pk)).data)

    @extend_schema(request=UserUpdateSerializer, responses={200: UserSerializer})
    def update(self, request, pk=None):
        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = user_service.update_user(user_id=pk, **serializer.validated_data)
        return api_ok(UserSerializer(user).data)

    @extend_schema(responses={204: None})
    def destroy(self, request, pk=None):
        user_service.delete_user(user_id=pk)
        return api_no_content()

    # -----------------------------
    # Public registration
    # -----------------------------
    @extend_schema(request=RegisterSerializer, responses={201: UserSerializer})
    @action(detail=False, methods=["post"], url_path="register")
    def register(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = user_service.register_user(**serializer.validated_data)
        return api_created(UserSerializer(user).data)

    # -----------------------------
    # Self-service
    # -----------------------------
    @extend_schema(
        methods=["GET"],
        responses={200: UserSerializer},
    )
    @extend_schema(
        methods=["PUT"],
        request=UserUpdateSerializer,
        responses={200: UserSerializer},
    )
    @action(detail=False, methods=["get", "put"], url_path="me")
    def me(self, request):
        if request.method == "GET":
            return api_ok(UserSerializer(request.user).data)

        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = user_service.update_user(user_id=request.user.pk, **serializer.validated_data)
        return api_ok(UserSerializer(user).data)

    @extend_schema(request=ChangePasswordSerializer, responses={204: None})
    @action(detail=False, methods=["put"], url_path="me/password")
    def change_password(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user_service.change_password(
            user=request.user,
            old_password=serializer.validated_data["old_password"],
            new_password=serializer.validated_data["new_password"],
        )
        return api_no_content()

    # -----------------------------
    # Admin role management
    # -----------------------------
    @extend_schema(request=RoleUpdateSerializer, responses={200: UserSerializer})
    @action(detail=True, methods=["put"], url_path="role")
    def change_role(self, request, pk=None):
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = user_service.change_role(user_id=pk, role=serializer.validated_data["role"])
        return api_ok(UserSerializer(user).data)

# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import SAFE_METHODS, BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"

ALL_ROLES = {ROLE_USER, ROLE_ADMIN}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and get_user_role(user) == ROLE_ADMIN)


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsAuthenticatedUser(BaseRolePermission):
    """Any signed-in account, whatever its role."""

    allowed_roles = ALL_ROLES


class IsAdminOrReadOnly(BasePermission):
    """
    Catalog policy: anyone may read, only admins may write.
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return is_admin(request.user)


# =========================================================
# Ownership Permissions
# =========================================================
class IsAdminOrSelf(BasePermission):
    """
    Admins, or the user whose id is in the URL.

    Looks for `user_id` first, then `pk`, in view.kwargs.
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if is_admin(user):
            return True

        target = view.kwargs.get("user_id", view.kwargs.get("pk"))
        return target is not None and str(target) == str(user.pk)


class IsAdminOrOrderOwner(BasePermission):
    """
    Admins, or the customer who placed the order.

    Object-level: the view must call get_object()/check_object_permissions.
    """

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        user = request.user
        if is_admin(user):
            return True
        return getattr(obj, "user_id", None) == user.pk

# users/services/user_service.py

"""
USER ACCOUNT SERVICE

Owns account lifecycle:
- registration (email unique, case-insensitive)
- profile edits (name, email)
- role changes (admin only; enforced at the view)
- password change (revokes every refresh session)
- deletion (users who placed orders are disabled, not removed)
"""

from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q, QuerySet

from common.exceptions import (
    BadRequestError,
    DuplicateResourceError,
    OldPasswordIncorrectError,
    ResourceNotFoundError,
)
from permissions.roles import ALL_ROLES, ROLE_USER
from users.models import User

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
EMAIL_EXISTS = "Email already exists"


def _normalize_email(email: str) -> str:
    return User.objects.normalize_email((email or "").strip())


def _validate_role(role: str) -> str:
    role = (role or "").strip().upper()
    if role not in ALL_ROLES:
        raise BadRequestError(
            f"Invalid role '{role}'.",
            field_errors={"role": f"Must be one of: {', '.join(sorted(ALL_ROLES))}"},
        )
    return role


def email_taken(email: str, *, exclude_id: Optional[int] = None) -> bool:
    qs = User.objects.filter(email__iexact=_normalize_email(email))
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


# ---------------------------------------------------------
# Queries
# ---------------------------------------------------------
def get_user(user_id) -> User:
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise ResourceNotFoundError(USER_NOT_FOUND)


def get_user_by_email(email: str) -> User:
    try:
        return User.objects.get(email__iexact=_normalize_email(email))
    except User.DoesNotExist:
        raise ResourceNotFoundError(USER_NOT_FOUND)


def list_users(*, role: Optional[str] = None, query: Optional[str] = None) -> QuerySet:
    qs = User.objects.all()
    if role:
        qs = qs.filter(role=_validate_role(role))
    if query:
        q = query.strip()
        qs = qs.filter(Q(name__icontains=q) | Q(email__icontains=q))
    return qs


# ---------------------------------------------------------
# Commands
# ---------------------------------------------------------
@transaction.atomic
def register_user(
    *,
    name: str,
    email: str,
    password: str,
    role: Optional[str] = None,
) -> User:
    if email_taken(email):
        raise DuplicateResourceError(EMAIL_EXISTS)

    user = User.objects.create_user(
        email=_normalize_email(email),
        password=password,
        name=(name or "").strip(),
        role=_validate_role(role) if role else ROLE_USER,
    )

    logger.info("User registered", extra={"user_id": user.pk, "role": user.role})
    return user


@transaction.atomic
def update_user(*, user_id, name: str, email: str) -> User:
    user = get_user(user_id)

    if email_taken(email, exclude_id=user.pk):
        raise DuplicateResourceError(EMAIL_EXISTS)

    user.name = (name or "").strip()
    user.email = _normalize_email(email)
    user.save(update_fields=["name", "email", "updated_at"])

    logger.info("User updated", extra={"user_id": user.pk})
    return user


@transaction.atomic
def change_role(*, user_id, role: str) -> User:
    user = get_user(user_id)
    user.role = _validate_role(role)
    user.save(update_fields=["role", "updated_at"])

    logger.info("User role changed", extra={"user_id": user.pk, "role": user.role})
    return user


@transaction.atomic
def change_password(*, user: User, old_password: str, new_password: str) -> None:
    from users.services.token_service import revoke_all_sessions

    if not user.check_password(old_password):
        raise OldPasswordIncorrectError()

    user.set_password(new_password)
    user.save(update_fields=["password", "updated_at"])
    revoke_all_sessions(user=user)

    logger.info("User changed password", extra={"user_id": user.pk})


@transaction.atomic
def delete_user(*, user_id) -> bool:
    """
    Returns True if the row was removed, False if the user was disabled
    because order history still points at it.
    """
    user = get_user(user_id)

    if user.orders.exists():
        if user.is_active:
            user.is_active = False
            user.save(update_fields=["is_active", "updated_at"])
        user.refresh_sessions.update(revoked=True)
        logger.info("User disabled (has orders)", extra={"user_id": user.pk})
        return False

    user.delete()
    logger.info("User deleted", extra={"user_id": user_id})
    return True

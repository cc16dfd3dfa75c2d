# users/services/auth_service.py

"""
AUTH SERVICE (APPLICATION SERVICE)

Flows:
- register / login  -> access token + new refresh session
- refresh           -> rotate refresh session, new access token
- logout            -> revoke refresh session (idempotent)
- forgot password   -> mail a single-use reset link (never reveals if email exists)
- reset password    -> consume reset token, set password, revoke all sessions
- sessions          -> list / revoke the caller's signed-in devices

Views translate the AuthResult into JSON + the refresh cookie.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import authenticate
from django.db import transaction
from django.db.models import QuerySet

from common.exceptions import (
    DomainAccessDeniedError,
    InvalidCredentialsError,
    ResourceNotFoundError,
    UserDisabledError,
)
from users.models import RefreshSession, User
from users.services import token_service, user_service
from users.services.mailer import send_password_reset_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: User
    access_token: str
    refresh_token: str
    expires_in: int


def _issue(user: User, device_info: str) -> AuthResult:
    session = token_service.create_refresh_session(user=user, device_info=device_info)
    return AuthResult(
        user=user,
        access_token=token_service.issue_access_token(user),
        refresh_token=session.token,
        expires_in=token_service.access_token_lifetime_seconds(),
    )


@transaction.atomic
def register(*, name: str, email: str, password: str, device_info: str = "") -> AuthResult:
    # Self-service sign-up never grants ADMIN
    user = user_service.register_user(name=name, email=email, password=password)
    return _issue(user, device_info)


def login(*, email: str, password: str, device_info: str = "", request=None) -> AuthResult:
    user = authenticate(request=request, email=email, password=password)

    if user is None:
        candidate = User.objects.filter(email__iexact=(email or "").strip()).first()
        if candidate is not None and not candidate.is_active and candidate.check_password(password):
            raise UserDisabledError()
        logger.warning("Failed login", extra={"email": email})
        raise InvalidCredentialsError()

    logger.info("User logged in", extra={"user_id": user.pk})
    return _issue(user, device_info)


def refresh(*, refresh_token: Optional[str], device_info: str = "") -> AuthResult:
    session = token_service.rotate_refresh_session(
        token=refresh_token, device_info=device_info
    )
    user = session.user
    if not user.is_active:
        token_service.revoke_all_sessions(user=user)
        raise UserDisabledError()

    return AuthResult(
        user=user,
        access_token=token_service.issue_access_token(user),
        refresh_token=session.token,
        expires_in=token_service.access_token_lifetime_seconds(),
    )


def logout(*, refresh_token: Optional[str]) -> None:
    token_service.revoke_refresh_token(refresh_token)


def send_reset_password_link(*, email: str, request_ip: Optional[str] = None) -> None:
    user = User.objects.filter(email__iexact=(email or "").strip(), is_active=True).first()
    if user is None:
        logger.info("Password reset requested for unknown email")
        return

    reset = token_service.create_reset_token(user=user, request_ip=request_ip)
    send_password_reset_email(to_email=user.email, token=reset.token)


@transaction.atomic
def reset_password(*, token: str, new_password: str) -> None:
    reset = token_service.validate_reset_token(token)
    user = reset.user

    user.set_password(new_password)
    user.save(update_fields=["password", "updated_at"])

    token_service.mark_reset_token_used(reset)
    token_service.revoke_all_sessions(user=user)

    logger.info("Password reset completed", extra={"user_id": user.pk})


def list_sessions(*, user: User) -> QuerySet:
    return RefreshSession.objects.filter(user=user).order_by("-created_at")


def revoke_session(*, user: User, session_id) -> None:
    session = RefreshSession.objects.filter(pk=session_id).first()
    if session is None:
        raise ResourceNotFoundError("Session not found")
    if session.user_id != user.pk:
        raise DomainAccessDeniedError("You can only revoke your own sessions.")

    if not session.revoked:
        session.revoked = True
        session.save(update_fields=["revoked"])
    logger.info("Session revoked", extra={"user_id": user.pk, "session_id": session.pk})

# users/services/token_service.py

"""
TOKEN SERVICE

Three kinds of credentials:

1) Access token
   - SimpleJWT AccessToken (HS512), short-lived
   - carries user_id + role claims
   - sent as "Authorization: Bearer <token>"

2) Refresh session
   - opaque random token stored in RefreshSession
   - delivered in an HttpOnly cookie
   - single-use: every refresh revokes the old row and issues a new one

3) Password reset token
   - url-safe random token stored in PasswordResetToken
   - single-use, short-lived
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.tokens import AccessToken

from common.exceptions import InvalidRefreshTokenError, InvalidResetTokenError
from users.models import PasswordResetToken, RefreshSession, User

logger = logging.getLogger(__name__)

RESET_TOKEN_INVALID = "Invalid or expired reset token."
RESET_TOKEN_USED = "Reset token has already been used."
RESET_TOKEN_EXPIRED = "Reset token is expired."


# ---------------------------------------------------------
# Access tokens
# ---------------------------------------------------------
def issue_access_token(user: User) -> str:
    token = AccessToken.for_user(user)
    token["role"] = user.role
    token["email"] = user.email
    return str(token)


def access_token_lifetime_seconds() -> int:
    return int(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"].total_seconds())


# ---------------------------------------------------------
# Refresh sessions
# ---------------------------------------------------------
def create_refresh_session(*, user: User, device_info: str = "") -> RefreshSession:
    return RefreshSession.objects.create(
        token=secrets.token_urlsafe(32),
        user=user,
        device_info=(device_info or "")[:255],
        expires_at=timezone.now() + settings.REFRESH_TOKEN_LIFETIME,
    )


def verify_refresh_token(token: Optional[str], *, for_update: bool = False) -> RefreshSession:
    """for_update locks the session row; call inside a transaction."""
    if not token:
        raise InvalidRefreshTokenError("Refresh token is missing.")

    qs = RefreshSession.objects.select_related("user")
    if for_update:
        qs = qs.select_for_update(of=("self",))
    session = qs.filter(token=token).first()
    if session is None:
        logger.warning("Unknown refresh token presented")
        raise InvalidRefreshTokenError()
    if session.revoked:
        logger.warning(
            "Revoked refresh token presented",
            extra={"session_id": session.pk, "user_id": session.user_id},
        )
        raise InvalidRefreshTokenError("Refresh token has been revoked.")
    if session.is_expired:
        raise InvalidRefreshTokenError("Refresh token is expired.")

    return session


@transaction.atomic
def rotate_refresh_session(*, token: Optional[str], device_info: str = "") -> RefreshSession:
    session = verify_refresh_token(token, for_update=True)

    # Single use: only the caller that flips revoked may mint the successor
    claimed = RefreshSession.objects.filter(pk=session.pk, revoked=False).update(revoked=True)
    if not claimed:
        logger.warning(
            "Refresh token reused during rotation",
            extra={"session_id": session.pk, "user_id": session.user_id},
        )
        raise InvalidRefreshTokenError("Refresh token has been revoked.")

    return create_refresh_session(user=session.user, device_info=device_info)


def revoke_refresh_token(token: Optional[str]) -> None:
    if not token:
        return
    RefreshSession.objects.filter(token=token, revoked=False).update(revoked=True)


def revoke_all_sessions(*, user: User) -> int:
    return RefreshSession.objects.filter(user=user, revoked=False).update(revoked=True)


def find_session_id(token: Optional[str], *, user: User) -> Optional[int]:
    if not token:
        return None
    return (
        RefreshSession.objects.filter(token=token, user=user)
        .values_list("pk", flat=True)
        .first()
    )


# ---------------------------------------------------------
# Password reset tokens
# ---------------------------------------------------------
@transaction.atomic
def create_reset_token(*, user: User, request_ip: Optional[str] = None) -> PasswordResetToken:
    now = timezone.now()

    # Only the newest link may be used
    PasswordResetToken.objects.filter(user=user, used=False).update(used=True, used_at=now)

    return PasswordResetToken.objects.create(
        token=secrets.token_urlsafe(48),
        user=user,
        expires_at=now + settings.PASSWORD_RESET_TOKEN_LIFETIME,
        request_ip=request_ip or None,
    )


def validate_reset_token(token: Optional[str]) -> PasswordResetToken:
    """Locks the row; call inside a transaction."""
    reset = (
        PasswordResetToken.objects.select_related("user")
        .select_for_update()
        .filter(token=token or "")
        .first()
    )
    if reset is None:
        logger.warning("Unknown password reset token presented")
        raise InvalidResetTokenError(RESET_TOKEN_INVALID)
    if reset.used:
        raise InvalidResetTokenError(RESET_TOKEN_USED)
    if reset.is_expired:
        raise InvalidResetTokenError(RESET_TOKEN_EXPIRED)
    return reset


def mark_reset_token_used(reset: PasswordResetToken) -> None:
    reset.used = True
    reset.used_at = timezone.now()
    reset.save(update_fields=["used", "used_at"])


# ---------------------------------------------------------
# Housekeeping
# ---------------------------------------------------------
def purge_expired_tokens() -> dict[str, int]:
    now = timezone.now()
    resets, _ = PasswordResetToken.objects.filter(expires_at__lt=now).delete()
    sessions, _ = RefreshSession.objects.filter(expires_at__lt=now).delete()

    logger.info(
        "Purged expired tokens",
        extra={"reset_tokens": resets, "refresh_sessions": sessions},
    )
    return {"reset_tokens": resets, "refresh_sessions": sessions}

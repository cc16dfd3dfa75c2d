# users/services/mailer.py

from __future__ import annotations

import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Password Reset Request"


def build_reset_link(token: str) -> str:
    return f"{settings.PASSWORD_RESET_LINK_BASE}{token}"


def send_password_reset_email(*, to_email: str, token: str) -> None:
    link = build_reset_link(token)
    minutes = int(settings.PASSWORD_RESET_TOKEN_LIFETIME.total_seconds() // 60)

    send_mail(
        subject=RESET_SUBJECT,
        message=(
            "We received a request to reset your VeggieShop password.\n\n"
            f"Use the link below within {minutes} minutes:\n{link}\n\n"
            "If you did not ask for this, you can ignore this email."
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to_email],
        fail_silently=False,
    )
    logger.info("Password reset email sent", extra={"to": to_email})

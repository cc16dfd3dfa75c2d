# users/models/refresh_session.py

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone


class RefreshSession(models.Model):
    """
    One signed-in device.

    The opaque token travels in an HttpOnly cookie; rotating or logging out
    flips `revoked`. Expired or revoked rows never authenticate.
    """

    token = models.CharField(max_length=64, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="refresh_sessions",
    )
    device_info = models.CharField(max_length=255, blank=True, default="")
    expires_at = models.DateTimeField()
    revoked = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()

    def __str__(self):
        return f"RefreshSession #{self.pk} user={self.user_id} revoked={self.revoked}"

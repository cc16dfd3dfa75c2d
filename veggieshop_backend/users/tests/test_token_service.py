# users/tests/test_token_service.py

from datetime import timedelta
from unittest import mock

from django.conf import settings
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from common.exceptions import InvalidRefreshTokenError
from users.models import RefreshSession, User
from users.services import token_service


class RefreshRotationTests(TestCase):
    """
    Refresh session rotation.

    GUARANTEES:
    - A refresh token mints at most one successor session
    - A session already revoked by a concurrent rotation is refused, even
      when it was read as valid a moment earlier
    - A refused rotation creates no session
    """

    def setUp(self):
        self.user = User.objects.create_user(
            email="john@example.com", password="password", name="John Doe"
        )
        self.session = token_service.create_refresh_session(user=self.user, device_info="phone")

    def _stale_copy(self):
        # Snapshot taken before another request revoked the row
        stale = RefreshSession.objects.select_related("user").get(pk=self.session.pk)
        RefreshSession.objects.filter(pk=self.session.pk).update(revoked=True)
        return stale

    def test_rotation_revokes_old_and_creates_new(self):
        successor = token_service.rotate_refresh_session(token=self.session.token)

        self.session.refresh_from_db()
        self.assertTrue(self.session.revoked)
        self.assertNotEqual(successor.token, self.session.token)
        self.assertFalse(successor.revoked)
        self.assertEqual(successor.user_id, self.user.pk)

    def test_second_rotation_of_same_token_is_refused(self):
        token_service.rotate_refresh_session(token=self.session.token)

        with self.assertRaises(InvalidRefreshTokenError):
            token_service.rotate_refresh_session(token=self.session.token)

        self.assertEqual(RefreshSession.objects.filter(user=self.user, revoked=False).count(), 1)

    def test_stale_verified_session_cannot_rotate(self):
        stale = self._stale_copy()

        with mock.patch.object(token_service, "verify_refresh_token", return_value=stale):
            with self.assertRaises(InvalidRefreshTokenError):
                token_service.rotate_refresh_session(token=self.session.token)

        self.assertEqual(RefreshSession.objects.filter(user=self.user).count(), 1)
        self.assertFalse(RefreshSession.objects.filter(user=self.user, revoked=False).exists())

    def test_stale_verified_session_refresh_endpoint_returns_401(self):
        stale = self._stale_copy()
        client = APIClient()
        client.cookies[settings.REFRESH_COOKIE_NAME] = self.session.token

        with mock.patch.object(token_service, "verify_refresh_token", return_value=stale):
            res = client.post("/api/auth/refresh/")

        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["error"]["code"], "INVALID_REFRESH_TOKEN")
        self.assertEqual(RefreshSession.objects.filter(user=self.user).count(), 1)

    def test_expired_session_is_refused(self):
        RefreshSession.objects.filter(pk=self.session.pk).update(
            expires_at=timezone.now() - timedelta(seconds=1)
        )

        with self.assertRaises(InvalidRefreshTokenError):
            token_service.rotate_refresh_session(token=self.session.token)

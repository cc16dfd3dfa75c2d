# users/tests/test_auth_api.py

from datetime import timedelta

from django.conf import settings
from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from users.models import PasswordResetToken, RefreshSession, User
from users.services.token_service import issue_access_token


REGISTER_URL = "/api/auth/register/"
LOGIN_URL = "/api/auth/login/"
REFRESH_URL = "/api/auth/refresh/"
LOGOUT_URL = "/api/auth/logout/"
FORGOT_URL = "/api/auth/forgot-password/"
RESET_URL = "/api/auth/reset-password/"
ME_URL = "/api/auth/me/"
SESSIONS_URL = "/api/auth/sessions/"


class AuthFlowTests(TestCase):
    """
    Authentication endpoint tests.

    GUARANTEES:
    - Register and login return an access token and set the refresh cookie
    - Refresh rotates the cookie; a rotated token cannot be reused
    - Logout revokes the refresh session
    - Disabled accounts get 403, bad credentials get 401
    - Every error uses the uniform error envelope
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="john@example.com",
            password="password",
            name="John Doe",
        )

    def _login(self, email="john@example.com", password="password"):
        return self.client.post(
            LOGIN_URL, {"email": email, "password": password}, format="json"
        )

    def _cookie(self, response):
        return response.cookies[settings.REFRESH_COOKIE_NAME].value

    # =====================================================
    # REGISTER / LOGIN
    # =====================================================

    def test_register_creates_user_and_signs_in(self):
        res = self.client.post(
            REGISTER_URL,
            {"name": "Jane Smith", "email": "jane@example.com", "password": "secret123"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        body = res.data
        self.assertTrue(body["success"])
        self.assertIsNone(body["error"])
        self.assertEqual(body["data"]["token_type"], "Bearer")
        self.assertTrue(body["data"]["access_token"])
        self.assertEqual(body["data"]["user"]["email"], "jane@example.com")
        self.assertEqual(body["data"]["user"]["role"], "USER")

        cookie = res.cookies[settings.REFRESH_COOKIE_NAME]
        self.assertTrue(cookie["httponly"])
        self.assertEqual(cookie["path"], "/api/auth/")
        self.assertTrue(RefreshSession.objects.filter(token=cookie.value).exists())

    def test_register_duplicate_email_returns_409(self):
        res = self.client.post(
            REGISTER_URL,
            {"name": "Johnny", "email": "john@example.com", "password": "secret123"},
            format="json",
        )

        self.assertEqual(res.status_code, 409)
        self.assertFalse(res.data["success"])
        self.assertEqual(res.data["error"]["code"], "DUPLICATE_RESOURCE")
        self.assertEqual(res.data["error"]["message"], "Email already exists")

    def test_register_validation_errors_are_reported_per_field(self):
        res = self.client.post(
            REGISTER_URL,
            {"name": "", "email": "not-an-email", "password": "123"},
            format="json",
        )

        self.assertEqual(res.status_code, 400)
        error = res.data["error"]
        self.assertEqual(error["code"], "VALIDATION_ERROR")
        self.assertEqual(error["path"], REGISTER_URL)
        self.assertIn("email", error["field_errors"])
        self.assertIn("password", error["field_errors"])
        self.assertIn("name", error["field_errors"])

    def test_login_returns_token_usable_as_bearer(self):
        res = self._login()
        self.assertEqual(res.status_code, 200)

        token = res.data["data"]["access_token"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        me = self.client.get(ME_URL)

        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["data"]["email"], "john@example.com")

    def test_login_email_is_case_insensitive(self):
        res = self._login(email="JOHN@Example.com")
        self.assertEqual(res.status_code, 200)

    def test_refresh_cookie_defaults_to_same_site_strict(self):
        cookie = self._login().cookies[settings.REFRESH_COOKIE_NAME]
        self.assertEqual(cookie["samesite"], "Strict")

    @override_settings(REFRESH_COOKIE_SAMESITE="None", REFRESH_COOKIE_SECURE=True)
    def test_refresh_cookie_same_site_follows_settings(self):
        cookie = self._login().cookies[settings.REFRESH_COOKIE_NAME]
        self.assertEqual(cookie["samesite"], "None")
        self.assertTrue(cookie["secure"])

    def test_login_wrong_password_returns_401(self):
        res = self._login(password="nope-nope")

        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["error"]["code"], "INVALID_CREDENTIALS")

    def test_login_disabled_account_returns_403(self):
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])

        res = self._login()

        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["error"]["code"], "USER_DISABLED")

    def test_me_without_token_returns_401(self):
        res = self.client.get(ME_URL)

        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["error"]["code"], "UNAUTHORIZED")

    def test_malformed_bearer_token_returns_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not.a.jwt")
        res = self.client.get(ME_URL)

        self.assertEqual(res.status_code, 401)

    # =====================================================
    # REFRESH / LOGOUT
    # =====================================================

    def test_refresh_rotates_cookie(self):
        login = self._login()
        first = self._cookie(login)

        res = self.client.post(REFRESH_URL)

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["user_email"], "john@example.com")
        second = self._cookie(res)
        self.assertNotEqual(first, second)
        self.assertTrue(RefreshSession.objects.get(token=first).revoked)
        self.assertFalse(RefreshSession.objects.get(token=second).revoked)

    def test_rotated_refresh_token_cannot_be_reused(self):
        first = self._cookie(self._login())
        self.client.post(REFRESH_URL)

        self.client.cookies[settings.REFRESH_COOKIE_NAME] = first
        res = self.client.post(REFRESH_URL)

        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["error"]["code"], "INVALID_REFRESH_TOKEN")

    def test_refresh_without_cookie_returns_401(self):
        res = self.client.post(REFRESH_URL)
        self.assertEqual(res.status_code, 401)

    def test_expired_refresh_session_is_rejected(self):
        token = self._cookie(self._login())
        RefreshSession.objects.filter(token=token).update(
            expires_at=timezone.now() - timedelta(seconds=1)
        )

        res = self.client.post(REFRESH_URL)
        self.assertEqual(res.status_code, 401)

    def test_logout_revokes_session(self):
        token = self._cookie(self._login())

        res = self.client.post(LOGOUT_URL)

        self.assertEqual(res.status_code, 204)
        self.assertTrue(RefreshSession.objects.get(token=token).revoked)

        self.client.cookies[settings.REFRESH_COOKIE_NAME] = token
        self.assertEqual(self.client.post(REFRESH_URL).status_code, 401)

    def test_logout_without_cookie_is_noop(self):
        self.assertEqual(self.client.post(LOGOUT_URL).status_code, 204)


class PasswordResetTests(TestCase):
    """
    Forgot / reset password.

    GUARANTEES:
    - Forgot-password answers 204 whether or not the email exists
    - The emailed token resets the password exactly once
    - A reset revokes every refresh session of the account
    - Expired tokens are rejected
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="jane@example.com",
            password="password",
            name="Jane Smith",
        )

    def _request_reset(self, email="jane@example.com"):
        return self.client.post(FORGOT_URL, {"email": email}, format="json")

    def test_forgot_password_sends_email_with_link(self):
        res = self._request_reset()

        self.assertEqual(res.status_code, 204)
        self.assertEqual(len(mail.outbox), 1)

        reset = PasswordResetToken.objects.get(user=self.user, used=False)
        message = mail.outbox[0]
        self.assertEqual(message.to, ["jane@example.com"])
        self.assertEqual(message.subject, "Password Reset Request")
        self.assertIn(settings.PASSWORD_RESET_LINK_BASE + reset.token, message.body)

    def test_forgot_password_unknown_email_is_silent(self):
        res = self._request_reset(email="ghost@example.com")

        self.assertEqual(res.status_code, 204)
        self.assertEqual(len(mail.outbox), 0)
        self.assertFalse(PasswordResetToken.objects.exists())

    def test_new_reset_request_invalidates_previous_token(self):
        self._request_reset()
        first = PasswordResetToken.objects.get(user=self.user, used=False).token
        self._request_reset()

        res = self.client.post(
            RESET_URL, {"token": first, "new_password": "brandnew1"}, format="json"
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_RESET_TOKEN")

    def test_reset_password_is_single_use_and_revokes_sessions(self):
        session = RefreshSession.objects.create(
            token="existing-session",
            user=self.user,
            expires_at=timezone.now() + timedelta(days=1),
        )
        self._request_reset()
        token = PasswordResetToken.objects.get(user=self.user, used=False).token

        res = self.client.post(
            RESET_URL, {"token": token, "new_password": "brandnew1"}, format="json"
        )
        self.assertEqual(res.status_code, 204)

        self.user.refresh_from_db()
        session.refresh_from_db()
        self.assertTrue(self.user.check_password("brandnew1"))
        self.assertTrue(session.revoked)

        again = self.client.post(
            RESET_URL, {"token": token, "new_password": "another1"}, format="json"
        )
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.data["error"]["message"], "Reset token has already been used.")

    def test_expired_reset_token_is_rejected(self):
        self._request_reset()
        reset = PasswordResetToken.objects.get(user=self.user, used=False)
        reset.expires_at = timezone.now() - timedelta(minutes=1)
        reset.save(update_fields=["expires_at"])

        res = self.client.post(
            RESET_URL, {"token": reset.token, "new_password": "brandnew1"}, format="json"
        )

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["message"], "Reset token is expired.")

    def test_unknown_reset_token_is_rejected(self):
        res = self.client.post(
            RESET_URL, {"token": "made-up", "new_password": "brandnew1"}, format="json"
        )
        self.assertEqual(res.status_code, 400)


class SessionManagementTests(TestCase):
    """
    GUARANTEES:
    - Users see only their own sessions
    - The session matching the refresh cookie is flagged as current
    - Revoking someone else's session is forbidden
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="alice@example.com", password="password", name="Alice Brown"
        )
        self.other = User.objects.create_user(
            email="bob@example.com", password="password", name="Bob"
        )
        self.other_session = RefreshSession.objects.create(
            token="bob-session",
            user=self.other,
            expires_at=timezone.now() + timedelta(days=1),
        )

    def _sign_in(self):
        res = self.client.post(
            LOGIN_URL,
            {"email": "alice@example.com", "password": "password"},
            format="json",
        )
        self.client.credentials(
            HTTP_AUTHORIZATION=f"Bearer {res.data['data']['access_token']}"
        )
        return res.cookies[settings.REFRESH_COOKIE_NAME].value

    def test_list_sessions_marks_current(self):
        token = self._sign_in()
        current = RefreshSession.objects.get(token=token)

        res = self.client.get(SESSIONS_URL)

        self.assertEqual(res.status_code, 200)
        ids = [s["id"] for s in res.data["data"]["sessions"]]
        self.assertEqual(ids, [current.pk])
        self.assertEqual(res.data["data"]["current_session_id"], current.pk)

    def test_revoke_own_session(self):
        token = self._sign_in()
        session = RefreshSession.objects.get(token=token)

        res = self.client.post(f"{SESSIONS_URL}{session.pk}/revoke/")

        self.assertEqual(res.status_code, 204)
        session.refresh_from_db()
        self.assertTrue(session.revoked)

    def test_revoke_foreign_session_is_forbidden(self):
        self._sign_in()

        res = self.client.post(f"{SESSIONS_URL}{self.other_session.pk}/revoke/")

        self.assertEqual(res.status_code, 403)
        self.other_session.refresh_from_db()
        self.assertFalse(self.other_session.revoked)

    def test_revoke_missing_session_returns_404(self):
        self.client.credentials(
            HTTP_AUTHORIZATION=f"Bearer {issue_access_token(self.user)}"
        )
        res = self.client.post(f"{SESSIONS_URL}999999/revoke/")
        self.assertEqual(res.status_code, 404)

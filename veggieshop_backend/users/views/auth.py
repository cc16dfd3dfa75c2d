# users/views/auth.py

"""
AUTH VIEWS

- POST register/          (public)
- POST login/             (public)
- POST refresh/           (public; refresh cookie)
- POST logout/            (public; refresh cookie)
- POST forgot-password/   (public; always 204)
- POST reset-password/    (public)
- GET  me/                (authenticated)
- GET  sessions/          (authenticated)
- POST sessions/<id>/revoke/

The refresh token never appears in a JSON body; it lives in an HttpOnly
cookie scoped to /api/auth/.
"""

from __future__ import annotations

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from common.responses import api_created, api_no_content, api_ok
from permissions.roles import IsAuthenticatedUser
from users.serializers import (
    AuthResponseSerializer,
    ForgotPasswordSerializer,
    LoginSerializer,
    RefreshResponseSerializer,
    RegisterSerializer,
    ResetPasswordSerializer,
    SessionSerializer,
    SessionsResponseSerializer,
    UserSerializer,
)
from users.services import auth_service, token_service


# ---------------------------
# COOKIE / REQUEST HELPERS
# ---------------------------
def _device_info(request) -> str:
    return request.META.get("HTTP_USER_AGENT", "")


def _client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def _refresh_cookie(request):
    return request.COOKIES.get(settings.REFRESH_COOKIE_NAME)


def _set_refresh_cookie(response, token: str):
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        token,
        max_age=int(settings.REFRESH_TOKEN_LIFETIME.total_seconds()),
        path=settings.REFRESH_COOKIE_PATH,
        secure=settings.REFRESH_COOKIE_SECURE,
        httponly=True,
        samesite=settings.REFRESH_COOKIE_SAMESITE,
    )
    return response


def _clear_refresh_cookie(response):
    response.delete_cookie(
        settings.REFRESH_COOKIE_NAME,
        path=settings.REFRESH_COOKIE_PATH,
        samesite=settings.REFRESH_COOKIE_SAMESITE,
    )
    return response


def _auth_payload(result: auth_service.AuthResult) -> dict:
    return {
        "access_token": result.access_token,
        "token_type": "Bearer",
        "expires_in": result.expires_in,
        "user": UserSerializer(result.user).data,
    }


class AuthThrottleMixin:
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth"


# ---------------------------
# VIEWS
# ---------------------------
class RegisterView(AuthThrottleMixin, APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = RegisterSerializer

    @extend_schema(
        request=RegisterSerializer,
        responses={201: AuthResponseSerializer},
        description="Register a new customer account and sign in.",
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = auth_service.register(
            name=data["name"],
            email=data["email"],
            password=data["password"],
            device_info=_device_info(request),
        )
        return _set_refresh_cookie(api_created(_auth_payload(result)), result.refresh_token)


class LoginView(AuthThrottleMixin, APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = LoginSerializer

    @extend_schema(
        request=LoginSerializer,
        responses={200: AuthResponseSerializer},
        description="Authenticate with email and password.",
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = auth_service.login(
            email=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
            device_info=_device_info(request),
            request=request,
        )
        return _set_refresh_cookie(api_ok(_auth_payload(result)), result.refresh_token)


class RefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        request=None,
        responses={200: RefreshResponseSerializer},
        description="Exchange the refresh cookie for a new access token (rotates the cookie).",
    )
    def post(self, request):
        result = auth_service.refresh(
            refresh_token=_refresh_cookie(request),
            device_info=_device_info(request),
        )
        payload = {
            "access_token": result.access_token,
            "token_type": "Bearer",
            "expires_in": result.expires_in,
            "user_email": result.user.email,
        }
        return _set_refresh_cookie(api_ok(payload), result.refresh_token)


class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=None, responses={204: None})
    def post(self, request):
        auth_service.logout(refresh_token=_refresh_cookie(request))
        return _clear_refresh_cookie(api_no_content())


class ForgotPasswordView(AuthThrottleMixin, APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        request=ForgotPasswordSerializer,
        responses={204: None},
        description="Mail a password reset link. Always 204, whether or not the email exists.",
    )
    def post(self, request):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        auth_service.send_reset_password_link(
            email=serializer.validated_data["email"],
            request_ip=_client_ip(request),
        )
        return api_no_content()


class ResetPasswordView(AuthThrottleMixin, APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=ResetPasswordSerializer, responses={204: None})
    def post(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        auth_service.reset_password(
            token=serializer.validated_data["token"],
            new_password=serializer.validated_data["new_password"],
        )
        return api_no_content()


class AuthMeView(APIView):
    permission_classes = [IsAuthenticatedUser]

    @extend_schema(responses={200: UserSerializer})
    def get(self, request):
        return api_ok(UserSerializer(request.user).data)


class SessionListView(APIView):
    permission_classes = [IsAuthenticatedUser]

    @extend_schema(responses={200: SessionsResponseSerializer})
    def get(self, request):
        sessions = auth_service.list_sessions(user=request.user)
        return api_ok(
            {
                "sessions": SessionSerializer(sessions, many=True).data,
                "current_session_id": token_service.find_session_id(
                    _refresh_cookie(request), user=request.user
                ),
            }
        )


class SessionRevokeView(APIView):
    permission_classes = [IsAuthenticatedUser]

    @extend_schema(request=None, responses={204: None})
    def post(self, request, session_id: int):
        auth_service.revoke_session(user=request.user, session_id=session_id)
        return api_no_content()

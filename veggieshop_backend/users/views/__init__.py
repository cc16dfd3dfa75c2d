from .auth import (
    AuthMeView,
    ForgotPasswordView,
    LoginView,
    LogoutView,
    RefreshView,
    RegisterView,
    ResetPasswordView,
    SessionListView,
    SessionRevokeView,
)
from .users import UserViewSet

__all__ = [
    "RegisterView",
    "LoginView",
    "RefreshView",
    "LogoutView",
    "ForgotPasswordView",
    "ResetPasswordView",
    "AuthMeView",
    "SessionListView",
    "SessionRevokeView",
    "UserViewSet",
]

# users/urls.py

"""
USERS URLS

Two route groups, mounted by backend.urls:
- auth_urlpatterns -> /api/auth/
- user_urlpatterns -> /api/users/
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import (
    AuthMeView,
    ForgotPasswordView,
    LoginView,
    LogoutView,
    RefreshView,
    RegisterView,
    ResetPasswordView,
    SessionListView,
    SessionRevokeView,
    UserViewSet,
)

auth_urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    path("register/", RegisterView.as_view(), name="auth-register"),
    path("login/", LoginView.as_view(), name="auth-login"),
    path("refresh/", RefreshView.as_view(), name="auth-refresh"),
    path("logout/", LogoutView.as_view(), name="auth-logout"),
    path("forgot-password/", ForgotPasswordView.as_view(), name="auth-forgot-password"),
    path("reset-password/", ResetPasswordView.as_view(), name="auth-reset-password"),
    # ---------------- AUTHENTICATED ----------------
    path("me/", AuthMeView.as_view(), name="auth-me"),
    path("sessions/", SessionListView.as_view(), name="auth-sessions"),
    path(
        "sessions/<int:session_id>/revoke/",
        SessionRevokeView.as_view(),
        name="auth-session-revoke",
    ),
]

router = SimpleRouter()
router.register(r"", UserViewSet, basename="users")

user_urlpatterns = [
    path("", include(router.urls)),
]

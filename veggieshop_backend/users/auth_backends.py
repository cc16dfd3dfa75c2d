"""
PATH: users/auth_backends.py

AUTH BACKEND: case-insensitive email login

Django's ModelBackend matches USERNAME_FIELD exactly; shoppers type their
email in whatever case they like. Disabled users never authenticate.

This is used by django.contrib.auth.authenticate() (API login + admin site).
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

User = get_user_model()


class EmailBackend(ModelBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        identifier = (kwargs.get("email") or username or "").strip()
        if not identifier or password is None:
            return None

        try:
            user = User.objects.get(email__iexact=identifier)
        except User.DoesNotExist:
            # Run the hasher anyway to keep timing flat
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None

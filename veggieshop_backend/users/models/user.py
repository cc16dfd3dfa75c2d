"""
PATH: users/models/user.py

CUSTOM USER MODEL

- Email is the login identity (unique, matched case-insensitively).
- Role is either USER (customer) or ADMIN (shop operator).
- is_active doubles as the "enabled" flag; disabled users cannot log in.
- is_staff only gates the Django admin site; API authorization uses role.
"""

from __future__ import annotations

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models

from permissions.roles import ROLE_ADMIN, ROLE_USER


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        email = self.normalize_email((email or "").strip())
        if not email:
            raise ValueError("Users must have an email address")

        extra_fields.setdefault("role", ROLE_USER)
        extra_fields.setdefault("is_active", True)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("name", "Administrator")
        extra_fields.setdefault("role", ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)

    def get_by_natural_key(self, username):
        return self.get(**{f"{self.model.USERNAME_FIELD}__iexact": username})


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    class Role(models.TextChoices):
        USER = ROLE_USER, "User"
        ADMIN = ROLE_ADMIN, "Admin"

    name = models.CharField(max_length=80)
    email = models.EmailField(max_length=120, unique=True)

    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.email} ({self.role})"

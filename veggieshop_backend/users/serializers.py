# users/serializers.py

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from permissions.roles import ALL_ROLES
from users.models import RefreshSession

User = get_user_model()

PASSWORD_FIELD_KWARGS = {
    "write_only": True,
    "min_length": 6,
    "max_length": 64,
    "style": {"input_type": "password"},
}


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.Serializer):
    """
    Input validation only.
    Account creation is handled by users.services.
    """
    name = serializers.CharField(max_length=80)
    email = serializers.EmailField(max_length=120)
    password = serializers.CharField(validators=[validate_password], **PASSWORD_FIELD_KWARGS)


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=128)
    new_password = serializers.CharField(validators=[validate_password], **PASSWORD_FIELD_KWARGS)


class ChangePasswordSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True, style={"input_type": "password"})
    new_password = serializers.CharField(validators=[validate_password], **PASSWORD_FIELD_KWARGS)


# ---------------- PROFILE ----------------
class UserUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=80)
    email = serializers.EmailField(max_length=120)


class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=sorted(ALL_ROLES))


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """
    enabled = serializers.BooleanField(source="is_active", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "enabled",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ---------------- AUTH OUTPUT (SWAGGER) ----------------
class AuthResponseSerializer(serializers.Serializer):
    access_token = serializers.CharField()
    token_type = serializers.CharField()
    expires_in = serializers.IntegerField()
    user = UserSerializer()


class RefreshResponseSerializer(serializers.Serializer):
    access_token = serializers.CharField()
    token_type = serializers.CharField()
    expires_in = serializers.IntegerField()
    user_email = serializers.EmailField()


class SessionSerializer(serializers.ModelSerializer):
    class Meta:
        model = RefreshSession
        fields = ["id", "device_info", "created_at", "expires_at", "revoked"]
        read_only_fields = fields


class SessionsResponseSerializer(serializers.Serializer):
    sessions = SessionSerializer(many=True)
    current_session_id = serializers.IntegerField(allow_null=True)

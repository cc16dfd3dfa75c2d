from .password_reset_token import PasswordResetToken
from .refresh_session import RefreshSession
from .user import User, UserManager

__all__ = [
    "User",
    "UserManager",
    "RefreshSession",
    "PasswordResetToken",
]

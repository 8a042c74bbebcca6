from __future__ import annotations

from rosterclient.models.auth import (
    LoginCredentials,
    PasswordChange,
    ProfileUpdate,
    RegisterData,
    User,
)
from rosterclient.models.http import SKIP_ERROR_TOAST, ResponseDescriptor

__all__ = [
    # auth
    "User",
    "LoginCredentials",
    "RegisterData",
    "ProfileUpdate",
    "PasswordChange",
    # http
    "ResponseDescriptor",
    "SKIP_ERROR_TOAST",
]

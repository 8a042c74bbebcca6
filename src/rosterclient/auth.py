"""Auth service: login, register, profile and logout on the ad hoc client.

The session credential is an HTTP-only cookie set by the server; this module
never reads it. It only keeps the CSRF token in step with the session:
a fresh token after login, no token after logout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from rosterclient.api_client import unwrap
from rosterclient.errors import RosterClientError
from rosterclient.models.auth import (
    LoginCredentials,
    PasswordChange,
    ProfileUpdate,
    RegisterData,
    User,
)

if TYPE_CHECKING:
    from rosterclient.api import ApiClient
    from rosterclient.csrf import TokenManager
    from rosterclient.protocols import Notifier

log = structlog.get_logger()

LOGOUT_MESSAGE = "Logged out successfully"


class AuthService:
    def __init__(self, api: ApiClient, tokens: TokenManager, notifier: Notifier) -> None:
        self._api = api
        self._tokens = tokens
        self._notifier = notifier

    async def login(self, credentials: LoginCredentials) -> User:
        response = await self._api.post("/auth/login", json=credentials.model_dump())
        user = User.model_validate(unwrap(response.json()))
        # The previous token belonged to the anonymous session.
        self._tokens.clear()
        await self._tokens.initialize()
        log.info("login_complete", user_id=user.id)
        return user

    async def register(self, data: RegisterData) -> User:
        response = await self._api.post("/auth/register", json=data.model_dump(exclude_none=True))
        return User.model_validate(unwrap(response.json()))

    async def get_profile(self, *, skip_error_toast: bool = False) -> User:
        response = await self._api.get("/auth/me", skip_error_toast=skip_error_toast)
        return User.model_validate(unwrap(response.json()))

    async def update_profile(self, update: ProfileUpdate) -> User:
        response = await self._api.put("/auth/me", json=update.model_dump(exclude_none=True))
        return User.model_validate(unwrap(response.json()))

    async def change_password(self, change: PasswordChange) -> None:
        await self._api.put("/auth/change-password", json=change.model_dump())

    async def logout(self) -> None:
        """Log out on the server, then always drop local session state."""
        try:
            await self._api.post("/auth/logout", skip_error_toast=True)
        except RosterClientError as exc:
            # Continue with local logout
            log.info("logout_server_call_failed", code=exc.code, reason=exc.message)
        finally:
            self._tokens.clear()
        self._notifier.success(LOGOUT_MESSAGE)

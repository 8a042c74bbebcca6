"""Unit tests for rosterclient.auth."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest
from fakes import TOKEN_PATH, RecordingNotifier

from rosterclient.auth import LOGOUT_MESSAGE, AuthService
from rosterclient.errors import ApiError, ErrorCode, RosterClientError
from rosterclient.interceptors import CSRF_HEADER
from rosterclient.models import LoginCredentials, PasswordChange, ProfileUpdate, RegisterData

if TYPE_CHECKING:
    import respx

    from rosterclient.api import ApiClient
    from rosterclient.csrf import TokenManager
    from rosterclient.navigation import PathNavigator

USER = {"id": 12, "email": "coach@roster.test", "first_name": "Pat", "role": "head_coach"}


@pytest.fixture()
def auth(api: ApiClient, tokens: TokenManager, notifier: RecordingNotifier) -> AuthService:
    return AuthService(api, tokens, notifier)


def _ok(data: object = None) -> httpx.Response:
    return httpx.Response(200, json={"success": True, "data": data})


def _tokens(*values: str) -> list[httpx.Response]:
    return [httpx.Response(200, json={"token": value}) for value in values]


class TestLogin:
    async def test_login_rotates_token(
        self, router: respx.MockRouter, auth: AuthService, tokens: TokenManager
    ) -> None:
        token_route = router.get(TOKEN_PATH).mock(side_effect=_tokens("tok-1", "tok-2"))
        login_route = router.post("/auth/login").mock(return_value=_ok(USER))

        user = await auth.login(LoginCredentials(email="coach@roster.test", password="pw"))

        assert user.id == 12
        assert user.first_name == "Pat"
        assert login_route.calls.last.request.headers[CSRF_HEADER] == "tok-1"
        assert json.loads(login_route.calls.last.request.content) == {
            "email": "coach@roster.test",
            "password": "pw",
        }
        assert token_route.call_count == 2
        assert tokens.get_token() == "tok-2"

    async def test_failure_envelope(self, router: respx.MockRouter, auth: AuthService) -> None:
        router.get(TOKEN_PATH).mock(side_effect=_tokens("tok-1"))
        router.post("/auth/login").mock(
            return_value=httpx.Response(
                200, json={"success": False, "error": "Invalid credentials"}
            )
        )

        with pytest.raises(RosterClientError) as exc_info:
            await auth.login(LoginCredentials(email="coach@roster.test", password="bad"))

        assert exc_info.value.code == ErrorCode.INVALID_RESPONSE
        assert exc_info.value.message == "Invalid credentials"

    async def test_wrong_password_on_login_page_does_not_redirect(
        self,
        router: respx.MockRouter,
        auth: AuthService,
        notifier: RecordingNotifier,
        redirects: list[str],
        navigator: PathNavigator,
    ) -> None:
        navigator.navigate("/login")
        router.get(TOKEN_PATH).mock(side_effect=_tokens("tok-1"))
        router.post("/auth/login").mock(
            return_value=httpx.Response(401, json={"error": "Invalid credentials"})
        )

        with pytest.raises(ApiError):
            await auth.login(LoginCredentials(email="coach@roster.test", password="bad"))

        assert redirects == []
        assert notifier.errors == []


class TestProfile:
    async def test_register_omits_unset_fields(
        self, router: respx.MockRouter, auth: AuthService
    ) -> None:
        router.get(TOKEN_PATH).mock(side_effect=_tokens("tok-1"))
        route = router.post("/auth/register").mock(return_value=_ok(USER))

        await auth.register(
            RegisterData(
                email="coach@roster.test",
                password="pw",
                first_name="Pat",
                last_name="Lee",
                role="head_coach",
            )
        )

        assert "phone" not in json.loads(route.calls.last.request.content)

    async def test_get_profile(self, router: respx.MockRouter, auth: AuthService) -> None:
        router.get("/auth/me").mock(return_value=_ok(USER))

        user = await auth.get_profile()

        assert user.email == "coach@roster.test"

    async def test_anonymous_profile_check_is_silent(
        self,
        router: respx.MockRouter,
        auth: AuthService,
        notifier: RecordingNotifier,
        redirects: list[str],
    ) -> None:
        router.get("/auth/me").mock(
            return_value=httpx.Response(401, json={"error": "Not authenticated"})
        )

        with pytest.raises(ApiError) as exc_info:
            await auth.get_profile()

        assert exc_info.value.status_code == 401
        assert redirects == []
        assert notifier.errors == []

    async def test_update_profile(self, router: respx.MockRouter, auth: AuthService) -> None:
        router.get(TOKEN_PATH).mock(side_effect=_tokens("tok-1"))
        route = router.put("/auth/me").mock(return_value=_ok({**USER, "phone": "555-0100"}))

        user = await auth.update_profile(ProfileUpdate(phone="555-0100"))

        assert user.phone == "555-0100"
        assert json.loads(route.calls.last.request.content) == {"phone": "555-0100"}
        assert route.calls.last.request.headers[CSRF_HEADER] == "tok-1"

    async def test_change_password(self, router: respx.MockRouter, auth: AuthService) -> None:
        router.get(TOKEN_PATH).mock(side_effect=_tokens("tok-1"))
        route = router.put("/auth/change-password").mock(return_value=_ok())

        await auth.change_password(PasswordChange(current_password="old", new_password="new"))

        assert json.loads(route.calls.last.request.content) == {
            "current_password": "old",
            "new_password": "new",
        }
        assert route.calls.last.request.headers[CSRF_HEADER] == "tok-1"


class TestLogout:
    async def test_logout_clears_token(
        self,
        router: respx.MockRouter,
        auth: AuthService,
        tokens: TokenManager,
        notifier: RecordingNotifier,
    ) -> None:
        router.get(TOKEN_PATH).mock(side_effect=_tokens("tok-1"))
        router.post("/auth/logout").mock(return_value=_ok())

        await auth.logout()

        assert tokens.get_token() is None
        assert notifier.successes == [LOGOUT_MESSAGE]

    async def test_server_failure_still_logs_out_locally(
        self,
        router: respx.MockRouter,
        auth: AuthService,
        tokens: TokenManager,
        notifier: RecordingNotifier,
    ) -> None:
        router.get(TOKEN_PATH).mock(side_effect=_tokens("tok-1"))
        router.post("/auth/logout").mock(
            return_value=httpx.Response(500, json={"error": "Database unavailable"})
        )

        await auth.logout()

        assert tokens.get_token() is None
        assert notifier.errors == []
        assert notifier.successes == [LOGOUT_MESSAGE]

    async def test_network_failure_still_logs_out_locally(
        self,
        router: respx.MockRouter,
        auth: AuthService,
        tokens: TokenManager,
        notifier: RecordingNotifier,
    ) -> None:
        tokens.set_token("tok-1")
        router.post("/auth/logout").mock(side_effect=httpx.ConnectError("Connection refused"))

        await auth.logout()

        assert tokens.get_token() is None
        assert notifier.errors == []
        assert notifier.successes == [LOGOUT_MESSAGE]

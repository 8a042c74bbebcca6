"""Integration test fixtures.

Provides a fake roster backend (a Starlette app served in-process through
``httpx.ASGITransport``) and a fully wired session from ``open_session``.
The backend issues CSRF tokens, checks them on mutations and tracks the
session cookie, so both API clients are exercised end to end.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from rosterclient.config import Settings
from rosterclient.session import open_session

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fakes import RecordingNotifier
    from starlette.requests import Request

    from rosterclient.navigation import PathNavigator
    from rosterclient.state import AppState

BASE_URL = "http://roster.test/api/v1"
SESSION_COOKIE = "session"
SESSION_ID = "s-1"
COACH = {"id": 1, "email": "coach@roster.test", "first_name": "Pat", "role": "head_coach"}


def _fail(status_code: int, error: str) -> JSONResponse:
    return JSONResponse({"success": False, "error": error}, status_code=status_code)


def _ok(data: object = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse({"success": True, "data": data}, status_code=status_code)


class FakeRosterBackend:
    """In-process stand-in for the roster API.

    ``token_status`` forces the token endpoint to fail; ``unauthorized_error``
    is the message sent with 401s on session-protected mutations.
    """

    def __init__(self) -> None:
        self.token_requests = 0
        self.token_status = 200
        self.unauthorized_error = "Token expired"
        self.issued_tokens: set[str] = set()
        # X-CSRF-Token header of every mutation, None when absent
        self.received_tokens: list[str | None] = []
        self.app = Starlette(
            routes=[
                Route("/api/v1/auth/csrf-token", self.csrf_token, methods=["GET"]),
                Route("/api/v1/auth/login", self.login, methods=["POST"]),
                Route("/api/v1/auth/logout", self.logout, methods=["POST"]),
                Route("/api/v1/auth/me", self.me, methods=["GET"]),
                Route("/api/v1/players", self.list_players, methods=["GET"]),
                Route("/api/v1/players", self.create_player, methods=["POST"]),
                Route("/api/v1/players/byId/{player_id}", self.delete_player, methods=["DELETE"]),
            ]
        )

    def _csrf_valid(self, request: Request) -> bool:
        token = request.headers.get("x-csrf-token")
        self.received_tokens.append(token)
        return token in self.issued_tokens

    def _has_session(self, request: Request) -> bool:
        return request.cookies.get(SESSION_COOKIE) == SESSION_ID

    async def csrf_token(self, request: Request) -> JSONResponse:
        self.token_requests += 1
        if self.token_status != 200:
            return JSONResponse({"error": "CSRF unavailable"}, status_code=self.token_status)
        token = f"tok-{self.token_requests}"
        self.issued_tokens.add(token)
        return JSONResponse({"token": token})

    async def login(self, request: Request) -> JSONResponse:
        if not self._csrf_valid(request):
            return _fail(403, "Invalid CSRF token")
        credentials = await request.json()
        response = _ok({**COACH, "email": credentials["email"]})
        response.set_cookie(SESSION_COOKIE, SESSION_ID, path="/", httponly=True)
        return response

    async def logout(self, request: Request) -> JSONResponse:
        if not self._csrf_valid(request):
            return _fail(403, "Invalid CSRF token")
        response = _ok()
        response.delete_cookie(SESSION_COOKIE, path="/")
        return response

    async def me(self, request: Request) -> JSONResponse:
        if not self._has_session(request):
            return _fail(401, "Not authenticated")
        return _ok(COACH)

    async def list_players(self, request: Request) -> JSONResponse:
        return _ok([])

    async def create_player(self, request: Request) -> JSONResponse:
        if not self._csrf_valid(request):
            return _fail(403, "Invalid CSRF token")
        return _ok({"id": 7, **(await request.json())}, status_code=201)

    async def delete_player(self, request: Request) -> JSONResponse:
        if not self._csrf_valid(request):
            return _fail(403, "Invalid CSRF token")
        if not self._has_session(request):
            return _fail(401, self.unauthorized_error)
        return _ok()


@pytest.fixture()
def backend() -> FakeRosterBackend:
    return FakeRosterBackend()


@pytest.fixture()
async def session(
    backend: FakeRosterBackend,
    navigator: PathNavigator,
    notifier: RecordingNotifier,
) -> AsyncIterator[AppState]:
    settings = Settings(api={"base_url": BASE_URL}, csrf={"prefetch_on_start": False})
    async with open_session(
        settings,
        navigator=navigator,
        notifier=notifier,
        transport=httpx.ASGITransport(app=backend.app),
        configure_logging=False,
    ) as state:
        yield state

"""Roster API operations.

Each operation returns the decoded JSON envelope (``{"success": ..., "data": ...}``).
Pass ``init_overrides`` to adjust a single call, e.g.
``{"skip_error_toast": True}`` or ``{"headers": {...}}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rosterclient.generated.runtime import (
    BaseAPI,
    RequestInit,
    RequiredError,
    json_value,
    path_param,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

API_PREFIX = "/api/v1"


class DefaultApi(BaseAPI):
    # ------------------------------------------------------------------
    # auth
    # ------------------------------------------------------------------

    async def get_profile(self, init_overrides: Mapping[str, Any] | None = None) -> Any:
        response = await self.request(
            f"{API_PREFIX}/auth/me", RequestInit(method="GET"), init_overrides
        )
        return json_value(response)

    async def login(
        self,
        login_request: Mapping[str, Any],
        init_overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        if login_request is None:
            raise RequiredError("login_request", "login")
        response = await self.request(
            f"{API_PREFIX}/auth/login",
            RequestInit(method="POST", json=dict(login_request)),
            init_overrides,
        )
        return json_value(response)

    async def logout(self, init_overrides: Mapping[str, Any] | None = None) -> Any:
        response = await self.request(
            f"{API_PREFIX}/auth/logout", RequestInit(method="POST"), init_overrides
        )
        return json_value(response)

    # ------------------------------------------------------------------
    # players
    # ------------------------------------------------------------------

    async def list_players(
        self,
        page: int | None = None,
        limit: int | None = None,
        search: str | None = None,
        init_overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        query = {
            key: value
            for key, value in (("page", page), ("limit", limit), ("search", search))
            if value is not None
        }
        response = await self.request(
            f"{API_PREFIX}/players",
            RequestInit(method="GET", query=query or None),
            init_overrides,
        )
        return json_value(response)

    async def get_player(
        self,
        player_id: int | str,
        init_overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        if player_id is None:
            raise RequiredError("player_id", "get_player")
        response = await self.request(
            f"{API_PREFIX}/players/byId/{path_param(player_id)}",
            RequestInit(method="GET"),
            init_overrides,
        )
        return json_value(response)

    async def create_player(
        self,
        player: Mapping[str, Any],
        init_overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        if player is None:
            raise RequiredError("player", "create_player")
        response = await self.request(
            f"{API_PREFIX}/players",
            RequestInit(method="POST", json=dict(player)),
            init_overrides,
        )
        return json_value(response)

    async def update_player(
        self,
        player_id: int | str,
        player: Mapping[str, Any],
        init_overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        if player_id is None:
            raise RequiredError("player_id", "update_player")
        if player is None:
            raise RequiredError("player", "update_player")
        response = await self.request(
            f"{API_PREFIX}/players/byId/{path_param(player_id)}",
            RequestInit(method="PUT", json=dict(player)),
            init_overrides,
        )
        return json_value(response)

    async def delete_player(
        self,
        player_id: int | str,
        init_overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        if player_id is None:
            raise RequiredError("player_id", "delete_player")
        response = await self.request(
            f"{API_PREFIX}/players/byId/{path_param(player_id)}",
            RequestInit(method="DELETE"),
            init_overrides,
        )
        return json_value(response)

    # ------------------------------------------------------------------
    # teams
    # ------------------------------------------------------------------

    async def upload_team_logo(
        self,
        filename: str,
        content: bytes,
        content_type: str = "image/png",
        init_overrides: Mapping[str, Any] | None = None,
    ) -> Any:
        if content is None:
            raise RequiredError("content", "upload_team_logo")
        response = await self.request(
            f"{API_PREFIX}/teams/logo",
            RequestInit(method="POST", files={"logo": (filename, content, content_type)}),
            init_overrides,
        )
        return json_value(response)

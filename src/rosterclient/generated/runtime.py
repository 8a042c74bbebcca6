"""Roster API runtime.

Generated-client runtime: configuration, middleware pipeline and the base
class every generated API extends. Operations build a ``RequestInit`` and
call ``BaseAPI.request``, which runs middleware ``pre`` hooks, sends the
request, runs ``on_error`` hooks for transport failures and ``post`` hooks
for every response, then raises ``ResponseError`` for non-2xx statuses.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from rosterclient.errors import ApiError, ErrorCode, RosterClientError
from rosterclient.models.http import decode_json_body, error_message_from_body

if TYPE_CHECKING:
    from collections.abc import Mapping

BASE_PATH = "http://localhost:5000"


@dataclass
class RequestInit:
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, Any] | None = None
    json: Any = None
    data: Any = None
    files: Any = None
    # Suppress automatic user-facing error notifications for this call
    skip_error_toast: bool = False


@dataclass
class FetchParams:
    url: str
    init: RequestInit


@dataclass
class RequestContext:
    url: str
    init: RequestInit


@dataclass
class ResponseContext:
    url: str
    init: RequestInit
    response: httpx.Response


@dataclass
class ErrorContext:
    url: str
    init: RequestInit
    error: Exception
    response: httpx.Response | None = None


class Middleware:
    """Base middleware; override any of the hooks."""

    async def pre(self, context: RequestContext) -> FetchParams | None:
        return None

    async def post(self, context: ResponseContext) -> httpx.Response | None:
        return None

    async def on_error(self, context: ErrorContext) -> httpx.Response | None:
        return None


@dataclass
class Configuration:
    base_path: str = BASE_PATH
    middleware: list[Middleware] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)
    # Injected client; when None the API creates (and owns) its own.
    http_client: httpx.AsyncClient | None = None
    timeout_seconds: float = 30.0


class ResponseError(ApiError):
    """The server answered with a status outside 200-299."""

    def __init__(
        self,
        response: httpx.Response,
        url: str,
        message: str = "Response returned an error code",
    ) -> None:
        body = decode_json_body(response)
        super().__init__(
            response.status_code,
            error_message_from_body(body) or message,
            url=url,
            body=body,
        )
        self.response = response


class FetchError(RosterClientError):
    """No response arrived and no middleware supplied one."""

    def __init__(
        self,
        cause: Exception,
        message: str = "The request failed and the middleware did not return a response",
    ) -> None:
        super().__init__(ErrorCode.NETWORK_ERROR, f"{message}: {cause}", recoverable=True)
        self.cause = cause


class RequiredError(ValueError):
    def __init__(self, field_name: str, operation: str) -> None:
        super().__init__(
            f'Required parameter "{field_name}" was null or undefined when calling {operation}().'
        )
        self.field = field_name


def path_param(value: Any) -> str:
    return quote(str(value), safe="")


class BaseAPI:
    """Shared request machinery for generated APIs."""

    def __init__(self, configuration: Configuration | None = None) -> None:
        self.configuration = configuration or Configuration()
        self._owns_client = self.configuration.http_client is None
        self._client = self.configuration.http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.configuration.timeout_seconds)
        )

    def with_middleware(self, *middlewares: Middleware) -> BaseAPI:
        configuration = dataclasses.replace(
            self.configuration,
            middleware=[*self.configuration.middleware, *middlewares],
            http_client=self._client,
        )
        return type(self)(configuration)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        path: str,
        init: RequestInit,
        init_overrides: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{self.configuration.base_path.rstrip('/')}{path}"
        if init_overrides:
            overrides = dict(init_overrides)
            headers = {**init.headers, **overrides.pop("headers", {})}
            init = dataclasses.replace(init, headers=headers, **overrides)

        response = await self._fetch_api(url, init)
        if 200 <= response.status_code < 300:
            return response
        raise ResponseError(response, url=url)

    async def _fetch_api(self, url: str, init: RequestInit) -> httpx.Response:
        fetch_params = FetchParams(url=url, init=init)
        for middleware in self.configuration.middleware:
            fetch_params = (
                await middleware.pre(RequestContext(url=fetch_params.url, init=fetch_params.init))
                or fetch_params
            )

        response: httpx.Response | None = None
        try:
            response = await self._send(fetch_params)
        except httpx.HTTPError as exc:
            for middleware in self.configuration.middleware:
                response = (
                    await middleware.on_error(
                        ErrorContext(
                            url=fetch_params.url,
                            init=fetch_params.init,
                            error=exc,
                            response=response,
                        )
                    )
                    or response
                )
            if response is None:
                raise FetchError(exc) from exc

        for middleware in self.configuration.middleware:
            response = (
                await middleware.post(
                    ResponseContext(url=fetch_params.url, init=fetch_params.init, response=response)
                )
                or response
            )
        return response

    async def _send(self, fetch_params: FetchParams) -> httpx.Response:
        init = fetch_params.init
        return await self._client.request(
            init.method,
            fetch_params.url,
            headers={**self.configuration.headers, **init.headers},
            params=init.query,
            json=init.json,
            data=init.data,
            files=init.files,
        )


def json_value(response: httpx.Response) -> Any:
    if not response.content:
        return None
    return response.json()

"""Ad hoc API client on top of ``httpx.AsyncClient``.

Request/response flow:
1. Request hook: CsrfRequestInterceptor adds X-CSRF-Token to POST/PUT/PATCH/DELETE.
2. HTTP request: sent relative to ``api.base_url`` with the shared cookie jar.
3. Response hook: non-2xx responses go through SessionResponseInterceptor
   (redirect/notification policy) and are raised as ApiError.
4. Transport errors: notified generically and raised as RosterClientError.

Service modules (rosterclient.auth, ...) share one ApiClient so they inherit
token handling and error policy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from rosterclient import __version__
from rosterclient.errors import ApiError, ErrorCode, RosterClientError
from rosterclient.models.http import (
    SKIP_ERROR_TOAST,
    ResponseDescriptor,
    decode_json_body,
    error_message_from_body,
)

if TYPE_CHECKING:
    from http.cookiejar import CookieJar

    from rosterclient.config import Settings
    from rosterclient.interceptors import CsrfRequestInterceptor, SessionResponseInterceptor


def build_http_client(
    settings: Settings,
    *,
    base_url: str = "",
    cookies: CookieJar | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    event_hooks: dict[str, list[Any]] | None = None,
) -> httpx.AsyncClient:
    """Create an httpx client for the API.

    No default Content-Type is set: httpx derives it from ``json=``,
    ``data=`` or ``files=``, which keeps the multipart boundary intact for
    uploads.
    """
    return httpx.AsyncClient(
        base_url=base_url,
        cookies=cookies,
        transport=transport,
        event_hooks=event_hooks,
        follow_redirects=False,
        timeout=httpx.Timeout(settings.api.timeout_seconds),
        headers={
            "Accept": "application/json",
            "User-Agent": f"rosterclient/{__version__}",
        },
    )


class SessionResponseHook:
    """httpx response hook feeding failed responses to SessionResponseInterceptor."""

    def __init__(self, interceptor: SessionResponseInterceptor) -> None:
        self._interceptor = interceptor

    async def __call__(self, response: httpx.Response) -> None:
        if response.is_success:
            return

        await response.aread()
        body = decode_json_body(response)
        request = response.request
        descriptor = ResponseDescriptor(
            status_code=response.status_code,
            request_url=str(request.url),
            skip_error_toast=bool(request.extensions.get(SKIP_ERROR_TOAST, False)),
            error_message=error_message_from_body(body),
        )
        self._interceptor.handle_error(descriptor)
        raise ApiError(
            response.status_code,
            descriptor.error_message or f"HTTP {response.status_code} from {request.url.path}",
            url=descriptor.request_url,
            body=body,
        )


class ApiClient:
    """Configured client for the roster API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        interceptor: SessionResponseInterceptor,
    ) -> None:
        self._client = client
        self._interceptor = interceptor

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._client

    async def request(
        self,
        method: str,
        url: str,
        *,
        skip_error_toast: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request; ``skip_error_toast`` suppresses automatic notifications.

        Raises ApiError for non-2xx responses and RosterClientError when no
        response arrived.
        """
        extensions = dict(kwargs.pop("extensions", None) or {})
        extensions[SKIP_ERROR_TOAST] = skip_error_toast
        try:
            return await self._client.request(method, url, extensions=extensions, **kwargs)
        except httpx.HTTPError as exc:
            self._interceptor.handle_transport_error(url, skip_error_toast=skip_error_toast)
            raise RosterClientError(
                code=ErrorCode.NETWORK_ERROR,
                message=f"Network error calling {method.upper()} {url}: {exc}",
                recoverable=True,
            ) from exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()


def build_api_client(
    settings: Settings,
    request_interceptor: CsrfRequestInterceptor,
    response_interceptor: SessionResponseInterceptor,
    *,
    cookies: CookieJar | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ApiClient:
    """Create the ad hoc client with both interceptors installed as event hooks."""
    client = build_http_client(
        settings,
        base_url=settings.api.base_url,
        cookies=cookies,
        transport=transport,
        event_hooks={
            "request": [request_interceptor],
            "response": [SessionResponseHook(response_interceptor)],
        },
    )
    return ApiClient(client, response_interceptor)

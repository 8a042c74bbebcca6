"""Wiring for the generated client.

Configures the generated DefaultApi with the server origin, the shared cookie
jar and two middlewares that delegate to the same interceptor instances the
ad hoc client uses: CSRF for mutations (``pre``) and the session policy for
failed responses (``post`` / ``on_error``).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from rosterclient.api import build_http_client
from rosterclient.errors import ErrorCode, RosterClientError
from rosterclient.generated.apis.default_api import DefaultApi
from rosterclient.generated.runtime import (
    BASE_PATH,
    Configuration,
    ErrorContext,
    FetchParams,
    Middleware,
    RequestContext,
    ResponseContext,
)
from rosterclient.models.http import ResponseDescriptor, decode_json_body, error_message_from_body

if TYPE_CHECKING:
    from http.cookiejar import CookieJar

    import httpx

    from rosterclient.config import Settings
    from rosterclient.interceptors import CsrfRequestInterceptor, SessionResponseInterceptor

_API_PREFIX_SUFFIX = re.compile(r"/api/v1/?$")


def derive_server_base(api_base_url: str) -> str:
    """Strip the ``/api/v1`` suffix: generated operation paths already carry it."""
    return _API_PREFIX_SUFFIX.sub("", api_base_url) or BASE_PATH


class CsrfMiddleware(Middleware):
    def __init__(self, interceptor: CsrfRequestInterceptor) -> None:
        self._interceptor = interceptor

    async def pre(self, context: RequestContext) -> FetchParams | None:
        await self._interceptor(context.init)
        return FetchParams(url=context.url, init=context.init)


class SessionMiddleware(Middleware):
    def __init__(self, interceptor: SessionResponseInterceptor) -> None:
        self._interceptor = interceptor

    async def post(self, context: ResponseContext) -> httpx.Response | None:
        response = context.response
        if response.is_success:
            return None
        self._interceptor.handle_error(
            ResponseDescriptor(
                status_code=response.status_code,
                request_url=context.url,
                skip_error_toast=context.init.skip_error_toast,
                error_message=error_message_from_body(decode_json_body(response)),
            )
        )
        return None

    async def on_error(self, context: ErrorContext) -> httpx.Response | None:
        self._interceptor.handle_transport_error(
            context.url, skip_error_toast=context.init.skip_error_toast
        )
        return None


def build_generated_client(
    settings: Settings,
    request_interceptor: CsrfRequestInterceptor,
    response_interceptor: SessionResponseInterceptor,
    *,
    cookies: CookieJar | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> DefaultApi:
    http_client = build_http_client(settings, cookies=cookies, transport=transport)
    configuration = Configuration(
        base_path=derive_server_base(settings.api.base_url),
        middleware=[CsrfMiddleware(request_interceptor), SessionMiddleware(response_interceptor)],
        http_client=http_client,
        timeout_seconds=settings.api.timeout_seconds,
    )
    return DefaultApi(configuration)


def unwrap(envelope: Any) -> Any:
    """Unwrap an API envelope: ``{"success": true, "data": ...}`` -> data."""
    if not isinstance(envelope, dict) or envelope.get("success") is not True:
        raise RosterClientError(
            code=ErrorCode.INVALID_RESPONSE,
            message=error_message_from_body(envelope) or "Request failed",
        )
    return envelope.get("data")

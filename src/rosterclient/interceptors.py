"""Request and response interceptors shared by both API clients.

Neither interceptor knows which client it runs in. The ad hoc client
(rosterclient.api) installs them as httpx event hooks; the generated client
(rosterclient.api_client) wraps them as runtime middleware. Sharing the same
instances is what keeps header name, token endpoint and session policy
identical across the two.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from rosterclient.errors import CsrfTokenError

if TYPE_CHECKING:
    from rosterclient.models.http import ResponseDescriptor
    from rosterclient.protocols import Navigator, Notifier, RequestDescriptor, TokenProvider

log = structlog.get_logger()

CSRF_HEADER = "X-CSRF-Token"
MUTATING_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH", "DELETE"})

AUTH_SURFACE_PATHS: tuple[str, ...] = ("/login", "/register")
PROFILE_CHECK_PATH = "/auth/me"

SESSION_REVOKED_MESSAGE = "Your session has been revoked. Please log in again."
SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."
DEFAULT_ERROR_MESSAGE = "An error occurred"


def is_mutating(method: str | None) -> bool:
    return bool(method) and method.upper() in MUTATING_METHODS


def session_message(error_message: str | None) -> str:
    """Pick the 401 notification text from the server's error message."""
    if error_message and "revoked" in error_message:
        return SESSION_REVOKED_MESSAGE
    return SESSION_EXPIRED_MESSAGE


class CsrfRequestInterceptor:
    """Attach the CSRF token to mutating requests before they are sent."""

    def __init__(self, tokens: TokenProvider, header_name: str = CSRF_HEADER) -> None:
        self._tokens = tokens
        self.header_name = header_name

    async def __call__(self, request: RequestDescriptor) -> None:
        if not is_mutating(request.method):
            return

        try:
            token = await self._tokens.ensure()
        except CsrfTokenError as exc:
            # Send anyway; the server rejects the request if the header was required.
            log.warning(
                "csrf_token_unavailable",
                method=request.method,
                code=exc.code,
                reason=exc.message,
            )
            return

        request.headers[self.header_name] = token


class SessionResponseInterceptor:
    """Decide the user-facing side effects of a failed API call.

    Side effects are fire-and-forget; the caller's adapter raises the error
    afterwards so the caller still gets to handle it locally. Nothing here
    retries the failed request.
    """

    def __init__(
        self,
        tokens: TokenProvider,
        navigator: Navigator,
        notifier: Notifier,
    ) -> None:
        self._tokens = tokens
        self._navigator = navigator
        self._notifier = notifier

    def is_auth_surface(self, request_url: str) -> bool:
        path = self._navigator.current_path()
        if any(marker in path for marker in AUTH_SURFACE_PATHS):
            return True
        return PROFILE_CHECK_PATH in request_url

    def handle_error(self, response: ResponseDescriptor) -> None:
        log.info(
            "api_error",
            status_code=response.status_code,
            url=response.request_url,
            suppressed=response.skip_error_toast,
        )

        if response.is_unauthorized:
            self._tokens.clear()
            if response.skip_error_toast or self.is_auth_surface(response.request_url):
                return
            log.warning("session_redirect_to_login", url=response.request_url)
            self._navigator.redirect_to_login()
            self._notifier.error(session_message(response.error_message))
            return

        if response.skip_error_toast:
            return
        self._notifier.error(response.error_message or DEFAULT_ERROR_MESSAGE)

    def handle_transport_error(self, request_url: str, *, skip_error_toast: bool = False) -> None:
        """No response arrived at all (connection refused, timeout, ...)."""
        log.warning("api_transport_error", url=request_url, suppressed=skip_error_toast)
        if not skip_error_toast:
            self._notifier.error(DEFAULT_ERROR_MESSAGE)

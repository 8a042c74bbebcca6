"""Session state container.

AppState is created once per session by ``rosterclient.session.open_session``
and handed to the embedding application. Both API clients in it share one
TokenManager, one pair of interceptors and one cookie jar.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from http.cookiejar import CookieJar

    import httpx

    from rosterclient.api import ApiClient
    from rosterclient.auth import AuthService
    from rosterclient.config import Settings
    from rosterclient.csrf import TokenManager
    from rosterclient.generated.apis.default_api import DefaultApi
    from rosterclient.interceptors import CsrfRequestInterceptor, SessionResponseInterceptor
    from rosterclient.protocols import Navigator, Notifier


@dataclass
class AppState:
    """Holds all shared runtime state of one client session."""

    settings: Settings
    cookies: CookieJar
    tokens: TokenManager
    navigator: Navigator
    notifier: Notifier
    request_interceptor: CsrfRequestInterceptor
    response_interceptor: SessionResponseInterceptor

    api: ApiClient
    generated: DefaultApi
    auth: AuthService

    # Every client opened for this session, closed on exit
    http_clients: list[httpx.AsyncClient] = field(default_factory=list)

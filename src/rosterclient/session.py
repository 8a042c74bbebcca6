"""Client session entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Build the shared cookie jar, TokenManager and interceptors
- Build both API clients on top of them
- Prefetch the CSRF token and close every HTTP client on exit
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from http.cookiejar import CookieJar
from typing import TYPE_CHECKING

import structlog

from rosterclient import __version__
from rosterclient.api import build_api_client, build_http_client
from rosterclient.api_client import build_generated_client
from rosterclient.auth import AuthService
from rosterclient.config import Settings
from rosterclient.csrf import TokenManager
from rosterclient.interceptors import CsrfRequestInterceptor, SessionResponseInterceptor
from rosterclient.navigation import PathNavigator
from rosterclient.notifications import LogNotifier
from rosterclient.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    import httpx

    from rosterclient.protocols import Navigator, Notifier

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once per session before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout belongs to the embedding application
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@asynccontextmanager
async def open_session(
    settings: Settings | None = None,
    *,
    navigator: Navigator | None = None,
    notifier: Notifier | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    configure_logging: bool = True,
) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for one client session."""
    settings = settings or Settings()
    if configure_logging:
        _setup_logging(settings)

    log.info("session_starting", version=__version__, base_url=settings.api.base_url)

    navigator = navigator or PathNavigator(settings.api.base_path)
    notifier = notifier or LogNotifier()
    cookies = CookieJar()

    # The token client has no hooks: fetching a token must not re-enter
    # the interceptors that asked for it.
    token_client = build_http_client(settings, cookies=cookies, transport=transport)
    tokens = TokenManager(
        token_client,
        settings.csrf_token_url,
        ttl_seconds=settings.csrf.token_ttl_seconds,
    )

    request_interceptor = CsrfRequestInterceptor(tokens)
    response_interceptor = SessionResponseInterceptor(tokens, navigator, notifier)

    api = build_api_client(
        settings,
        request_interceptor,
        response_interceptor,
        cookies=cookies,
        transport=transport,
    )
    generated = build_generated_client(
        settings,
        request_interceptor,
        response_interceptor,
        cookies=cookies,
        transport=transport,
    )

    generated_client = generated.configuration.http_client
    http_clients = [token_client, api.http_client]
    if generated_client is not None:
        http_clients.append(generated_client)

    state = AppState(
        settings=settings,
        cookies=cookies,
        tokens=tokens,
        navigator=navigator,
        notifier=notifier,
        request_interceptor=request_interceptor,
        response_interceptor=response_interceptor,
        api=api,
        generated=generated,
        auth=AuthService(api, tokens, notifier),
        http_clients=http_clients,
    )

    if settings.csrf.prefetch_on_start:
        await tokens.initialize()

    log.info("session_started", csrf_token_cached=not tokens.is_expired())

    try:
        yield state
    finally:
        for client in http_clients:
            await client.aclose()
        log.info("session_closed")

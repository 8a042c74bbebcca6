"""Shared test fixtures for the rosterclient test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest
import respx
from fakes import BASE_URL, TOKEN_URL, TTL_SECONDS, FakeClock, RecordingNotifier

from rosterclient.api import ApiClient, build_api_client
from rosterclient.config import Settings
from rosterclient.csrf import TokenManager
from rosterclient.interceptors import CsrfRequestInterceptor, SessionResponseInterceptor
from rosterclient.navigation import PathNavigator

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator


@pytest.fixture()
def settings() -> Settings:
    return Settings(api={"base_url": BASE_URL}, csrf={"prefetch_on_start": False})


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def redirects() -> list[str]:
    """Targets passed to the navigator's redirect callback, in order."""
    return []


@pytest.fixture()
def navigator(redirects: list[str]) -> PathNavigator:
    return PathNavigator(path="/dashboard", on_redirect=redirects.append)


@pytest.fixture()
def router() -> Iterator[respx.MockRouter]:
    """respx router scoped to the API base URL; unmatched requests fail."""
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as mock:
        yield mock


@pytest.fixture()
async def token_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
def tokens(token_client: httpx.AsyncClient, clock: FakeClock) -> TokenManager:
    return TokenManager(token_client, TOKEN_URL, ttl_seconds=TTL_SECONDS, clock=clock)


@pytest.fixture()
def request_interceptor(tokens: TokenManager) -> CsrfRequestInterceptor:
    return CsrfRequestInterceptor(tokens)


@pytest.fixture()
def response_interceptor(
    tokens: TokenManager,
    navigator: PathNavigator,
    notifier: RecordingNotifier,
) -> SessionResponseInterceptor:
    return SessionResponseInterceptor(tokens, navigator, notifier)


@pytest.fixture()
async def api(
    settings: Settings,
    request_interceptor: CsrfRequestInterceptor,
    response_interceptor: SessionResponseInterceptor,
) -> AsyncIterator[ApiClient]:
    client = build_api_client(settings, request_interceptor, response_interceptor)
    yield client
    await client.aclose()

"""Anti-forgery (CSRF) token cache and single-flight fetcher.

One TokenManager is created per session and shared by both API clients, so
there is exactly one view of token freshness. The TokenManager receives an
``httpx.AsyncClient`` via constructor injection; that client must carry no
request/response hooks, otherwise fetching a token would re-enter the
interceptors that asked for it.

Concurrency model: asyncio, single thread. The in-flight fetch is an
``asyncio.Task`` stored on the manager. Checking for it and storing a new
one happen with no ``await`` in between, so two callers can never both
start a network fetch.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
import structlog

from rosterclient.config import DEFAULT_TOKEN_TTL_SECONDS
from rosterclient.errors import CsrfTokenError, ErrorCode
from rosterclient.models.http import decode_json_body, error_message_from_body

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()


@dataclass(frozen=True)
class TokenState:
    """Cached token and the clock reading taken when it was stored."""

    value: str | None = None
    obtained_at: float | None = None


_EMPTY_STATE = TokenState()


class TokenCache:
    """Holds the current token and decides when it has expired."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._state = _EMPTY_STATE

    @property
    def state(self) -> TokenState:
        return self._state

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self) -> str | None:
        return self._state.value

    def set(self, token: str) -> None:
        # One assignment: value and timestamp are never observed apart.
        self._state = TokenState(value=token, obtained_at=self._clock())

    def clear(self) -> None:
        self._state = _EMPTY_STATE

    def is_expired(self) -> bool:
        state = self._state
        if state.value is None or state.obtained_at is None:
            return True
        return self._clock() - state.obtained_at > self._ttl_seconds


class TokenManager:
    """Cache, single-flight fetcher and ensurer for the CSRF token."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token_url: str,
        *,
        ttl_seconds: float = DEFAULT_TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._token_url = token_url
        self._inflight: asyncio.Task[str] | None = None
        self.cache = TokenCache(ttl_seconds, clock)

    @property
    def token_url(self) -> str:
        return self._token_url

    @property
    def fetch_in_progress(self) -> bool:
        return self._inflight is not None

    def get_token(self) -> str | None:
        return self.cache.get()

    def set_token(self, token: str) -> None:
        self.cache.set(token)

    def is_expired(self) -> bool:
        return self.cache.is_expired()

    def clear(self) -> None:
        """Drop the cached token (logout, detected 401).

        A fetch already in flight is left alone and still stores its result.
        """
        self.cache.clear()

    async def ensure(self) -> str:
        """Return a valid token, fetching one only when the cache cannot serve it.

        Raises CsrfTokenError when a fetch was needed and failed.
        """
        token = self.cache.get()
        if token is not None and not self.cache.is_expired():
            return token
        return await self.fetch()

    async def fetch(self) -> str:
        """Fetch a fresh token, joining the fetch already in flight if there is one.

        Every concurrent caller receives the same token or the same exception.
        """
        task = self._inflight
        if task is None:
            task = asyncio.create_task(self._fetch_token())
            self._inflight = task
        # A cancelled caller must not cancel the fetch other callers are waiting on
        return await asyncio.shield(task)

    async def refresh(self) -> str:
        return await self.fetch()

    async def initialize(self) -> str | None:
        """Prefetch a token at startup or after login.

        Returns None on failure; the token is then fetched lazily by the
        first mutating request.
        """
        try:
            return await self.fetch()
        except CsrfTokenError as exc:
            log.info("csrf_initialize_deferred", code=exc.code, reason=exc.message)
            return None

    async def _fetch_token(self) -> str:
        try:
            token = await self._request_token()
        except Exception:
            self.cache.clear()
            raise
        else:
            self.cache.set(token)
            log.debug("csrf_token_fetched", url=self._token_url)
            return token
        finally:
            # Runs before any waiter resumes, so a caller arriving after
            # settlement always starts a new fetch.
            self._inflight = None

    async def _request_token(self) -> str:
        try:
            response = await self._client.get(self._token_url)
        except httpx.HTTPError as exc:
            log.warning("csrf_token_fetch_failed", url=self._token_url, reason="network_error")
            raise CsrfTokenError(
                code=ErrorCode.CSRF_TOKEN_FETCH_FAILED,
                message=f"Network error fetching CSRF token: {exc}",
                recoverable=True,
            ) from exc

        body = decode_json_body(response)

        if not response.is_success:
            log.warning(
                "csrf_token_fetch_failed",
                url=self._token_url,
                status_code=response.status_code,
            )
            detail = error_message_from_body(body)
            message = f"HTTP {response.status_code} fetching CSRF token"
            raise CsrfTokenError(
                code=ErrorCode.CSRF_TOKEN_FETCH_FAILED,
                message=f"{message}: {detail}" if detail else message,
                recoverable=response.status_code >= 500,
            )

        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            log.warning("csrf_token_fetch_failed", url=self._token_url, reason="missing_token")
            raise CsrfTokenError(
                code=ErrorCode.CSRF_TOKEN_MISSING,
                message="CSRF token not found in response",
            )
        return token

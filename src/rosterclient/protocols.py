"""Protocol interfaces for injected capabilities.

The interceptors reference these protocols, not concrete implementations.
This allows:
- Tests to use lightweight recording implementations or mocks
- Embedding applications (CLI, TUI, web backend) to plug in their own
  navigation and notification surfaces
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import MutableMapping


class RequestDescriptor(Protocol):
    """An outbound request about to be sent.

    ``httpx.Request`` and the generated runtime's ``RequestInit`` both
    satisfy this. Only ``headers`` may be mutated.
    """

    method: str
    headers: MutableMapping[str, str]


class TokenProvider(Protocol):
    """Source of anti-forgery tokens for outbound mutating requests."""

    async def ensure(self) -> str: ...

    def clear(self) -> None: ...


class Navigator(Protocol):
    """Client-side navigation surface."""

    def current_path(self) -> str: ...

    def redirect_to_login(self) -> None: ...


class Notifier(Protocol):
    """User-visible notification surface (toasts, status lines, ...)."""

    def error(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

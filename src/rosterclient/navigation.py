from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()


class PathNavigator:
    """In-process navigation state implementing the Navigator protocol.

    Tracks the current client route. Redirecting to login moves the route to
    ``{base_path}/login`` and hands the target to ``on_redirect`` so the
    embedding application can react (open a login prompt, stop a worker, ...).
    """

    def __init__(
        self,
        base_path: str = "",
        *,
        path: str = "/",
        on_redirect: Callable[[str], None] | None = None,
    ) -> None:
        self.base_path = base_path.rstrip("/")
        self.path = path
        self._on_redirect = on_redirect

    @property
    def login_path(self) -> str:
        return f"{self.base_path}/login"

    def current_path(self) -> str:
        return self.path

    def navigate(self, path: str) -> None:
        self.path = path

    def redirect_to_login(self) -> None:
        target = self.login_path
        log.info("navigate", from_path=self.path, to_path=target)
        self.path = target
        if self._on_redirect is not None:
            self._on_redirect(target)

from __future__ import annotations

import structlog

log = structlog.get_logger()


class LogNotifier:
    """Notifier that reports user-facing messages through structlog."""

    def error(self, message: str) -> None:
        log.error("user_notification", level="error", message=message)

    def success(self, message: str) -> None:
        log.info("user_notification", level="success", message=message)

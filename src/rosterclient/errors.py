from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    CSRF_TOKEN_FETCH_FAILED = "CSRF_TOKEN_FETCH_FAILED"
    CSRF_TOKEN_MISSING = "CSRF_TOKEN_MISSING"
    UNAUTHORIZED = "UNAUTHORIZED"
    REQUEST_FAILED = "REQUEST_FAILED"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"


class RosterClientError(Exception):
    """Raised for all expected failure conditions of the client.

    Interceptors have already fired their side effects (notification,
    redirect) by the time this reaches the caller; callers only decide how
    to recover locally.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "recoverable": self.recoverable,
            }
        }


class CsrfTokenError(RosterClientError):
    """The anti-forgery token could not be obtained from the server."""


class ApiError(RosterClientError):
    """The API answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        url: str = "",
        body: Any = None,
    ) -> None:
        code = ErrorCode.UNAUTHORIZED if status_code == 401 else ErrorCode.REQUEST_FAILED
        super().__init__(code, message, recoverable=status_code >= 500)
        self.status_code = status_code
        self.url = url
        self.body = body

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["error"]["status_code"] = self.status_code
        return data

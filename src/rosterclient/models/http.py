from __future__ import annotations

from dataclasses import dataclass

import httpx

# Request extension key carrying the per-request notification opt-out
SKIP_ERROR_TOAST = "skip_error_toast"


def error_message_from_body(body: object) -> str | None:
    """Return the server's ``error`` string from a decoded JSON body, if any."""
    if isinstance(body, dict):
        message = body.get("error")
        if isinstance(message, str) and message:
            return message
    return None


def decode_json_body(response: httpx.Response) -> object:
    """Decode a response body as JSON, returning ``None`` for non-JSON bodies."""
    try:
        return response.json()
    except ValueError:
        return None


@dataclass(frozen=True)
class ResponseDescriptor:
    """What the response interceptor needs to know about a failed call."""

    status_code: int
    request_url: str
    skip_error_toast: bool = False
    error_message: str | None = None  # "error" field of the JSON body

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

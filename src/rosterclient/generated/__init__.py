"""OpenAPI-generated client for the roster API.

Regenerate rather than edit by hand; wiring lives in rosterclient.api_client.
"""

from __future__ import annotations

from rosterclient.generated.apis.default_api import DefaultApi
from rosterclient.generated.runtime import (
    BASE_PATH,
    BaseAPI,
    Configuration,
    FetchError,
    FetchParams,
    Middleware,
    RequestContext,
    RequestInit,
    RequiredError,
    ResponseContext,
    ResponseError,
)

__all__ = [
    "BASE_PATH",
    "DefaultApi",
    "BaseAPI",
    "Configuration",
    "FetchError",
    "FetchParams",
    "Middleware",
    "RequestContext",
    "RequestInit",
    "RequiredError",
    "ResponseContext",
    "ResponseError",
]

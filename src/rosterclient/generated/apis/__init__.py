from __future__ import annotations

from rosterclient.generated.apis.default_api import DefaultApi

__all__ = ["DefaultApi"]

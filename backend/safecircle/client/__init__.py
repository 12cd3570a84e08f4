"""Python client for the SafeCircle API."""

from safecircle.client.api_client import ApiError, SafeCircleClient
from safecircle.client.listener import AlertListener
from safecircle.client.session import Session

__all__ = ["AlertListener", "ApiError", "SafeCircleClient", "Session"]

"""
Waste API error taxonomy.

Every failure the client can produce is one of these types.
Nothing is recovered inside the library: errors propagate to the caller,
who owns retries and user-facing alerts.
"""

from typing import Any, Optional


class WasteApiError(Exception):
    """Base class for all client failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(WasteApiError):
    """Transport succeeded but the body is not JSON-shaped text."""

    def __init__(self, raw_text: str, status_code: Optional[int] = None, detail: str = ""):
        self.raw_text = raw_text
        message = f"Invalid response format from server: {detail or raw_text[:200]}"
        super().__init__(message, status_code)


class ApiError(WasteApiError):
    """Server answered with a status outside the 2xx range."""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        self.payload = payload
        super().__init__(message, status_code)


class AnalysisTimeoutError(WasteApiError):
    """The analysis timer fired before the server answered."""

    def __init__(self, timeout_s: float):
        self.timeout_s = timeout_s
        super().__init__(f"Waste analysis timed out after {timeout_s:g}s")


class RequestValidationError(WasteApiError):
    """Precondition failed before any network call was made."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class NetworkError(WasteApiError):
    """The transport itself failed (DNS, refused connection, offline)."""

"""Error taxonomy for request dispatch.

Transport faults (no interpretable status code) are kept apart from API-level
rejections (a status code was received and classified as a failure).
"""

from typing import Any


class CordRestError(Exception):
    """Base class for all errors raised by cordrest."""


class BodyEncodingError(CordRestError, ValueError):
    """Raised when a structured request body cannot be encoded as JSON."""

    def __init__(self, original_exception: Exception):
        self.original_exception = original_exception
        super().__init__(f"Request body is not JSON serializable: {original_exception}")


# --- Transport faults ---

class TransportError(CordRestError):
    """Opaque failure before any interpretable status code was obtained. Never retried."""


class UnknownResponseError(TransportError):
    def __init__(self, message: str = "Unknown response."):
        super().__init__(message)


class ResponseError(TransportError):
    def __init__(self, message: str = "Response error."):
        super().__init__(message)


class RequestTimeoutError(TransportError):
    def __init__(self, message: str = "Request timeout."):
        super().__init__(message)


class ConnectionFault(TransportError):
    """Lower-level connection or socket error."""


# --- API-level rejections ---

class ApiError(CordRestError):
    """Request completed with a status code that resolves to a failure."""

    def __init__(self, status_code: int, response: Any = None):
        self.status_code = status_code
        self.response = response
        message = f"HTTP {status_code}"
        if isinstance(response, dict) and response.get("message"):
            message += f": {response['message']}"
        super().__init__(message)


class ClientError(ApiError):
    """4xx other than 429. Carries the decoded error body."""


class RateLimitedError(ApiError):
    """429 that could not be retried (no retry_after, or attempts exhausted)."""

    def __init__(self, status_code: int, response: Any = None, attempts: int = 0):
        self.attempts = attempts
        super().__init__(status_code, response)


class UnexpectedStatusError(ApiError):
    """Any status outside 2xx/4xx. The body is intentionally not decoded."""

    def __init__(self, status_code: int):
        super().__init__(status_code, None)

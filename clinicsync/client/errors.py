"""Failure taxonomy and the result type returned by the API gateway."""

from typing import Any, Optional

NETWORK_UNREACHABLE_MESSAGE = (
    "Cannot connect to backend server. Please ensure the server is running."
)


class ApiError(Exception):
    """A classified gateway failure.

    Instances are carried inside ``ApiResult`` and are never raised past
    the gateway.
    """

    kind = "unclassified"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self):
        return f"<{type(self).__name__}(message={self.message!r}, status_code={self.status_code})>"


class NetworkUnreachable(ApiError):
    """No response reached the client."""

    kind = "network_unreachable"

    def __init__(self):
        super().__init__(NETWORK_UNREACHABLE_MESSAGE)


class ServerRejected(ApiError):
    """The server answered with ``success: false`` or an error status."""

    kind = "server_rejected"


class Unclassified(ApiError):
    """Any failure shape not covered by the other kinds."""

    kind = "unclassified"


class ApiResult:
    """Either a response payload or an ``ApiError``, never both."""

    __slots__ = ("payload", "error")

    def __init__(self, payload: Optional[dict] = None, error: Optional[ApiError] = None):
        if (payload is None) == (error is None):
            raise ValueError("ApiResult needs exactly one of payload or error")
        self.payload = payload
        self.error = error

    @classmethod
    def success(cls, payload: dict) -> "ApiResult":
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: ApiError) -> "ApiResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def get(self, key: str, default: Any = None) -> Any:
        """Read a field from a successful payload."""
        if self.payload is None:
            return default
        return self.payload.get(key, default)

    def __repr__(self):
        if self.ok:
            return f"<ApiResult ok keys={sorted(self.payload)}>"
        return f"<ApiResult error={self.error!r}>"

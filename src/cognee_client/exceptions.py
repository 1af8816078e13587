"""Custom exceptions for the Cognee client."""

from typing import Any, Optional

from pydantic import BaseModel


class NormalizedError(BaseModel):
    """The single shape every failure is reduced to."""

    message: str
    status_code: int | None = None
    payload: Any = None


class CogneeError(Exception):
    """Base exception for all Cognee errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def error(self) -> NormalizedError:
        return NormalizedError(message=self.message, status_code=self.status_code, payload=self.payload)


class TransportError(CogneeError):
    """Raised when the request could not be completed (connect, DNS, TLS, timeout, decoding, redirects)."""


class AuthenticationError(CogneeError):
    """Raised when authentication fails (401)."""

    def __init__(self, message: str = "Authentication failed", payload: Any = None) -> None:
        super().__init__(message, status_code=401, payload=payload)


class AuthorizationError(CogneeError):
    """Raised when authorization is denied (403)."""

    def __init__(self, message: str = "Authorization denied", payload: Any = None) -> None:
        super().__init__(message, status_code=403, payload=payload)


class NotFoundError(CogneeError):
    """Raised when a resource is not found (404)."""

    def __init__(self, message: str = "Resource not found", payload: Any = None) -> None:
        super().__init__(message, status_code=404, payload=payload)


class ConflictError(CogneeError):
    """Raised when the server rejects a request as conflicting (409)."""

    def __init__(self, message: str = "Conflict", payload: Any = None) -> None:
        super().__init__(message, status_code=409, payload=payload)


class ValidationError(CogneeError):
    """Raised when request validation fails (422)."""

    def __init__(self, message: str = "Validation error", payload: Any = None) -> None:
        super().__init__(message, status_code=422, payload=payload)


class RateLimitError(CogneeError):
    """Raised when rate limit is exceeded (429)."""

    def __init__(self, message: str = "Rate limit exceeded", payload: Any = None) -> None:
        super().__init__(message, status_code=429, payload=payload)


class ServerError(CogneeError):
    """Raised when server returns 5xx error."""

    def __init__(self, message: str = "Server error", status_code: int = 500, payload: Any = None) -> None:
        super().__init__(message, status_code=status_code, payload=payload)


_STATUS_ERRORS: dict[int, type[CogneeError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def error_for_status(message: str, status_code: int, payload: Optional[Any] = None) -> CogneeError:
    """Build the exception matching an HTTP failure status."""
    error_cls = _STATUS_ERRORS.get(status_code)
    if error_cls is not None:
        return error_cls(message, payload=payload)
    if status_code >= 500:
        return ServerError(message, status_code=status_code, payload=payload)
    return CogneeError(message, status_code=status_code, payload=payload)

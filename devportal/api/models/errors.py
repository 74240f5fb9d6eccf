"""Error envelope returned by the health API.

Every non-2xx response has the shape ``{"error": {message, type, param, code}}``
so portal clients can show one banner regardless of which route failed.
"""

from pydantic import BaseModel


class APIError(BaseModel):
    """Error object returned to API clients."""

    message: str
    type: str
    param: str | None = None
    code: str | None = None


class ErrorResponse(BaseModel):
    """Error response wrapper."""

    error: APIError


ERROR_TYPE_INVALID_REQUEST = "invalid_request_error"
ERROR_TYPE_NOT_FOUND = "not_found_error"
ERROR_TYPE_UNAVAILABLE = "service_unavailable_error"
ERROR_TYPE_API_ERROR = "api_error"
ERROR_TYPE_SERVER = "server_error"


def create_error_response(
    message: str,
    error_type: str = ERROR_TYPE_API_ERROR,
    param: str | None = None,
    code: str | None = None,
) -> ErrorResponse:
    """Create an error response.

    Args:
        message: Human-readable error message
        error_type: Type of error (see ERROR_TYPE_* constants)
        param: Parameter that caused the error (optional)
        code: Error code (optional)

    Returns:
        ErrorResponse object
    """
    return ErrorResponse(
        error=APIError(
            message=message,
            type=error_type,
            param=param,
            code=code,
        )
    )


def invalid_request_error(message: str, param: str | None = None) -> ErrorResponse:
    """Batch or lookup that cannot start (missing route, bad component)."""
    return create_error_response(message, ERROR_TYPE_INVALID_REQUEST, param=param)


def not_found_error(message: str, param: str | None = None) -> ErrorResponse:
    """Landscape missing from the catalog."""
    return create_error_response(message, ERROR_TYPE_NOT_FOUND, param=param)


def health_service_unavailable(message: str = "Health service not configured") -> ErrorResponse:
    """Catalog or proxy settings failed to load at startup."""
    return create_error_response(message, ERROR_TYPE_UNAVAILABLE, code="proxy_not_configured")


def server_error(message: str = "Internal server error") -> ErrorResponse:
    return create_error_response(message, ERROR_TYPE_SERVER, code="internal_error")

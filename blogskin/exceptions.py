"""Exception classes for blogskin.

The rendering core (template interpreter, sanitizer, resolver, theme
analyzer) never raises. These exceptions belong to the boundary: configuration
profiles, backend access and the command-line surface.
"""

from typing import Optional, Dict, Any, Type


class BlogSkinError(Exception):
    """Base exception class for all blogskin errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(BlogSkinError):
    """A profile or configuration file is missing, invalid or unwritable."""


class AuthenticationError(BlogSkinError):
    """The access token cannot be used."""


class TokenExpiredError(AuthenticationError):
    """The access token's ``exp`` claim lies in the past."""


class ValidationError(BlogSkinError):
    """Bad user input: files, formats, options."""


class MaxRetriesExceededError(BlogSkinError):
    """Every attempt of a retried request failed with a retryable error."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_exception: Optional[Exception] = None
    ) -> None:
        super().__init__(message, details={"attempts": attempts})
        self.attempts = attempts
        self.last_exception = last_exception


class CircuitBreakerOpenError(BlogSkinError):
    """Requests are refused until the breaker's recovery timeout elapses."""


class APIError(BlogSkinError):
    """Error response from the skin backend.

    ``endpoint`` is the request path that failed (``/api/skins/blog/<id>``),
    so a degraded record can be traced back to its route. ``retryable`` marks
    the statuses worth another attempt.
    """

    retryable = False
    default_message = "Request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
        endpoint: Optional[str] = None,
    ) -> None:
        super().__init__(message or self.default_message)
        self.status_code = status_code
        self.response_data = response_data or {}
        self.endpoint = endpoint

    def __str__(self) -> str:
        if self.endpoint:
            return f"{self.message} ({self.endpoint})"
        return self.message

    @classmethod
    def for_status(cls, status_code: int) -> Type["APIError"]:
        """Pick the exception class for an HTTP error status."""
        if status_code in STATUS_ERRORS:
            return STATUS_ERRORS[status_code]
        if status_code >= 500:
            return ServerError
        return cls


class BadRequestError(APIError):
    default_message = "Bad request"


class UnauthorizedError(APIError):
    default_message = "Unauthorized - check your access token"


class ForbiddenError(APIError):
    default_message = "Forbidden - insufficient permissions"


class NotFoundError(APIError):
    default_message = "Resource not found"


class ServerError(APIError):
    retryable = True
    default_message = "Server error"


class RateLimitError(APIError):
    """429 from the backend; ``retry_after`` comes from the Retry-After header."""

    retryable = True
    default_message = "Rate limit exceeded"

    def __init__(self, message: Optional[str] = None, retry_after: Optional[int] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


STATUS_ERRORS: Dict[int, Type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    429: RateLimitError,
}

"""
Exception classes for the YouTube Music API layer.

Every failure that leaves the API layer is one of the kinds below, so
callers can tell an expired session from a flaky connection without
inspecting HTTP details. Field-level parse problems are never raised; the
parsers degrade to default values instead.

Exception Hierarchy:
    YTMusicError (base)
        NotAuthenticated - no session cookie at all
        AuthExpired - session cookie expired or rejected by the server
        NetworkError - transport-level failure (retried)
        ApiError - non-2xx, non-auth HTTP status
        ParseError - 2xx body that is not a JSON object
        UnknownError - anything else
        RequestCancelled - caller abandoned the request
"""

from typing import Optional


class YTMusicError(Exception):
    """
    Base exception for all API layer errors.

    Attributes:
        message: Human-readable error description.
        details: Dictionary with additional context (endpoint, status code...).
        title: Short user-facing heading for the error kind.
        is_transient: True when retrying the same call may succeed.

    Example:
        try:
            client.get_home()
        except YTMusicError as e:
            logger.error(f"{e.title}: {e.message}")
    """

    title = "Error"
    is_transient = False

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description shown to the user.
            details: Optional dictionary containing additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class NotAuthenticated(YTMusicError):
    """Raised when no session cookie exists at all."""

    title = "Not Signed In"

    def __init__(self, message: str = "Please sign in to continue.", details: Optional[dict] = None) -> None:
        super().__init__(message, details)


class AuthExpired(YTMusicError):
    """
    Raised when the session cookie is past its expiry, or when the server
    answers 401/403.

    Terminal for the call that raised it: it is never retried, and the
    request executor notifies the session owner once before it propagates.
    """

    title = "Session Expired"

    def __init__(self, message: str = "Your session has expired. Please sign in again.",
                 details: Optional[dict] = None) -> None:
        super().__init__(message, details)


class NetworkError(YTMusicError):
    """
    Raised for transport-level failures (DNS, refused connection, timeout).

    Attributes:
        underlying: The original exception raised by the HTTP library.
    """

    title = "Connection Error"
    is_transient = True

    def __init__(self, underlying: Exception, details: Optional[dict] = None) -> None:
        super().__init__(f"Network error: {underlying}", details)
        self.underlying = underlying


class ApiError(YTMusicError):
    """
    Raised for non-2xx responses that are not authentication failures.

    Rate limiting (429) and server errors (5xx) are transient; any other
    4xx is a caller error and is not retried.

    Attributes:
        code: HTTP status code.
    """

    title = "Server Error"

    def __init__(self, code: int, message: str = "", details: Optional[dict] = None) -> None:
        super().__init__(message or f"API error (HTTP {code})", details)
        self.code = code

    @property
    def is_transient(self) -> bool:
        return self.code == 429 or self.code >= 500


class ParseError(YTMusicError):
    """Raised when a 2xx body is not a JSON object or a required top-level shape is absent."""

    title = "Data Error"


class UnknownError(YTMusicError):
    """Raised for failures that fit no other kind."""

    title = "Error"


class RequestCancelled(YTMusicError):
    """Raised when the caller cancels an in-flight request or pagination."""

    title = "Cancelled"

    def __init__(self, message: str = "Request cancelled", details: Optional[dict] = None) -> None:
        super().__init__(message, details)

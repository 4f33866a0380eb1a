"""Custom exception hierarchy for rootly-tui.

Exception Hierarchy:
    RootlyTuiError (base)
    ├── ApiError - Rootly API calls
    │   ├── ApiConnectionError (retryable)
    │   ├── ApiRateLimitError (retryable)
    │   ├── ApiAuthenticationError
    │   └── ApiResponseError (retryable for 5xx)
    └── ConfigurationError - config file / settings issues

Usage:
    from rootly_tui.exceptions import ApiConnectionError

    try:
        response = await client.get(url)
    except httpx.TransportError as e:
        raise ApiConnectionError("Could not reach Rootly", endpoint=url) from e

Errors never cross into the browser core as exceptions; the UI layer turns
them into plain strings carried on result events.
"""

from typing import Any, Optional


class RootlyTuiError(Exception):
    """Base exception for all rootly-tui errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., IDs, URLs)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# API Errors
# =============================================================================


class ApiError(RootlyTuiError):
    """Base exception for Rootly API calls."""

    pass


class ApiConnectionError(ApiError):
    """Failed to connect to the API (network error, timeout)."""

    def __init__(self, message: str = "API connection failed", **context: Any) -> None:
        super().__init__(message, retryable=True, **context)


class ApiRateLimitError(ApiError):
    """API rate limit exceeded."""

    def __init__(
        self,
        message: str = "API rate limit exceeded",
        *,
        retry_after: Optional[float] = None,
        **context: Any,
    ) -> None:
        if retry_after is not None:
            context["retry_after"] = retry_after
        self.retry_after = retry_after
        super().__init__(message, retryable=True, **context)


class ApiAuthenticationError(ApiError):
    """API key rejected (401/403)."""

    def __init__(self, message: str = "API authentication failed", **context: Any) -> None:
        super().__init__(message, **context)


class ApiResponseError(ApiError):
    """The API answered with an unexpected status or an unparseable body."""

    def __init__(
        self,
        message: str = "Unexpected API response",
        *,
        status_code: Optional[int] = None,
        **context: Any,
    ) -> None:
        self.status_code = status_code
        if status_code is not None:
            context["status_code"] = status_code
        retryable = status_code is not None and status_code >= 500
        super().__init__(message, retryable=retryable, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(RootlyTuiError):
    """Configuration or settings error."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, **context)


__all__ = [
    "RootlyTuiError",
    "ApiError",
    "ApiConnectionError",
    "ApiRateLimitError",
    "ApiAuthenticationError",
    "ApiResponseError",
    "ConfigurationError",
]

"""
Errors raised by the USOS API client.

Every failure surfaces as a subclass of :class:`UsosClientError`:

* :class:`ConfigurationError` - required environment variable is absent;
* :class:`TransportError` - the HTTP transport failed (DNS, connection, TLS, timeout);
* :class:`ParseError` - a response body did not have the expected shape;
* :class:`HttpError` - the API answered with a 4xx/5xx status;
* :class:`UnexpectedError` - anything else, e.g. an informational status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from usos_core.api_errors import UsosApiError


class UsosClientError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(UsosClientError):
    """A required configuration value is missing."""

    def __init__(self, variable: str) -> None:
        super().__init__(f"Missing required environment variable: {variable}")
        self.variable = variable


class TransportError(UsosClientError):
    """The request never produced an HTTP response."""


class ParseError(UsosClientError):
    """Response parsing failed."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Response parsing failed: {detail}")
        self.detail = detail


class HttpError(UsosClientError):
    """Error status returned by the USOS API.

    Args:
        status_code: HTTP status code of the response.
        api_error: The structured error envelope, if the body could be parsed.
        body: Raw response body, kept for the cases where it could not.
    """

    def __init__(self, status_code: int, api_error: UsosApiError | None = None, body: str = "") -> None:
        self.status_code = status_code
        self.api_error = api_error
        self.body = body
        super().__init__(self._describe())

    def _describe(self) -> str:
        detail = str(self.api_error) if self.api_error is not None else self.body
        return f"Http error {self.status_code}" + (f" - {detail}" if detail else "")


class UnknownMethodError(HttpError):
    """The requested endpoint does not exist (404)."""

    def __init__(self, uri: str, api_error: UsosApiError | None = None, body: str = "") -> None:
        self.uri = uri
        super().__init__(404, api_error, body)

    def _describe(self) -> str:
        description = f"Unknown method: {self.uri}"
        if self.api_error is not None:
            description += f" - {self.api_error}"
        return description


class UnauthorizedError(HttpError):
    """The access token expired, the user logged out or revoked all tokens (401)."""

    def __init__(self, api_error: UsosApiError | None = None, body: str = "") -> None:
        super().__init__(401, api_error, body)


class UnexpectedError(UsosClientError):
    """Unexpected condition, not attributable to the API or the transport."""

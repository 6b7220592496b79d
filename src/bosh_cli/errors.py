"""SDK error types."""

from __future__ import annotations


class BoshSDKError(RuntimeError):
    """Base SDK error."""


class ApiUnavailableError(BoshSDKError):
    """Director could not be reached."""


class ApiRequestError(BoshSDKError):
    """Director returned an HTTP error response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ApiTimeoutError(BoshSDKError):
    """Timed out waiting for a director task."""


class TarballError(BoshSDKError):
    """Tarball could not be read."""

"""Custom exception hierarchy for campustwin."""

from __future__ import annotations

from typing import ClassVar


class TwinError(Exception):
    """Base exception for all campustwin errors."""

    #: HTTP status the facade uses when this error escapes a handler.
    status: ClassVar[int] = 500


class TwinConfigError(TwinError):
    """Invalid or missing configuration."""


class TwinValidationError(TwinError):
    """Request is missing fields or carries malformed values (user-correctable)."""

    status = 400


class TwinNotFoundError(TwinError):
    """No route geometry, or an unknown entity id."""

    status = 404


class TwinUpstreamError(TwinError):
    """Routing provider or network failure.

    The message of an error that reaches a caller is always generic; the
    provider detail is logged where the failure is caught.
    """

    status = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class TwinTransportError(TwinError):
    """HTTP-level failure talking to the twin facade (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)

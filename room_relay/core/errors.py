# room_relay/core/errors.py
from __future__ import annotations

from typing import Any, Optional


class RoomRelayError(RuntimeError):
    """
    Base class for every error raised by the relay's services.
    """


class UpstreamError(RoomRelayError):
    """
    Raised when the Resource API answers with a non-2xx status or cannot be
    reached at all.

    `status_code` and `body` carry the upstream response when one exists so
    the HTTP layer can pass them through unchanged. A transport failure
    leaves both as None.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class InvalidRequestError(RoomRelayError):
    """
    Raised when an inbound request is malformed in a way the framework's own
    validation does not catch (e.g. a boolean field of the wrong type).
    """


class NotFoundError(RoomRelayError):
    """
    Raised on semantic absence, e.g. a room without any session.
    """


class PaginationLimitExceeded(RoomRelayError):
    """
    Raised when a paginated upstream keeps returning full pages beyond the
    configured page bound.
    """

    def __init__(self, path: str, max_pages: int) -> None:
        super().__init__(
            f"Upstream {path} still returned full pages after {max_pages} requests"
        )
        self.path = path
        self.max_pages = max_pages


class TokenIssuanceError(RoomRelayError):
    """
    Raised when a management or auth token cannot be minted.
    """

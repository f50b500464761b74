from __future__ import annotations


class PaginationError(Exception):
    """Base exception for all pagewise errors."""


class InvalidRequest(PaginationError, ValueError):
    """Raised when page, page size or limit fall outside their bounds."""


class OrderingError(PaginationError):
    """Raised when an ordering policy is misconfigured or a row cannot be ordered."""


class DataSourceError(PaginationError):
    """Raised when the underlying data source fails or breaks its contract."""


class CursorError(PaginationError):
    """Base exception for cursor decoding failures."""


class MalformedCursor(CursorError):
    """Raised when a cursor is not a valid encoded token."""


class CursorVersionMismatch(CursorError):
    """Raised when a cursor was issued by another codec version or ordering."""


class CursorTypeMismatch(CursorError):
    """Raised when cursor values do not match the expected sort key shape."""


class InvalidCursor(PaginationError):
    """Raised when a client-supplied cursor cannot be used.

    The decoding failure is available as ``reason`` and as ``__cause__``.
    """

    def __init__(self, message: str, reason: CursorError | None = None) -> None:
        super().__init__(message)
        self.reason = reason

"""Exception hierarchy for the favorites sync engine.

    FavSyncError (base)
    ├── LocalStorageError   → local write failed; surfaced to the caller
    └── RemoteGatewayError  → network/HTTP failure; recorded, never fatal
"""

from typing import Any, Dict, Optional


class FavSyncError(Exception):
    """Base exception for all favsync errors.

    Attributes:
        message: Human-readable description.
        context: Extra debug info for logs.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class LocalStorageError(FavSyncError):
    """Raised when the on-device favorites collection cannot be written."""

    def __init__(
        self,
        message: str = "Could not save favorites on this device. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RemoteGatewayError(FavSyncError):
    """Raised by the remote gateway when a request fails.

    Covers connection errors, timeouts and non-2xx responses alike.
    """

    def __init__(
        self,
        message: str = "Could not reach the favorites service",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code

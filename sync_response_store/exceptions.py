"""
Internal exceptions for the sync response cache.

None of these cross the public store contract. Low-level modules raise
them; the accessor and the store catch them, log them and keep the most
recent one in ``last_error`` so callers can inspect what went wrong while
still treating the cache as cold.
"""


class SyncStoreError(Exception):
    """Base exception for all sync response cache errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StorageIOError(SyncStoreError):
    """Raised when a filesystem operation on the cache file fails."""

    def __init__(self, operation: str, path: str | None = None, cause: Exception | None = None):
        details = {"operation": operation}
        if path:
            details["path"] = path
        if cause:
            details["cause"] = str(cause)
        message = f"Storage I/O error during {operation}"
        if path:
            message += f": {path}"
        super().__init__(message, details)
        self.operation = operation
        self.path = path
        self.cause = cause


class DocumentDecodeError(SyncStoreError):
    """Raised when cached bytes cannot be decoded into a sync response."""

    def __init__(self, reason: str, cause: Exception | None = None):
        details = {"reason": reason}
        if cause:
            details["cause"] = str(cause)
        super().__init__(f"Cannot decode sync response: {reason}", details)
        self.reason = reason
        self.cause = cause


class IdentityError(SyncStoreError):
    """Raised when credentials cannot identify a cache location."""

    def __init__(self, reason: str, user_id: str | None = None):
        details = {"reason": reason}
        if user_id is not None:
            details["user_id"] = user_id
        super().__init__(f"Invalid identity: {reason}", details)
        self.reason = reason
        self.user_id = user_id

"""
Custom exceptions for cloud storage operations.

This module defines exception classes shared by every provider and by
the upload pipeline. Local file read failures are reported with the
built-in OSError (IOError) and transport failures with aiohttp's own
exceptions; neither is wrapped.
"""
from typing import Optional, Any


class CloudServiceError(Exception):
    """Base exception for all cloudkit errors."""

    def __init__(self, message: str, error_code: Optional[Any] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: Vendor error code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class UnsupportedError(CloudServiceError):
    """Raised when a vendor or operation is not supported."""
    pass


class ResponseDecodeError(CloudServiceError):
    """Raised when a remote response is malformed or misses required fields."""

    def __init__(self, message: str, response: Any = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            response: Raw HTTPResult kept for diagnostics
        """
        self.response = response
        super().__init__(message)


class ServiceError(CloudServiceError):
    """
    Raised when the remote endpoint reports an application-level failure.

    Covers both the ``code`` + ``message`` envelope (which some vendors
    send with HTTP 200) and plain non-2xx responses.
    """

    def __init__(
        self,
        code: Any,
        message: Optional[str] = None,
        status_code: Optional[int] = None
    ) -> None:
        self.code = code
        self.message = message or 'Unknown'
        self.status_code = status_code
        super().__init__(self.message, code)


class UploadFileNotExist(CloudServiceError):
    """Raised when the upload source is missing or is not a readable file."""

    def __init__(self, path: Any) -> None:
        self.path = path
        super().__init__(f"Upload file not found: {path}")

"""Exceptions for the Attachments feature."""
from typing import Any, Dict, Optional

from api.shared.exceptions import IvyServiceException, StorageError


class AttachmentStorageError(StorageError):
    """Raised when an attachment cannot be written or removed."""


class AttachmentTooLargeError(IvyServiceException):
    """Raised when an upload exceeds the configured byte ceiling."""

    def __init__(self, size: int, limit: int, details: Optional[Dict[str, Any]] = None):
        message = (
            f"File too large. Maximum size: {limit // (1024 * 1024)}MB"
        )
        error_details = {"size": size, "limit": limit}
        if details:
            error_details.update(details)
        super().__init__(message, "ATTACHMENT_TOO_LARGE", error_details)

"""Exceptions for the Conversation feature."""
from typing import Any, Dict, List, Optional

from api.shared.exceptions import DatabaseError, IvyServiceException


class ConversationException(IvyServiceException):
    """Base exception for conversation operations."""
    pass


class ConversationValidationError(ConversationException):
    """Raised when a conversation request is missing or has invalid fields."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONVERSATION_VALIDATION_ERROR", details)


class MissingFieldsError(ConversationValidationError):
    """Raised when required fields are absent or blank."""

    def __init__(self, fields: List[str]):
        self.fields = fields
        if len(fields) == 1:
            message = f"{fields[0]} is required"
        else:
            message = f"{', '.join(fields[:-1])} and {fields[-1]} are required"
        super().__init__(message, {"missing": fields})


class ConversationPersistenceError(DatabaseError):
    """Raised when a conversation cannot be written, including unique-key races."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.error_code = "CONVERSATION_PERSISTENCE_ERROR"

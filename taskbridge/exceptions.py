"""Custom exceptions for upstream service operations."""

from typing import Any, List, Optional


class TaskBridgeError(Exception):
    """Base exception for Task Bridge errors."""
    pass


class MondayAPIError(TaskBridgeError):
    """monday.com request failed (transport error, non-2xx, or GraphQL errors)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


class DirectoryLookupError(TaskBridgeError):
    """Slack directory lookup failed."""
    pass


class DeliveryError(TaskBridgeError):
    """Sending a message to a single recipient failed."""

    def __init__(self, message: str, recipient: Optional[str] = None):
        super().__init__(message)
        self.recipient = recipient

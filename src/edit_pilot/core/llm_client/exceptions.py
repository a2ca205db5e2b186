"""
Exceptions for completion service communication.
"""

from typing import Any, Dict, Optional

from ...utils.error_handling import EditPilotError


class CompletionError(EditPilotError):
    """Base exception for completion client errors."""
    pass


class TransportError(CompletionError):
    """The completion endpoint could not be reached."""
    pass


class ProtocolError(CompletionError):
    """The endpoint answered, but not with a chat-completion response."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.status_code = status_code


class DecodeError(CompletionError):
    """The endpoint's body is not valid JSON."""
    pass

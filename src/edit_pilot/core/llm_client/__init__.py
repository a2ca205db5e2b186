"""HTTP client for chat-completion endpoints."""

from .client import CompletionClient
from .exceptions import CompletionError, TransportError, ProtocolError, DecodeError

__all__ = ["CompletionClient", "CompletionError", "TransportError", "ProtocolError", "DecodeError"]

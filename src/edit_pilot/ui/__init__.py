"""
Presentation-shell integration for Edit Pilot.
"""

from .bridge import (
    ShellBridge,
    ShellMessage,
    LLMRequestMessage,
    NotifyMessage,
    OpenFileMessage,
    GoToLineColumnMessage,
    error_message,
)

__all__ = [
    "ShellBridge",
    "ShellMessage",
    "LLMRequestMessage",
    "NotifyMessage",
    "OpenFileMessage",
    "GoToLineColumnMessage",
    "error_message",
]

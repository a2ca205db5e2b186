"""
Editor session collaborator: the interface handlers drive, the settle-delay
helper, and an in-memory implementation.
"""

from .base import (
    ActiveEditor,
    EditorCommand,
    EditorOperations,
    Position,
    UISurface,
    to_editor_position,
)
from .settle import Settler, SettlePhase
from .headless import CommandNotFoundError, HeadlessEditor, HeadlessTextEditor, JournalEntry

__all__ = [
    "ActiveEditor",
    "EditorCommand",
    "EditorOperations",
    "Position",
    "UISurface",
    "to_editor_position",
    "Settler",
    "SettlePhase",
    "CommandNotFoundError",
    "HeadlessEditor",
    "HeadlessTextEditor",
    "JournalEntry",
]

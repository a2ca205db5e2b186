"""
Interface of the live editor session that command handlers drive.

The host editor (an IDE extension, an RPC bridge, or the in-memory
HeadlessEditor) implements EditorOperations; handlers only ever talk to it
through this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class EditorCommand:
    """Host command identifiers issued by the handlers."""

    QUICK_OPEN = "workbench.action.quickOpen"
    ACCEPT_QUICK_OPEN = "workbench.action.acceptSelectedQuickOpenItem"
    OPEN_PREVIOUS_EDITOR = "workbench.action.openPreviousRecentlyUsedEditor"
    GO_TO_LINE = "workbench.action.gotoLine"
    FIND_IN_FILES = "workbench.action.findInFiles"
    SHOW_COMMANDS = "workbench.action.showCommands"
    REVEAL_DEFINITION = "editor.action.revealDefinition"
    RENAME = "editor.action.rename"
    ACCEPT_RENAME = "acceptRenameInput"
    TOGGLE_SIDEBAR = "workbench.action.toggleSidebarVisibility"
    TOGGLE_PANEL = "workbench.action.togglePanel"


class UISurface(Enum):
    """Widgets a handler may have to wait for before the next step."""

    QUICK_OPEN = "quick_open"
    RENAME_INPUT = "rename_input"
    SEARCH_VIEW = "search_view"
    TEXT_EDITOR = "text_editor"


@dataclass(frozen=True)
class Position:
    """Zero-based position as the editor addresses it."""

    line: int
    character: int


def to_editor_position(line: int, column: int = 1) -> Position:
    """Convert a 1-based (line, column) to the editor's 0-based Position.

    Zero and negative inputs land on the first addressable line or column.
    """
    return Position(line=max(line - 1, 0), character=max(column - 1, 0))


class ActiveEditor(ABC):
    """The text editor that currently has focus."""

    @property
    @abstractmethod
    def file_name(self) -> str:
        pass

    @property
    @abstractmethod
    def line_count(self) -> int:
        pass

    @property
    @abstractmethod
    def selection(self) -> Position:
        """Current caret position."""
        pass

    @abstractmethod
    async def select_and_reveal(self, position: Position) -> None:
        """Move the caret to position and scroll it into the viewport."""
        pass


class EditorOperations(ABC):
    """Operations the host editor must offer to the dispatcher."""

    @abstractmethod
    async def execute_command(self, command_id: str, argument: Any = None) -> Any:
        """Run a host command by identifier, passing argument when given."""
        pass

    @abstractmethod
    async def type_text(self, text: str) -> None:
        """Type text into whatever widget or editor has focus."""
        pass

    @abstractmethod
    def active_editor(self) -> Optional[ActiveEditor]:
        pass

    @abstractmethod
    async def show_information_message(self, text: str) -> None:
        pass

    async def wait_until_ready(self, surface: UISurface) -> bool:
        """Wait for surface to accept input.

        Returns False when the host has no readiness signal for surface, in
        which case callers fall back to a fixed settle-delay.
        """
        return False

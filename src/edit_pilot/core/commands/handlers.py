"""
Execution handlers for catalog commands.

Each handler is a short sequence of editor operations. Steps that open a
widget and steps that type into or accept it are separated by a settle-delay,
because the widgets render asynchronously and expose no general ready signal.
Handlers never check whether an earlier step worked; a failing operation
raises and the dispatcher reports it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ..editor.base import (
    ActiveEditor, EditorCommand, EditorOperations, UISurface, to_editor_position,
)
from ..editor.settle import SettlePhase, Settler
from ...utils.error_handling import DispatchError, coerce_int, validate_input
from ...utils.logging import get_logger


@dataclass
class HandlerContext:
    """What a handler needs to act on one editor session."""

    editor: EditorOperations
    settler: Settler

    async def settle(self, surface: UISurface, phase: SettlePhase) -> None:
        await self.settler.settle(self.editor, surface, phase)


class CommandHandler(ABC):
    """Base class for catalog command handlers.

    `consumes` lists the parameter names the handler reads; it must match the
    catalog entry that points at the handler.
    """

    handler_id: str = ""
    consumes: Tuple[str, ...] = ()

    def __init__(self):
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    async def run(self, context: HandlerContext, params: Mapping[str, Any]) -> Any:
        pass

    @staticmethod
    def int_param(params: Mapping[str, Any], name: str) -> Optional[int]:
        return validate_input(params.get(name), name, required=False, validator=coerce_int)

    @staticmethod
    def text_param(params: Mapping[str, Any], name: str) -> Optional[str]:
        value = params.get(name)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def require_editor(context: HandlerContext) -> ActiveEditor:
        editor = context.editor.active_editor()
        if editor is None:
            raise DispatchError("No active editor", details={"error_type": "no_active_editor"})
        return editor

    async def reveal(self, context: HandlerContext, line: int, column: Optional[int]) -> None:
        editor = self.require_editor(context)
        position = to_editor_position(line, column if column is not None else 1)
        self.logger.debug(f"Revealing {editor.file_name} at {position.line}:{position.character}")
        await editor.select_and_reveal(position)


class QuickOpenHandler(CommandHandler):
    handler_id = "quick_open"
    consumes = ("fileName", "line", "column")

    async def run(self, context, params):
        file_name = self.text_param(params, "fileName")
        line = self.int_param(params, "line")
        column = self.int_param(params, "column")

        await context.editor.execute_command(EditorCommand.QUICK_OPEN)
        if file_name is None:
            # Picker stays open for the user
            return

        await context.settle(UISurface.QUICK_OPEN, SettlePhase.AFTER_OPEN)
        await context.editor.type_text(file_name)
        await context.settle(UISurface.QUICK_OPEN, SettlePhase.AFTER_TYPE)
        await context.editor.execute_command(EditorCommand.ACCEPT_QUICK_OPEN)

        if line is not None:
            await context.settle(UISurface.TEXT_EDITOR, SettlePhase.AFTER_NAVIGATE)
            await self.reveal(context, line, column)


class RecentFileHandler(CommandHandler):
    handler_id = "recent_file"

    async def run(self, context, params):
        await context.editor.execute_command(EditorCommand.OPEN_PREVIOUS_EDITOR)


class GoToLineHandler(CommandHandler):
    handler_id = "go_to_line"
    consumes = ("line", "column")

    async def run(self, context, params):
        line = self.int_param(params, "line")
        column = self.int_param(params, "column")
        self.require_editor(context)

        if line is None:
            await context.editor.execute_command(EditorCommand.GO_TO_LINE)
            return
        await self.reveal(context, line, column)


class FindInFilesHandler(CommandHandler):
    handler_id = "find_in_files"
    consumes = ("searchTerm",)

    async def run(self, context, params):
        search_term = self.text_param(params, "searchTerm")
        if search_term is None:
            await context.editor.execute_command(EditorCommand.FIND_IN_FILES)
            return
        await context.editor.execute_command(
            EditorCommand.FIND_IN_FILES, {"query": search_term, "triggerSearch": True}
        )


class FindFilesByNameHandler(CommandHandler):
    handler_id = "find_files_by_name"
    consumes = ("fileName", "filePattern")

    async def run(self, context, params):
        file_name = self.text_param(params, "fileName")
        file_pattern = self.text_param(params, "filePattern")
        query = file_name or file_pattern

        await context.editor.execute_command(EditorCommand.QUICK_OPEN)
        if query is None:
            return

        await context.settle(UISurface.QUICK_OPEN, SettlePhase.AFTER_OPEN)
        # Results are left in the picker; nothing is opened
        await context.editor.type_text(query)


class ShowCommandsHandler(CommandHandler):
    handler_id = "show_commands"

    async def run(self, context, params):
        await context.editor.execute_command(EditorCommand.SHOW_COMMANDS)


class GoToDefinitionHandler(CommandHandler):
    handler_id = "go_to_definition"

    async def run(self, context, params):
        self.require_editor(context)
        await context.editor.execute_command(EditorCommand.REVEAL_DEFINITION)


class RenameHandler(CommandHandler):
    handler_id = "rename"
    consumes = ("newName",)

    async def run(self, context, params):
        new_name = self.text_param(params, "newName")
        self.require_editor(context)

        await context.editor.execute_command(EditorCommand.RENAME)
        if new_name is None:
            return

        await context.settle(UISurface.RENAME_INPUT, SettlePhase.AFTER_OPEN)
        await context.editor.type_text(new_name)
        await context.settle(UISurface.RENAME_INPUT, SettlePhase.AFTER_TYPE)
        await context.editor.execute_command(EditorCommand.ACCEPT_RENAME)


class ToggleSidebarHandler(CommandHandler):
    handler_id = "toggle_sidebar"

    async def run(self, context, params):
        await context.editor.execute_command(EditorCommand.TOGGLE_SIDEBAR)


class TogglePanelHandler(CommandHandler):
    handler_id = "toggle_panel"

    async def run(self, context, params):
        await context.editor.execute_command(EditorCommand.TOGGLE_PANEL)


BUILTIN_HANDLERS = (
    QuickOpenHandler,
    RecentFileHandler,
    GoToLineHandler,
    FindInFilesHandler,
    FindFilesByNameHandler,
    ShowCommandsHandler,
    GoToDefinitionHandler,
    RenameHandler,
    ToggleSidebarHandler,
    TogglePanelHandler,
)


def build_handler_table(handler_classes: Iterable[type] = BUILTIN_HANDLERS) -> Dict[str, CommandHandler]:
    """Instantiate handlers keyed by handler_id."""
    table: Dict[str, CommandHandler] = {}
    for handler_class in handler_classes:
        handler = handler_class()
        if handler.handler_id in table:
            raise ValueError(f"Duplicate handler id: {handler.handler_id}")
        table[handler.handler_id] = handler
    return table

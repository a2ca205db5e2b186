"""
In-memory editor session.

HeadlessEditor keeps just enough editor state (open file, caret, widgets,
panels, history) to run every command handler without a real IDE. The CLI
uses it to preview what an instruction would do, and the test suite uses it
as the live session.
"""

import inspect
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, List, Optional, Union

from .base import ActiveEditor, EditorCommand, EditorOperations, Position, UISurface
from ...utils.logging import get_logger


SKIPPED_DIRECTORIES = {"node_modules", "__pycache__", "dist", "build", "venv"}


class CommandNotFoundError(LookupError):
    """The editor has no command registered under the requested id."""

    def __init__(self, command_id: str):
        super().__init__(f"command '{command_id}' not found")
        self.command_id = command_id


@dataclass(frozen=True)
class JournalEntry:
    """One operation the editor received, in order."""

    operation: str
    target: str
    argument: Any = None


class HeadlessTextEditor(ActiveEditor):
    """A single open document."""

    def __init__(self, file_name: str, text: str):
        self._file_name = file_name
        self._lines = text.splitlines() or [""]
        self._selection = Position(0, 0)
        self.revealed_line: Optional[int] = None

    @property
    def file_name(self) -> str:
        return self._file_name

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def selection(self) -> Position:
        return self._selection

    async def select_and_reveal(self, position: Position) -> None:
        # Positions past the end are pulled back into the document
        line = min(max(position.line, 0), self.line_count - 1)
        character = min(max(position.character, 0), len(self._lines[line]))
        self._selection = Position(line, character)
        self.revealed_line = line


class HeadlessEditor(EditorOperations):
    """Editor session held entirely in memory."""

    def __init__(self, workspace: Optional[Dict[str, str]] = None, readiness_signals: bool = False):
        """
        Args:
            workspace: Mapping of workspace-relative path to file text
            readiness_signals: Report widget readiness instead of relying on delays
        """
        self.workspace: Dict[str, str] = {
            Path(name).as_posix(): text for name, text in (workspace or {}).items()
        }
        self.readiness_signals = readiness_signals
        self.logger = get_logger(__name__)

        self.journal: List[JournalEntry] = []
        self.information_messages: List[str] = []
        self.history: List[str] = []
        self.renames: List[str] = []

        self.active_widget: Optional[str] = None
        self.widget_input = ""
        self.sidebar_visible = True
        self.panel_visible = False
        self.search_view_visible = False
        self.search_query: Optional[str] = None
        self.search_results: List[str] = []
        self.definition_requests = 0

        self._editor: Optional[HeadlessTextEditor] = None
        self._registered: Dict[str, Callable[..., Any]] = {}
        self._builtin: Dict[str, Callable[[Any], Any]] = {
            EditorCommand.QUICK_OPEN: self._open_quick_open,
            EditorCommand.ACCEPT_QUICK_OPEN: self._accept_quick_open,
            EditorCommand.OPEN_PREVIOUS_EDITOR: self._open_previous_editor,
            EditorCommand.GO_TO_LINE: self._open_go_to_line,
            EditorCommand.FIND_IN_FILES: self._find_in_files,
            EditorCommand.SHOW_COMMANDS: self._show_commands,
            EditorCommand.REVEAL_DEFINITION: self._reveal_definition,
            EditorCommand.RENAME: self._open_rename,
            EditorCommand.ACCEPT_RENAME: self._accept_rename,
            EditorCommand.TOGGLE_SIDEBAR: self._toggle_sidebar,
            EditorCommand.TOGGLE_PANEL: self._toggle_panel,
        }

    @classmethod
    def from_directory(cls, root: Union[str, Path], max_files: int = 5000, **kwargs) -> "HeadlessEditor":
        """Load the readable text files under root as the workspace."""
        root = Path(root)
        workspace: Dict[str, str] = {}

        for path in sorted(root.rglob("*")):
            if len(workspace) >= max_files:
                break
            relative = path.relative_to(root)
            if any(part.startswith(".") or part in SKIPPED_DIRECTORIES for part in relative.parts):
                continue
            if not path.is_file():
                continue
            try:
                workspace[relative.as_posix()] = path.read_text(encoding="utf-8")
            except (UnicodeDecodeError, OSError):
                continue

        return cls(workspace, **kwargs)

    # EditorOperations

    async def execute_command(self, command_id: str, argument: Any = None) -> Any:
        self.journal.append(JournalEntry("execute_command", command_id, argument))

        callback = self._registered.get(command_id)
        if callback is not None:
            result = callback(argument) if argument is not None else callback()
            if inspect.isawaitable(result):
                result = await result
            return result

        builtin = self._builtin.get(command_id)
        if builtin is None:
            raise CommandNotFoundError(command_id)
        return builtin(argument)

    async def type_text(self, text: str) -> None:
        self.journal.append(JournalEntry("type_text", self.active_widget or "editor", text))
        if self.active_widget is not None:
            self.widget_input += text

    def active_editor(self) -> Optional[HeadlessTextEditor]:
        return self._editor

    async def show_information_message(self, text: str) -> None:
        self.journal.append(JournalEntry("show_information_message", "notification", text))
        self.information_messages.append(text)

    async def wait_until_ready(self, surface: UISurface) -> bool:
        if not self.readiness_signals:
            return False
        ready = {
            UISurface.QUICK_OPEN: self.active_widget == "quickOpen",
            UISurface.RENAME_INPUT: self.active_widget == "rename",
            UISurface.SEARCH_VIEW: self.search_view_visible,
            UISurface.TEXT_EDITOR: self._editor is not None,
        }
        return ready[surface]

    # Helpers for callers and tests

    def register_command(self, command_id: str, callback: Callable[..., Any]) -> None:
        """Make command_id available to execute_command, like an extension contributing it."""
        self._registered[command_id] = callback

    def open_file(self, name: str) -> HeadlessTextEditor:
        if name not in self.workspace:
            raise FileNotFoundError(name)
        self._editor = HeadlessTextEditor(name, self.workspace[name])
        if name in self.history:
            self.history.remove(name)
        self.history.append(name)
        self.logger.debug(f"Opened {name}")
        return self._editor

    def close_active_editor(self) -> None:
        self._editor = None

    def operations(self) -> List[str]:
        """Journal rendered as 'operation:target' strings."""
        return [f"{entry.operation}:{entry.target}" for entry in self.journal]

    def quick_open_matches(self, query: str) -> List[str]:
        """Workspace paths matching query, best first.

        Exact file name beats prefix, prefix beats substring of the name, then
        substring of the path, then an in-order subsequence of the path.
        """
        needle = query.strip().lower()
        if not needle:
            return []

        ranked = []
        for path in self.workspace:
            lowered = path.lower()
            name = PurePosixPath(lowered).name
            if name == needle or lowered == needle:
                score = 0
            elif name.startswith(needle):
                score = 1
            elif needle in name:
                score = 2
            elif needle in lowered:
                score = 3
            elif _is_subsequence(needle, lowered):
                score = 4
            else:
                continue
            ranked.append((score, len(path), path))

        return [path for _, _, path in sorted(ranked)]

    # Built-in commands

    def _open_widget(self, name: str, initial: str = "") -> None:
        self.active_widget = name
        self.widget_input = initial

    def _close_widget(self) -> None:
        self.active_widget = None
        self.widget_input = ""

    def _open_quick_open(self, argument: Any) -> None:
        self._open_widget("quickOpen", argument if isinstance(argument, str) else "")

    def _accept_quick_open(self, argument: Any) -> Optional[str]:
        if self.active_widget != "quickOpen":
            return None
        matches = self.quick_open_matches(self.widget_input)
        self._close_widget()
        if not matches:
            return None
        self.open_file(matches[0])
        return matches[0]

    def _open_previous_editor(self, argument: Any) -> Optional[str]:
        if len(self.history) < 2:
            return None
        previous = self.history[-2]
        self.open_file(previous)
        return previous

    def _open_go_to_line(self, argument: Any) -> None:
        self._open_widget("gotoLine", ":")

    def _find_in_files(self, argument: Any) -> List[str]:
        self.sidebar_visible = True
        self.search_view_visible = True
        if isinstance(argument, dict) and argument.get("query"):
            self.search_query = str(argument["query"])
            if argument.get("triggerSearch"):
                self.search_results = [
                    path for path, text in self.workspace.items() if self.search_query in text
                ]
        return self.search_results

    def _show_commands(self, argument: Any) -> None:
        self._open_widget("commandPalette", ">")

    def _reveal_definition(self, argument: Any) -> None:
        if self._editor is not None:
            self.definition_requests += 1

    def _open_rename(self, argument: Any) -> None:
        if self._editor is not None:
            self._open_widget("rename")

    def _accept_rename(self, argument: Any) -> Optional[str]:
        if self.active_widget != "rename":
            return None
        new_name = self.widget_input
        self._close_widget()
        if new_name:
            self.renames.append(new_name)
        return new_name or None

    def _toggle_sidebar(self, argument: Any) -> bool:
        self.sidebar_visible = not self.sidebar_visible
        return self.sidebar_visible

    def _toggle_panel(self, argument: Any) -> bool:
        self.panel_visible = not self.panel_visible
        return self.panel_visible


def _is_subsequence(needle: str, haystack: str) -> bool:
    remaining = iter(haystack)
    return all(char in remaining for char in needle)

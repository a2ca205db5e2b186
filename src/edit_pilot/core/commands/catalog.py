"""
Command catalog: the intents Edit Pilot recognizes and their parameter contracts.

The catalog is the single source for both the system prompt and dispatch, so
the model is only ever told about commands the dispatcher knows how to run.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .types import CommandSpec


DEFAULT_COMMAND_SPECS: Tuple[CommandSpec, ...] = (
    CommandSpec(
        id="quickOpen",
        display_name="Quick Open",
        description="Open a file by (fuzzy) name, optionally jumping to a line and column in it",
        parameter_names=("fileName", "line", "column"),
        handler_id="quick_open",
        examples=(
            ("open file test.tsx",
             {"command": "quickOpen", "parameters": {"fileName": "test.tsx"},
              "description": "Open test.tsx"}),
            ("open app.py at line 10",
             {"command": "quickOpen", "parameters": {"fileName": "app.py", "line": 10},
              "description": "Open app.py and go to line 10"}),
        ),
    ),
    CommandSpec(
        id="recentFile",
        display_name="Open Recent File",
        description="Reopen the most recently used file",
        parameter_names=(),
        handler_id="recent_file",
        examples=(
            ("go back to the previous file",
             {"command": "recentFile", "parameters": {},
              "description": "Reopen the most recent file"}),
        ),
    ),
    CommandSpec(
        id="goToLine",
        display_name="Go to Line",
        description="Move the cursor to a line (and optionally a column) in the current file",
        parameter_names=("line", "column"),
        handler_id="go_to_line",
        examples=(
            ("go to line 25",
             {"command": "goToLine", "parameters": {"line": 25},
              "description": "Go to line 25"}),
            ("jump to line 3 column 8",
             {"command": "goToLine", "parameters": {"line": 3, "column": 8},
              "description": "Go to line 3, column 8"}),
        ),
    ),
    CommandSpec(
        id="findInFiles",
        display_name="Find in Files",
        description="Search for text across all files in the workspace",
        parameter_names=("searchTerm",),
        handler_id="find_in_files",
        examples=(
            ("search for useState",
             {"command": "findInFiles", "parameters": {"searchTerm": "useState"},
              "description": "Search the workspace for useState"}),
        ),
    ),
    CommandSpec(
        id="findFilesByName",
        display_name="Find Files by Name",
        description="List files whose name matches a name or pattern without opening any",
        parameter_names=("fileName", "filePattern"),
        handler_id="find_files_by_name",
        examples=(
            ("find all test files",
             {"command": "findFilesByName", "parameters": {"filePattern": "test"},
              "description": "Find files matching test"}),
        ),
    ),
    CommandSpec(
        id="showCommands",
        display_name="Show All Commands",
        description="Open the command palette",
        parameter_names=(),
        handler_id="show_commands",
        examples=(
            ("show me the command palette",
             {"command": "showCommands", "parameters": {},
              "description": "Open the command palette"}),
        ),
    ),
    CommandSpec(
        id="goToDefinition",
        display_name="Go to Definition",
        description="Jump to the definition of the symbol under the cursor",
        parameter_names=(),
        handler_id="go_to_definition",
        examples=(
            ("where is this defined",
             {"command": "goToDefinition", "parameters": {},
              "description": "Go to the definition of the symbol at the cursor"}),
        ),
    ),
    CommandSpec(
        id="rename",
        display_name="Rename Symbol",
        description="Rename the symbol under the cursor; without a new name the rename box stays open",
        parameter_names=("newName",),
        handler_id="rename",
        examples=(
            ("rename this to fetchUser",
             {"command": "rename", "parameters": {"newName": "fetchUser"},
              "description": "Rename the symbol to fetchUser"}),
        ),
    ),
    CommandSpec(
        id="toggleSidebar",
        display_name="Toggle Sidebar",
        description="Show or hide the sidebar",
        parameter_names=(),
        handler_id="toggle_sidebar",
        examples=(
            ("hide the sidebar",
             {"command": "toggleSidebar", "parameters": {},
              "description": "Toggle the sidebar"}),
        ),
    ),
    CommandSpec(
        id="togglePanel",
        display_name="Toggle Panel",
        description="Show or hide the bottom panel (terminal, output, problems)",
        parameter_names=(),
        handler_id="toggle_panel",
        examples=(
            ("show the terminal panel",
             {"command": "togglePanel", "parameters": {},
              "description": "Toggle the panel"}),
        ),
    ),
)


class CommandCatalog:
    """Read-only id -> CommandSpec table."""

    def __init__(self, specs: Iterable[CommandSpec]):
        self._specs: Dict[str, CommandSpec] = {}
        for spec in specs:
            if spec.id in self._specs:
                raise ValueError(f"Duplicate command id in catalog: {spec.id}")
            self._specs[spec.id] = spec

    def lookup(self, command_id: str) -> Optional[CommandSpec]:
        return self._specs.get(command_id)

    def ids(self) -> List[str]:
        return list(self._specs)

    def specs(self) -> List[CommandSpec]:
        return list(self._specs.values())

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self):
        return iter(self._specs.values())


_default_catalog: Optional[CommandCatalog] = None


def get_default_catalog() -> CommandCatalog:
    """The process-wide catalog of built-in commands."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = CommandCatalog(DEFAULT_COMMAND_SPECS)
    return _default_catalog

"""
CLI command handlers for Edit Pilot.

Instructions run against a headless editor loaded from --workspace, so a
run shows which editor operations a real host would perform.
"""

import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table

from ..config import load_config, ConfigurationError
from ..core import ExecutionOrchestrator, SessionManager
from ..core.commands import ExecutionResult, get_default_catalog
from ..core.editor import HeadlessEditor
from ..core.prompts import build_system_prompt
from ..core.response import ResponseInterpreter
from ..utils import setup_logging, get_logger
from ..utils.logging import log_startup, log_config_info, log_shutdown

EXIT_WORDS = ("exit", "quit", "bye")

console = Console(soft_wrap=True)


def _say(text: str) -> None:
    console.print(text, markup=False, highlight=False)


def handle_cli_command(args) -> int:
    """
    Handle CLI commands based on parsed arguments.

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    try:
        config = load_config(args.config)
        _apply_overrides(config, args)
        setup_logging(config, verbose=args.verbose)
        log_startup(args.config)
        log_config_info(config)

        if args.list_commands:
            return _handle_list_commands()
        elif args.show_prompt:
            return _handle_show_prompt()
        elif args.interpret is not None:
            return _handle_interpret(config, args)
        elif args.prompt:
            return _handle_prompt(config, args)
        else:
            return _handle_interactive(config, args)

    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        get_logger(__name__).debug("Unhandled CLI failure", exc_info=True)
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        return 1


def _apply_overrides(config, args) -> None:
    """Command-line flags take precedence over every configuration layer."""
    try:
        if args.url is not None:
            config.completion.endpoint_url = args.url
        if args.model is not None:
            config.completion.model = args.model
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid command-line override: {e.errors()[0]['msg']}") from e


def _build_orchestrator(config, args) -> ExecutionOrchestrator:
    workspace = Path(args.workspace).expanduser()
    if not workspace.is_dir():
        raise ConfigurationError(f"Workspace is not a directory: {workspace}")

    editor = HeadlessEditor.from_directory(workspace)
    get_logger(__name__).info(f"Loaded {len(editor.workspace)} files from {workspace}")
    session = SessionManager().open_session(editor)
    return ExecutionOrchestrator(session, config)


def _handle_list_commands() -> int:
    """List the command catalog."""
    table = Table(title="Editor commands")
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Parameters")
    table.add_column("Description")

    for spec in get_default_catalog():
        table.add_row(spec.id, ", ".join(spec.parameter_names) or "-", spec.description)

    console.print(table)
    return 0


def _handle_show_prompt() -> int:
    _say(build_system_prompt())
    return 0


def _handle_interpret(config, args) -> int:
    """Interpret a raw model response without contacting the service."""
    command = ResponseInterpreter(config.completion.model).interpret(args.interpret)
    if command.degraded:
        _say("⚠️  No command found in the text; the default would run:")
    _say(command.to_json())
    return 0


def _handle_prompt(config, args) -> int:
    """Run a single instruction."""
    orchestrator = _build_orchestrator(config, args)
    _say(f"🧭 {args.prompt}")

    result = asyncio.run(orchestrator.run(args.prompt))
    _print_result(result, orchestrator, args.verbose)
    return 0 if result.success else 1


def _handle_interactive(config, args) -> int:
    """Read instructions until the user quits."""
    orchestrator = _build_orchestrator(config, args)
    _say(f"✏️  Edit Pilot on {orchestrator.config.completion.endpoint_url}. Type 'exit' to quit.")

    try:
        asyncio.run(_instruction_loop(orchestrator, args.verbose))
    except KeyboardInterrupt:
        pass

    _say("👋 Goodbye!")
    log_shutdown()
    return 0


async def _instruction_loop(orchestrator: ExecutionOrchestrator, verbose: bool) -> None:
    # One event loop for the whole session so the session lock stays bound to it
    while True:
        try:
            user_input = (await asyncio.to_thread(input, "👤 You: ")).strip()
        except EOFError:
            return

        if not user_input:
            continue
        if user_input.lower() in EXIT_WORDS:
            return

        result = await orchestrator.run(user_input)
        _print_result(result, orchestrator, verbose)


def _print_result(result: ExecutionResult, orchestrator: ExecutionOrchestrator, verbose: bool) -> None:
    if not result.success:
        _say(f"❌ {result.error_kind.value}: {result.message}")
        if verbose and result.command is not None:
            _say(result.confirmation())
        return

    _say(f"✅ {result.message}")
    if result.notice is not None:
        _say("⚠️  The model response was not a command; ran the default instead")
    _say(result.confirmation())

    editor = orchestrator.session.editor
    active = editor.active_editor()
    if active is not None:
        _say(f"📄 {active.file_name} at line {active.selection.line + 1}, column {active.selection.character + 1}")

    if verbose and isinstance(editor, HeadlessEditor):
        for operation in editor.operations():
            _say(f"  · {operation}")

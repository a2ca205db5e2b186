"""
Command dispatch: resolve a structured command against the catalog and run it.

Commands found in the catalog run through their handler. Anything else is
passed straight to the editor as a command id, so commands unknown to the
catalog are still attempted verbatim.
"""

from typing import Dict, Optional

from .catalog import CommandCatalog, get_default_catalog
from .handlers import CommandHandler, HandlerContext, build_handler_table
from .types import CommandSpec, ExecutionResult, StructuredCommand
from ..editor.base import EditorOperations
from ..editor.settle import Settler
from ...utils.error_handling import DispatchError, handle_dispatch_operation
from ...utils.logging import get_logger


class CommandDispatcher:
    """Runs structured commands against one editor session."""

    def __init__(
        self,
        editor: EditorOperations,
        catalog: Optional[CommandCatalog] = None,
        handlers: Optional[Dict[str, CommandHandler]] = None,
        settler: Optional[Settler] = None,
    ):
        self.editor = editor
        self.catalog = catalog if catalog is not None else get_default_catalog()
        self.handlers = handlers if handlers is not None else build_handler_table()
        self.settler = settler or Settler()
        self.logger = get_logger(__name__)

    def resolve(self, command_id: str) -> Optional[CommandHandler]:
        """Handler for command_id, or None when it must be passed through."""
        spec = self.catalog.lookup(command_id)
        if spec is None:
            return None

        handler = self.handlers.get(spec.handler_id)
        if handler is None:
            self.logger.warning(
                f"Catalog command {spec.id} points at unregistered handler {spec.handler_id}, passing through"
            )
        return handler

    async def dispatch(self, command: StructuredCommand) -> ExecutionResult:
        """
        Execute command.

        Returns:
            Successful ExecutionResult echoing the executed command

        Raises:
            DispatchError: If the handler or the pass-through editor call fails
        """
        handler = self.resolve(command.command)

        try:
            if handler is not None:
                spec = self.catalog.lookup(command.command)
                await self._run_handler(spec, handler, command)
                message = f"Executed {spec.display_name}"
            else:
                await self._pass_through(command)
                message = f"Executed editor command {command.command}"
        except DispatchError as e:
            e.details.setdefault("command", command.command)
            raise

        return ExecutionResult.ok(command, message=message)

    async def _run_handler(self, spec: CommandSpec, handler: CommandHandler, command: StructuredCommand) -> None:
        context = HandlerContext(editor=self.editor, settler=self.settler)
        run = handle_dispatch_operation(spec.id, self.logger)(handler.run)
        await run(context, dict(command.parameters))

    async def _pass_through(self, command: StructuredCommand) -> None:
        self.logger.info(f"{command.command} is not in the catalog, passing it to the editor")

        @handle_dispatch_operation(command.command, self.logger)
        async def execute():
            if command.parameters:
                return await self.editor.execute_command(command.command, dict(command.parameters))
            return await self.editor.execute_command(command.command)

        await execute()

"""
Command catalog, handlers and dispatch.
"""

from .types import CommandSpec, ErrorKind, ExecutionResult, StructuredCommand
from .catalog import CommandCatalog, DEFAULT_COMMAND_SPECS, get_default_catalog
from .handlers import BUILTIN_HANDLERS, CommandHandler, HandlerContext, build_handler_table
from .dispatcher import CommandDispatcher

__all__ = [
    "CommandSpec",
    "ErrorKind",
    "ExecutionResult",
    "StructuredCommand",
    "CommandCatalog",
    "DEFAULT_COMMAND_SPECS",
    "get_default_catalog",
    "BUILTIN_HANDLERS",
    "CommandHandler",
    "HandlerContext",
    "build_handler_table",
    "CommandDispatcher",
]

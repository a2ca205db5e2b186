"""
Execution orchestrator: the public entry point of the pipeline.

    instruction -> completion request -> interpretation -> dispatch -> result

Each stage runs once. The first failure ends the run and is reported as a
single ExecutionResult; nothing is retried.
"""

from typing import Optional

from .commands.catalog import CommandCatalog, get_default_catalog
from .commands.dispatcher import CommandDispatcher
from .commands.handlers import build_handler_table
from .commands.types import ErrorKind, ExecutionResult, StructuredCommand
from .editor.settle import Settler, SleepFunction
from .llm_client.client import CompletionClient
from .llm_client.exceptions import CompletionError, DecodeError, ProtocolError
from .prompts.builder import build_system_prompt
from .response.interpreter import ResponseInterpreter
from .session import EditorSession
from ..config.models import EditPilotConfig
from ..utils.error_handling import DispatchError, EditPilotError, ValidationError
from ..utils.logging import get_logger, log_performance


def _completion_error_kind(error: CompletionError) -> ErrorKind:
    if isinstance(error, ProtocolError):
        return ErrorKind.PROTOCOL
    if isinstance(error, DecodeError):
        return ErrorKind.DECODE
    return ErrorKind.TRANSPORT


class ExecutionOrchestrator:
    """Runs natural-language instructions against one editor session."""

    def __init__(
        self,
        session: EditorSession,
        config: Optional[EditPilotConfig] = None,
        catalog: Optional[CommandCatalog] = None,
        client: Optional[CompletionClient] = None,
        sleep: Optional[SleepFunction] = None,
    ):
        self.session = session
        self.config = config or EditPilotConfig()
        self.catalog = catalog if catalog is not None else get_default_catalog()
        self.client = client or CompletionClient(self.config.completion)
        self.interpreter = ResponseInterpreter(self.config.completion.model)
        self.dispatcher = CommandDispatcher(
            editor=session.editor,
            catalog=self.catalog,
            handlers=build_handler_table(),
            settler=Settler(self.config.dispatch, sleep=sleep),
        )
        self.logger = get_logger(__name__)

    async def run(self, user_text: str, endpoint_url: Optional[str] = None) -> ExecutionResult:
        """
        Translate user_text into an editor command and execute it.

        Args:
            user_text: The instruction, e.g. "go to line 25"
            endpoint_url: Completion service base URL (defaults to configuration)

        Returns:
            ExecutionResult with the executed command or the first failure
        """
        endpoint_url = endpoint_url or self.config.completion.endpoint_url

        async with self.session.acquire():
            with log_performance(f"instruction {user_text[:60]!r}"):
                try:
                    raw_text = await self.client.request(
                        endpoint_url, build_system_prompt(self.catalog), user_text
                    )
                except CompletionError as e:
                    return self._failure(_completion_error_kind(e), e)
                except Exception as e:
                    self.logger.error(f"Unexpected failure calling completion service: {e}", exc_info=True)
                    return ExecutionResult.failure(ErrorKind.UNEXPECTED, f"Unexpected error: {e}")

                command = self.interpreter.interpret(raw_text)
                if command.degraded:
                    self.logger.warning("Model response was not a command; running the degraded default")

                return await self.execute(command)

    async def execute(self, command: StructuredCommand) -> ExecutionResult:
        """Dispatch an already structured command. The session must be held by the caller."""
        self.logger.info(f"Dispatching {command.command} {dict(command.parameters)}")
        try:
            return await self.dispatcher.dispatch(command)
        except DispatchError as e:
            return self._failure(ErrorKind.DISPATCH, e, command)
        except ValidationError as e:
            return self._failure(ErrorKind.VALIDATION, e, command)
        except EditPilotError as e:
            return self._failure(ErrorKind.UNEXPECTED, e, command)
        except Exception as e:
            self.logger.error(f"Unexpected failure running {command.command}: {e}", exc_info=True)
            return ExecutionResult.failure(ErrorKind.UNEXPECTED, f"Unexpected error: {e}", command)

    async def run_command(self, command: StructuredCommand) -> ExecutionResult:
        """Dispatch a structured command directly, bypassing the completion service."""
        async with self.session.acquire():
            return await self.execute(command)

    def _failure(
        self, kind: ErrorKind, error: EditPilotError, command: Optional[StructuredCommand] = None
    ) -> ExecutionResult:
        self.logger.error(f"Run failed ({kind.value}): {error.message}")
        return ExecutionResult.failure(kind, error.message, command, dict(error.details))

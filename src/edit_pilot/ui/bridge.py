"""
Message bridge between the presentation shell and the core pipeline.

The shell (a webview or any other front end) posts plain dict messages; the
bridge validates them, runs the matching operation on the editor session and
returns the dict message to post back, if any.

Inbound:
    {"type": "llmRequest", "message": str, "url": str}
    {"type": "notify", "text": str}
    {"type": "openFile", "fileName": str}
    {"type": "goToLineColumn", "line": int, "column": int}

Outbound:
    {"type": "llmResponse", "response": str}
    {"type": "llmError", "error": str}
    {"type": "hostMessage", "text": str}
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core.commands.types import StructuredCommand
from ..core.orchestrator import ExecutionOrchestrator
from ..utils.error_handling import EditPilotError
from ..utils.logging import get_logger


class LLMRequestMessage(BaseModel):
    type: Literal["llmRequest"]
    message: str = Field(min_length=1)
    url: Optional[str] = None


class NotifyMessage(BaseModel):
    type: Literal["notify"]
    text: str


class OpenFileMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["openFile"]
    file_name: str = Field(alias="fileName")


class GoToLineColumnMessage(BaseModel):
    type: Literal["goToLineColumn"]
    line: int
    column: int = 1


ShellMessage = Annotated[
    Union[LLMRequestMessage, NotifyMessage, OpenFileMessage, GoToLineColumnMessage],
    Field(discriminator="type"),
]

_shell_message_adapter = TypeAdapter(ShellMessage)


def error_message(text: str) -> Dict[str, Any]:
    return {"type": "llmError", "error": text}


class ShellBridge:
    """Routes shell messages to the orchestrator of one editor session."""

    def __init__(self, orchestrator: ExecutionOrchestrator):
        self.orchestrator = orchestrator
        self.session = orchestrator.session
        self.logger = get_logger(__name__)

    def parse_message(self, payload: Any):
        """Validate payload into one of the inbound message models.

        Raises:
            pydantic.ValidationError: If payload is not a known, well-formed message
        """
        return _shell_message_adapter.validate_python(payload)

    async def handle_message(self, payload: Any) -> Optional[Dict[str, Any]]:
        """Handle one inbound message and return the reply to post, if any.

        Never raises: any failure becomes an llmError reply.
        """
        try:
            message = self.parse_message(payload)
        except PydanticValidationError as e:
            kind = payload.get("type") if isinstance(payload, dict) else type(payload).__name__
            self.logger.warning(f"Rejected shell message of type {kind!r}: {e.error_count()} validation error(s)")
            return error_message(f"Invalid message {kind!r}: {_first_error(e)}")

        try:
            return await self._route(message)
        except EditPilotError as e:
            self.logger.error(f"Shell message {message.type!r} failed: {e}")
            return error_message(e.message)
        except Exception as e:
            self.logger.error(f"Shell message {message.type!r} failed - unexpected error: {e}", exc_info=True)
            return error_message(f"Unexpected error: {e}")

    async def _route(self, message) -> Optional[Dict[str, Any]]:
        if isinstance(message, LLMRequestMessage):
            self.logger.info(f"Instruction from shell: {message.message[:100]}")
            result = await self.orchestrator.run(message.message, message.url or None)
            return result.to_shell_message()

        if isinstance(message, NotifyMessage):
            await self.session.editor.show_information_message(message.text)
            return None

        if isinstance(message, OpenFileMessage):
            file_name = message.file_name.strip()
            if not file_name:
                self.logger.debug("openFile with an empty file name ignored")
                return None
            command = StructuredCommand(
                command="quickOpen",
                parameters={"fileName": file_name},
                description=f"Open {file_name}",
            )
            result = await self.orchestrator.run_command(command)
            return result.to_shell_message()

        command = StructuredCommand(
            command="goToLine",
            parameters={"line": message.line, "column": message.column},
            description=f"Go to line {message.line}, column {message.column}",
        )
        result = await self.orchestrator.run_command(command)
        return result.to_shell_message()

    def host_message(self) -> Dict[str, Any]:
        """Numbered, timestamped message pushed from the host to the shell."""
        number = self.session.next_message_number()
        timestamp = datetime.now().strftime("%H:%M:%S")
        return {"type": "hostMessage", "text": f"Message #{number} at {timestamp}"}


def _first_error(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]

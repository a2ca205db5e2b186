"""
Shared types for command translation and dispatch.
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional, Dict, Any, Mapping, Tuple
from enum import Enum


class ErrorKind(Enum):
    """Ways a run can fail, plus the one soft outcome that is not a failure."""

    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    DECODE = "decode"
    DISPATCH = "dispatch"
    VALIDATION = "validation"
    UNEXPECTED = "unexpected"
    INTERPRETATION_DEGRADED = "interpretation_degraded"


@dataclass(frozen=True)
class CommandSpec:
    """Catalog entry describing one recognized intent."""

    id: str
    display_name: str
    description: str
    parameter_names: Tuple[str, ...]
    handler_id: str
    # (utterance, envelope) pairs shown to the model as worked examples
    examples: Tuple[Tuple[str, Dict[str, Any]], ...] = ()


@dataclass(frozen=True)
class StructuredCommand:
    """The {command, parameters, description} envelope produced by the model.

    parameters is copied into a read-only mapping on construction, so a
    command cannot change after it has been interpreted.
    """

    command: str
    parameters: Mapping[str, Any] = field(default_factory=dict)
    description: Optional[str] = None
    raw_response: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def degraded(self) -> bool:
        """True when this is the substitute for an unreadable model response."""
        return self.raw_response is not None

    def to_dict(self) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {
            "command": self.command,
            "parameters": dict(self.parameters),
        }
        if self.description is not None:
            envelope["description"] = self.description
        if self.raw_response is not None:
            envelope["rawResponse"] = self.raw_response
        return envelope

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass
class ExecutionResult:
    """Outcome of one run, handed back to the presentation shell."""

    success: bool
    command: Optional[StructuredCommand] = None
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    notice: Optional[ErrorKind] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, command: StructuredCommand, message: str = "") -> "ExecutionResult":
        notice = ErrorKind.INTERPRETATION_DEGRADED if command.degraded else None
        return cls(success=True, command=command, message=message, notice=notice)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        command: Optional[StructuredCommand] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> "ExecutionResult":
        return cls(
            success=False,
            command=command,
            error_kind=kind,
            message=message,
            details=details or {},
        )

    def confirmation(self) -> str:
        """The executed envelope as indented JSON."""
        if self.command is None:
            return ""
        return self.command.to_json()

    def to_shell_message(self) -> Dict[str, Any]:
        if self.success:
            return {"type": "llmResponse", "response": self.confirmation()}
        return {"type": "llmError", "error": self.message}

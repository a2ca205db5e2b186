"""
Turns free model text into a StructuredCommand.

Models asked for "JSON only" still wrap it in prose, code fences, or leave
stray braces around. The interpreter decodes a JSON object at every "{" in
the text, keeps the ones that carry a command name, and picks the largest
(earliest on ties). When nothing qualifies it returns a degraded default
instead of raising, so a bad response shows up as a visible quick-open of
"unknown" carrying the raw text.
"""

import json
from typing import Any, List, Optional, Tuple

from ..commands.types import StructuredCommand
from ...config.models import DEFAULT_MODEL
from ...utils.logging import get_logger


DEGRADED_COMMAND = "quickOpen"
DEGRADED_PARAMETERS = {"fileName": "unknown"}

_decoder = json.JSONDecoder()


def find_json_objects(text: str) -> List[Tuple[int, int, dict]]:
    """(start, end, object) for every JSON object that decodes starting at a "{".

    Nested objects are reported as well as the objects containing them.
    """
    found: List[Tuple[int, int, dict]] = []
    index = text.find("{")

    while index != -1:
        try:
            value, end = _decoder.raw_decode(text, index)
        except (json.JSONDecodeError, RecursionError):
            pass
        else:
            if isinstance(value, dict):
                found.append((index, end, value))
        index = text.find("{", index + 1)

    return found


class ResponseInterpreter:
    """Extracts the command envelope from completion text. Never raises."""

    def __init__(self, model_name: str = DEFAULT_MODEL):
        self.model_name = model_name
        self.logger = get_logger(__name__)

    def interpret(self, raw_text: Any) -> StructuredCommand:
        text = raw_text if isinstance(raw_text, str) else str(raw_text)

        candidates = []
        for start, end, data in find_json_objects(text):
            envelope = self._to_command(data)
            if envelope is not None:
                candidates.append((start, end, envelope))

        if candidates:
            # Largest span wins; ties keep their order of appearance
            _, _, command = min(candidates, key=lambda c: (c[0] - c[1], c[0]))
            return command

        self.logger.warning(f"Could not interpret model response, using degraded default: {text[:200]!r}")
        return self.degraded(text)

    def degraded(self, raw_text: str) -> StructuredCommand:
        return StructuredCommand(
            command=DEGRADED_COMMAND,
            parameters=dict(DEGRADED_PARAMETERS),
            description=f"Could not parse {self.model_name} response",
            raw_response=raw_text,
        )

    def _to_command(self, data: dict) -> Optional[StructuredCommand]:
        command = data.get("command")
        if not isinstance(command, str) or not command.strip():
            return None

        parameters = data.get("parameters")
        description = data.get("description")

        return StructuredCommand(
            command=command.strip(),
            parameters=parameters if isinstance(parameters, dict) else {},
            description=description if isinstance(description, str) else None,
        )


_default_interpreter = ResponseInterpreter()


def interpret(raw_text: Any) -> StructuredCommand:
    """Interpret raw_text with the default model name."""
    return _default_interpreter.interpret(raw_text)

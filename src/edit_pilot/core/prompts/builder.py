"""
System prompt built from the command catalog.

The prompt is regenerated from the live catalog for every request, so the
model is never told about a command the dispatcher cannot resolve.
"""

import json
from typing import List, Optional

from ..commands.catalog import CommandCatalog, get_default_catalog
from ..commands.types import CommandSpec


PROMPT_HEADER = """You translate editor instructions into a single editor command.

Respond with ONLY a JSON object of this exact shape and nothing else (no prose, no code fences):
{"command": "<command id>", "parameters": {<parameter name>: <string or integer>}, "description": "<short summary>"}

Line and column numbers are 1-based integers. Omit parameters the user did not give.

AVAILABLE COMMANDS:"""

PROMPT_FOOTER = """If no command fits, choose the closest one. Output the JSON object only."""


def format_command(spec: CommandSpec) -> str:
    parameters = ", ".join(spec.parameter_names) if spec.parameter_names else "none"
    lines = [
        f"- {spec.id}: {spec.description}",
        f"  parameters: {parameters}",
    ]
    for utterance, envelope in spec.examples:
        lines.append(f'  example: "{utterance}" -> {json.dumps(envelope)}')
    return "\n".join(lines)


def build_system_prompt(catalog: Optional[CommandCatalog] = None) -> str:
    """Instructions listing every command's id, purpose, parameters and examples."""
    catalog = catalog if catalog is not None else get_default_catalog()

    sections: List[str] = [PROMPT_HEADER]
    sections.extend(format_command(spec) for spec in catalog.specs())
    sections.append(PROMPT_FOOTER)
    return "\n\n".join(sections)

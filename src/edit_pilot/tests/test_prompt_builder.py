"""
Tests for the system prompt generated from the command catalog.
"""

import json

import pytest

from edit_pilot.core.commands import CommandCatalog, CommandSpec
from edit_pilot.core.prompts import build_system_prompt, format_command
from edit_pilot.core.response import ResponseInterpreter


@pytest.mark.unit
class TestSystemPrompt:

    def test_lists_every_command(self, catalog):
        prompt = build_system_prompt(catalog)

        for spec in catalog:
            assert f"- {spec.id}: {spec.description}" in prompt

    def test_demands_json_only(self, catalog):
        prompt = build_system_prompt(catalog)

        assert "ONLY a JSON object" in prompt
        assert '"command"' in prompt and '"parameters"' in prompt
        assert "1-based" in prompt

    def test_parameter_names_are_listed(self, catalog):
        prompt = build_system_prompt(catalog)

        assert "  parameters: fileName, line, column" in prompt
        assert "  parameters: none" in prompt

    def test_examples_are_valid_envelopes(self, catalog):
        interpreter = ResponseInterpreter()
        prompt = build_system_prompt(catalog)

        example_lines = [line for line in prompt.splitlines() if line.startswith("  example:")]
        assert len(example_lines) >= len(catalog)
        for line in example_lines:
            _, _, payload = line.partition(" -> ")
            command = interpreter.interpret(payload)
            assert not command.degraded
            assert command.command in catalog

    def test_follows_a_custom_catalog(self):
        spec = CommandSpec(
            id="formatDocument",
            display_name="Format Document",
            description="Format the current file",
            parameter_names=(),
            handler_id="format",
            examples=(("format this", {"command": "formatDocument", "parameters": {}}),),
        )
        prompt = build_system_prompt(CommandCatalog([spec]))

        assert "- formatDocument: Format the current file" in prompt
        assert "quickOpen" not in prompt.split("AVAILABLE COMMANDS:")[1]

    def test_format_command(self):
        spec = CommandSpec(
            id="rename",
            display_name="Rename",
            description="Rename the symbol",
            parameter_names=("newName",),
            handler_id="rename",
            examples=(("rename to x", {"command": "rename", "parameters": {"newName": "x"}}),),
        )

        lines = format_command(spec).splitlines()

        assert lines[0] == "- rename: Rename the symbol"
        assert lines[1] == "  parameters: newName"
        assert lines[2].startswith('  example: "rename to x" -> ')
        assert json.loads(lines[2].split(" -> ", 1)[1]) == {"command": "rename", "parameters": {"newName": "x"}}

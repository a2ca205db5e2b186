"""
Tests for the shell message bridge.
"""

import re
from unittest.mock import AsyncMock, patch

import pytest

from edit_pilot.core import EditorSession, ExecutionOrchestrator, SessionManager
from edit_pilot.core.commands import ExecutionResult, StructuredCommand
from edit_pilot.core.editor import Position
from edit_pilot.core.llm_client import CompletionClient
from edit_pilot.ui import ShellBridge

from .fixtures.workspace import completion_transport, envelope


@pytest.fixture
def make_bridge(test_config, fake_sleep):
    def build(editor, transport=None):
        client = CompletionClient(test_config.completion, transport=transport or completion_transport("{}"))
        orchestrator = ExecutionOrchestrator(
            EditorSession(editor), config=test_config, client=client, sleep=fake_sleep
        )
        return ShellBridge(orchestrator)
    return build


@pytest.mark.integration
class TestShellBridge:

    @pytest.mark.asyncio
    async def test_llm_request_success(self, make_bridge, editor_with_file):
        requests = []
        bridge = make_bridge(editor_with_file, completion_transport(envelope("goToLine", line=25), requests=requests))

        reply = await bridge.handle_message({
            "type": "llmRequest", "message": "go to line 25", "url": "http://localhost:9999",
        })

        assert reply["type"] == "llmResponse"
        assert '"command": "goToLine"' in reply["response"]
        assert requests[0].url.port == 9999
        assert editor_with_file.active_editor().selection == Position(24, 0)

    @pytest.mark.asyncio
    async def test_llm_request_without_url_uses_configuration(self, make_bridge, editor):
        requests = []
        bridge = make_bridge(editor, completion_transport(envelope("togglePanel"), requests=requests))

        await bridge.handle_message({"type": "llmRequest", "message": "show panel"})

        assert requests[0].url.port == 1234

    @pytest.mark.asyncio
    async def test_llm_request_failure(self, make_bridge, editor):
        bridge = make_bridge(editor, completion_transport(raw=b"down", status_code=502))

        reply = await bridge.handle_message({"type": "llmRequest", "message": "go to line 25"})

        assert reply["type"] == "llmError"
        assert "502" in reply["error"]

    @pytest.mark.asyncio
    async def test_notify(self, make_bridge, editor):
        bridge = make_bridge(editor)

        reply = await bridge.handle_message({"type": "notify", "text": "Hello from the panel"})

        assert reply is None
        assert editor.information_messages == ["Hello from the panel"]

    @pytest.mark.asyncio
    async def test_open_file(self, make_bridge, editor):
        bridge = make_bridge(editor)

        reply = await bridge.handle_message({"type": "openFile", "fileName": " test.tsx "})

        assert reply["type"] == "llmResponse"
        assert editor.active_editor().file_name == "src/test.tsx"

    @pytest.mark.asyncio
    async def test_open_file_blank_name_is_ignored(self, make_bridge, editor):
        bridge = make_bridge(editor)

        assert await bridge.handle_message({"type": "openFile", "fileName": "   "}) is None
        assert editor.journal == []

    @pytest.mark.asyncio
    async def test_go_to_line_column(self, make_bridge, editor_with_file):
        bridge = make_bridge(editor_with_file)

        reply = await bridge.handle_message({"type": "goToLineColumn", "line": 5, "column": 3})

        assert reply["type"] == "llmResponse"
        assert editor_with_file.active_editor().selection == Position(4, 2)

    @pytest.mark.asyncio
    async def test_go_to_line_column_defaults_to_first_column(self, make_bridge, editor_with_file):
        bridge = make_bridge(editor_with_file)

        await bridge.handle_message({"type": "goToLineColumn", "line": 8})

        assert editor_with_file.active_editor().selection == Position(7, 0)

    @pytest.mark.asyncio
    async def test_go_to_line_column_without_editor(self, make_bridge, editor):
        bridge = make_bridge(editor)

        reply = await bridge.handle_message({"type": "goToLineColumn", "line": 8})

        assert reply == {"type": "llmError", "error": "No active editor"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"type": "selfDestruct"},
        {"type": "llmRequest"},
        {"type": "llmRequest", "message": ""},
        {"type": "goToLineColumn", "line": "five"},
        {"message": "no type"},
        "not a dict",
    ])
    async def test_malformed_messages(self, make_bridge, editor, payload):
        bridge = make_bridge(editor)

        reply = await bridge.handle_message(payload)

        assert reply["type"] == "llmError"
        assert reply["error"].startswith("Invalid message")
        assert editor.journal == []

    @pytest.mark.asyncio
    async def test_replies_come_from_the_result(self, editor):
        orchestrator = AsyncMock(spec=ExecutionOrchestrator)
        orchestrator.session = EditorSession(editor)
        orchestrator.run.return_value = ExecutionResult.ok(StructuredCommand("togglePanel", {}))
        bridge = ShellBridge(orchestrator)

        reply = await bridge.handle_message({"type": "llmRequest", "message": "panel", "url": ""})

        orchestrator.run.assert_awaited_once_with("panel", None)
        assert reply == {"type": "llmResponse", "response": '{\n  "command": "togglePanel",\n  "parameters": {}\n}'}

    @pytest.mark.asyncio
    async def test_released_session_replies_with_error(self, test_config, editor):
        manager = SessionManager()
        session = manager.open_session(editor, session_id="panel-1")
        bridge = ShellBridge(ExecutionOrchestrator(session, config=test_config, client=AsyncMock()))
        manager.release("panel-1")

        reply = await bridge.handle_message({"type": "llmRequest", "message": "go to line 25"})
        opened = await bridge.handle_message({"type": "openFile", "fileName": "app.py"})

        assert reply == {"type": "llmError", "error": "Session panel-1 is closed"}
        assert opened == {"type": "llmError", "error": "Session panel-1 is closed"}
        assert editor.journal == []

    @pytest.mark.asyncio
    async def test_failing_notification_replies_with_error(self, make_bridge, editor):
        bridge = make_bridge(editor)

        with patch.object(editor, "show_information_message", AsyncMock(side_effect=RuntimeError("host gone"))):
            reply = await bridge.handle_message({"type": "notify", "text": "Hello"})

        assert reply == {"type": "llmError", "error": "Unexpected error: host gone"}

    def test_host_messages_are_numbered(self, make_bridge, editor):
        bridge = make_bridge(editor)

        first = bridge.host_message()
        second = bridge.host_message()

        assert first["type"] == "hostMessage"
        assert re.fullmatch(r"Message #1 at \d{2}:\d{2}:\d{2}", first["text"])
        assert second["text"].startswith("Message #2 at ")

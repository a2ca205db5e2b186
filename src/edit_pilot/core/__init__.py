"""
Core translation-and-dispatch pipeline for Edit Pilot.

    from edit_pilot.core import ExecutionOrchestrator, SessionManager
    from edit_pilot.core.editor import HeadlessEditor

    session = SessionManager().open_session(HeadlessEditor({"app.py": "..."}))
    result = await ExecutionOrchestrator(session).run("open app.py", "http://localhost:1234")
"""

from .orchestrator import ExecutionOrchestrator
from .session import EditorSession, SessionClosedError, SessionManager

__all__ = ["ExecutionOrchestrator", "EditorSession", "SessionClosedError", "SessionManager"]

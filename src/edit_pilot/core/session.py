"""
Editor sessions.

An EditorSession wraps one live editor together with the lock that keeps
requests against it strictly one at a time. The editor's widgets are
singletons, so two handler chains interleaving their timed steps would type
into each other's pickers.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from .editor.base import EditorOperations
from ..utils.error_handling import EditPilotError
from ..utils.logging import get_logger


class SessionClosedError(EditPilotError):
    """The session was released and can no longer run requests."""
    pass


class EditorSession:
    """One editor plus the state that belongs to it."""

    def __init__(self, editor: EditorOperations, session_id: Optional[str] = None):
        self.editor = editor
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self.message_counter = 0
        self.closed = False
        self._lock = asyncio.Lock()
        self.logger = get_logger(__name__)

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator["EditorSession"]:
        """Hold the session for one request; later callers wait their turn."""
        if self.closed:
            raise SessionClosedError(f"Session {self.session_id} is closed")
        if self._lock.locked():
            self.logger.debug(f"Session {self.session_id} busy, request queued")

        async with self._lock:
            if self.closed:
                raise SessionClosedError(f"Session {self.session_id} is closed")
            yield self

    def next_message_number(self) -> int:
        self.message_counter += 1
        return self.message_counter


class SessionManager:
    """Process-wide registry of open sessions with an explicit lifecycle."""

    def __init__(self):
        self._sessions: Dict[str, EditorSession] = {}
        self.logger = get_logger(__name__)

    def open_session(self, editor: EditorOperations, session_id: Optional[str] = None) -> EditorSession:
        session = EditorSession(editor, session_id)
        if session.session_id in self._sessions:
            raise ValueError(f"Session {session.session_id} already open")
        self._sessions[session.session_id] = session
        self.logger.info(f"Opened editor session {session.session_id}")
        return session

    def get(self, session_id: str) -> Optional[EditorSession]:
        return self._sessions.get(session_id)

    def release(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.closed = True
        self.logger.info(f"Released editor session {session_id}")
        return True

    def __len__(self) -> int:
        return len(self._sessions)

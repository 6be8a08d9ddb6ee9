"""
Session manager.

Owns one TurnDispatcher (and so one IntentRegistry) per session ID.
"""
import logging
import threading
from typing import Callable, Dict, List

from ..exceptions import ConfigurationError
from ..interaction import TurnDispatcher
from ..schemas import TurnResponse

logger = logging.getLogger(__name__)

DispatcherFactory = Callable[[str], TurnDispatcher]


class SessionManager:
    """
    Manages dispatchers per session ID.

    Purpose:
    - Isolate registries and turn state per user/session
    - Start each session exactly once, on its first event
    - Session cleanup support
    """

    def __init__(self, dispatcher_factory: DispatcherFactory):
        """
        :param dispatcher_factory: Builds a fresh dispatcher for a session ID
        """
        self._factory = dispatcher_factory
        self._sessions: Dict[str, TurnDispatcher] = {}
        self._lock = threading.Lock()

    def _open(self, session_id: str):
        """Return (dispatcher, initial responses), starting the session if new."""
        with self._lock:
            dispatcher = self._sessions.get(session_id)
            if dispatcher is None:
                dispatcher = self._factory(session_id)
                self._sessions[session_id] = dispatcher
                logger.info(f"Opened session '{session_id}'")

        # start() is idempotent; only the first caller gets the initial responses
        try:
            initial = dispatcher.start()
        except ConfigurationError:
            self.clear_session(session_id)
            raise
        return dispatcher, initial

    def get_dispatcher(self, session_id: str) -> TurnDispatcher:
        """Get or create the started dispatcher for a session."""
        return self._open(session_id)[0]

    def handle_message(self, session_id: str, text: str) -> List[TurnResponse]:
        """
        Deliver one message to a session.

        On a new session, responses from its initial message come first.
        """
        dispatcher, initial = self._open(session_id)
        return initial + dispatcher.handle_message(text)

    def ask(self, session_id: str, question: str) -> List[TurnResponse]:
        """Send a question to the session's knowledge base."""
        dispatcher, initial = self._open(session_id)
        return initial + dispatcher.ask(question)

    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions

    def clear_session(self, session_id: str) -> None:
        """Drop a session; its next event starts a fresh one."""
        with self._lock:
            self._sessions.pop(session_id, None)

    def clear_all(self) -> None:
        """Clear all sessions (useful for testing)."""
        with self._lock:
            self._sessions.clear()

"""
Public application facade for Turn Router.

This is the single stable entry point for transports (Flask, CLI).
All dependency wiring is encapsulated here.
"""
import logging
from typing import Callable, List, Optional

from .config import TurnRouterConfig
from .context import SessionManager
from .dialogs import CommonResponsesDialog, QnADialog
from .exceptions import ConfigurationError
from .interaction import TurnDispatcher
from .knowledge_base import KnowledgeBase, KnowledgeBaseClient
from .schemas import TurnResponse

logger = logging.getLogger(__name__)

DialogClass = Callable[..., TurnDispatcher]


class TurnRouterApp:
    """
    Public application facade for Turn Router.

    Usage:
        config = load_config_from_env()
        app = TurnRouterApp(config)
        app.initialize()
        responses = app.chat("hello", session_id="abc")
    """

    def __init__(
        self,
        config: TurnRouterConfig,
        dialog_class: Optional[DialogClass] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
    ):
        """
        :param config: TurnRouterConfig instance
        :param dialog_class: Dispatcher class built per session. Defaults to
            QnADialog when a knowledge base is configured, otherwise
            CommonResponsesDialog.
        :param knowledge_base: Collaborator overriding the configured client
        """
        self._config = config
        self._dialog_class = dialog_class
        self._knowledge_base = knowledge_base
        self._owns_knowledge_base = False
        self._sessions: Optional[SessionManager] = None

    def initialize(self) -> None:
        """
        Wire the knowledge base client and session manager.

        Call this once before chat() or ask().
        """
        if self._sessions:
            return

        if self._knowledge_base is None and self._config.has_knowledge_base:
            self._knowledge_base = KnowledgeBaseClient.from_config(self._config)
            self._owns_knowledge_base = True

        if self._dialog_class is None:
            self._dialog_class = QnADialog if self._knowledge_base else CommonResponsesDialog

        logger.info(
            f"Turn router initialized with {self._dialog_class.__name__} "
            f"(knowledge base: {'yes' if self._knowledge_base else 'no'})"
        )
        self._sessions = SessionManager(self._create_dispatcher)

    def _create_dispatcher(self, session_id: str) -> TurnDispatcher:
        return self._dialog_class(
            session_id=session_id,
            knowledge_base=self._knowledge_base,
            initial_message=self._config.initial_message,
            no_match_message=self._config.no_match_message,
            phrase_threshold=self._config.phrase_threshold,
        )

    @property
    def sessions(self) -> SessionManager:
        if not self._sessions:
            raise ConfigurationError("TurnRouterApp is not initialized; call initialize() first")
        return self._sessions

    def chat(self, message: str, session_id: str = "default") -> List[TurnResponse]:
        """
        Deliver a user message to a session.

        :param message: User message
        :param session_id: Session identifier
        :return: Responses produced by the turn
        """
        return self.sessions.handle_message(session_id, message)

    def ask(self, question: str, session_id: str = "default") -> List[TurnResponse]:
        """Ask the knowledge base directly, regardless of the dialog's routing."""
        return self.sessions.ask(session_id, question)

    def reset(self, session_id: str) -> None:
        self.sessions.clear_session(session_id)

    def close(self) -> None:
        """Release the knowledge base client if this app created it."""
        if self._owns_knowledge_base and self._knowledge_base is not None:
            self._knowledge_base.close()
        self._sessions = None

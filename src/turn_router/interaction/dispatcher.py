"""
Per-session turn dispatcher.

Runs one turn at a time: receive an utterance (or a knowledge-base
answer), resolve it through the session's IntentRegistry, invoke the
bound handler or a fallback, then return to awaiting input.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Callable, List, Optional

from ..exceptions import (
    ConfigurationError,
    DispatcherNotStartedError,
    LookupFailure,
    NoMatchError,
)
from ..knowledge_base import KnowledgeBase, KnowledgeBaseResult
from ..schemas import TurnResponse
from .intent_registry import IntentRegistry
from .turn_context import TurnContext
from .turn_state import TurnState

logger = logging.getLogger(__name__)

RegistryBuilder = Callable[[IntentRegistry], None]


class TurnDispatcher:
    """
    Message-driven state machine for one conversational session.

    States: IDLE -> AWAITING_INPUT -> RESOLVING -> DISPATCHED -> AWAITING_INPUT.

    Handlers are registered in register_intents() (override in a subclass)
    or through a registry_builder callable. The registry is built exactly
    once, on start(), and frozen afterwards.

    Fallbacks are methods so subclasses can override them:
    - no_match_handler(context, utterance)
    - default_match_handler(context, query, result)
    - on_lookup_failure(context, query, error)

    query_text(utterance) may be overridden to rewrite input before phrase
    resolution.

    Turns are serialized per session. Handlers reply through their
    TurnContext; calling back into the same dispatcher from a handler
    raises ConfigurationError.

    Usage:
        dispatcher = TurnDispatcher(session_id="abc", registry_builder=build)
        dispatcher.start()
        responses = dispatcher.receive("hello there")
    """

    #: Route plain messages to the knowledge base instead of phrase rules.
    answers_from_knowledge_base = False

    def __init__(
        self,
        session_id: str = "default",
        knowledge_base: Optional[KnowledgeBase] = None,
        registry_builder: Optional[RegistryBuilder] = None,
        initial_message: Optional[str] = None,
        no_match_message: Optional[str] = None,
        phrase_threshold: float = 0.5,
    ):
        """
        :param session_id: Session this dispatcher serves
        :param knowledge_base: Collaborator used by ask()
        :param registry_builder: Callable registering extra bindings
        :param initial_message: Message dispatched on start() without waiting for input
        :param no_match_message: Reply used instead of raising NoMatchError
        :param phrase_threshold: Default threshold for on_phrases()
        """
        self.session_id = session_id
        self.initial_message = initial_message
        self.no_match_message = no_match_message
        self._knowledge_base = knowledge_base
        self._registry_builder = registry_builder
        self._phrase_threshold = phrase_threshold

        self._registry: Optional[IntentRegistry] = None
        self._init_lock = threading.Lock()
        self._turn_lock = threading.Lock()
        self._turn_owner: Optional[int] = None
        self._state = TurnState.IDLE

    # ----------------------------
    # Lifecycle
    # ----------------------------
    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def registry(self) -> IntentRegistry:
        """The session's registry, built on first access."""
        return self._ensure_registry()

    def register_intents(self, registry: IntentRegistry) -> None:
        """Hook for subclasses to bind their handlers."""

    def start(self) -> List[TurnResponse]:
        """
        Start the session.

        Builds the registry, validates configuration and enters
        AWAITING_INPUT. With an initial message, dispatches it before
        releasing the turn lock, so no other message can overtake it.

        :return: Responses produced by the initial message (if any)
        :raises ConfigurationError: if the dispatcher cannot serve turns
        """
        if self.answers_from_knowledge_base and self._knowledge_base is None:
            raise ConfigurationError(
                f"{type(self).__name__} answers from a knowledge base but none was provided"
            )

        self._ensure_registry()

        with self._turn():
            if self._state is not TurnState.IDLE:
                return []
            self._state = TurnState.AWAITING_INPUT
            logger.info(f"Session '{self.session_id}' started")

            if self.initial_message:
                return self._handle(self.initial_message)
            return []

    def _ensure_registry(self) -> IntentRegistry:
        if self._registry is not None:
            return self._registry

        with self._init_lock:
            if self._registry is None:
                registry = IntentRegistry(default_threshold=self._phrase_threshold)
                self.register_intents(registry)
                if self._registry_builder is not None:
                    self._registry_builder(registry)
                registry.freeze()
                logger.debug(
                    f"Session '{self.session_id}' registry built with {len(registry)} binding(s)"
                )
                self._registry = registry
        return self._registry

    @contextmanager
    def _turn(self):
        """Hold the turn lock; a handler re-entering its own dispatcher fails fast."""
        if self._turn_owner == threading.get_ident():
            raise ConfigurationError(
                f"Session '{self.session_id}': a handler called back into its own "
                f"dispatcher; post replies through the TurnContext instead"
            )
        with self._turn_lock:
            self._turn_owner = threading.get_ident()
            try:
                yield
            finally:
                self._turn_owner = None

    def _require_started(self) -> None:
        if self._state is TurnState.IDLE:
            raise DispatcherNotStartedError(
                f"Session '{self.session_id}' has not been started; call start() first"
            )

    # ----------------------------
    # Turns
    # ----------------------------
    def query_text(self, utterance: str) -> str:
        """
        Text used for phrase resolution. Override to pre-process utterances.

        Handlers still receive the original utterance.
        """
        return utterance

    def handle_message(self, text: str) -> List[TurnResponse]:
        """Dispatch a message through the route this dialog uses."""
        with self._turn():
            self._require_started()
            return self._handle(text)

    def receive(self, utterance: str) -> List[TurnResponse]:
        """
        Run one phrase-matching turn.

        :param utterance: User input
        :return: Responses posted by the invoked handler
        """
        with self._turn():
            self._require_started()
            return self._receive(utterance)

    def ask(self, query: str) -> List[TurnResponse]:
        """
        Look the query up in the knowledge base and dispatch the answer.

        A failed lookup goes to on_lookup_failure(); no handler runs.

        :param query: User question
        :return: Responses posted during the turn
        """
        with self._turn():
            self._require_started()
            return self._ask(query)

    def receive_answer(self, query: str, result: KnowledgeBaseResult) -> List[TurnResponse]:
        """
        Dispatch a knowledge-base result obtained for query.

        :param query: Question the result answers
        :param result: Parsed knowledge-base result
        :return: Responses posted during the turn
        """
        with self._turn():
            self._require_started()
            return self._dispatch_answer(query, result)

    # The methods below expect the caller to hold the turn lock.
    def _handle(self, text: str) -> List[TurnResponse]:
        if self.answers_from_knowledge_base:
            return self._ask(text)
        return self._receive(text)

    def _receive(self, utterance: str) -> List[TurnResponse]:
        context = TurnContext(session_id=self.session_id)
        try:
            self._state = TurnState.RESOLVING
            resolved = self._registry.resolve_by_phrase(self.query_text(utterance))

            self._state = TurnState.DISPATCHED
            if resolved is None:
                logger.info(f"Session '{self.session_id}': no phrase match, using fallback")
                self.no_match_handler(context, utterance)
            else:
                context.match = resolved.match
                logger.info(
                    f"Session '{self.session_id}': matched '{resolved.match.candidate_phrase}' "
                    f"(score {resolved.match.score:.2f})"
                )
                resolved.handler(context, utterance)
        finally:
            self._state = TurnState.AWAITING_INPUT
        return context.responses

    def _ask(self, query: str) -> List[TurnResponse]:
        if self._knowledge_base is None:
            raise ConfigurationError(
                f"Session '{self.session_id}' has no knowledge base to ask"
            )
        try:
            result = self._knowledge_base.generate_answer(query)
        except LookupFailure as err:
            context = TurnContext(session_id=self.session_id)
            self.on_lookup_failure(context, query, err)
            return context.responses
        return self._dispatch_answer(query, result)

    def _dispatch_answer(self, query: str, result: KnowledgeBaseResult) -> List[TurnResponse]:
        context = TurnContext(session_id=self.session_id)
        try:
            self._state = TurnState.RESOLVING
            if result.is_no_answer:
                self._state = TurnState.DISPATCHED
                logger.info(f"Session '{self.session_id}': knowledge base has no answer")
                self.no_match_handler(context, query)
                return context.responses

            score = result.top_answer.score
            handler = self._registry.resolve_by_score(score)

            self._state = TurnState.DISPATCHED
            if handler is None:
                logger.info(f"Session '{self.session_id}': score {score} uses default handler")
                self.default_match_handler(context, query, result)
            else:
                logger.info(f"Session '{self.session_id}': score {score} matched a score rule")
                handler(context, query, result)
        finally:
            self._state = TurnState.AWAITING_INPUT
        return context.responses

    # ----------------------------
    # Fallbacks
    # ----------------------------
    def no_match_handler(self, context: TurnContext, utterance: str) -> None:
        """
        Called when nothing covers the turn.

        Raises NoMatchError unless a no_match_message is configured.
        """
        if self.no_match_message is not None:
            context.post(self.no_match_message)
            return
        raise NoMatchError(
            "No match found and no_match_handler not overridden", utterance
        )

    def default_match_handler(
        self,
        context: TurnContext,
        query: str,
        result: KnowledgeBaseResult,
    ) -> None:
        """Called when an answer exists but no score rule qualifies."""
        answer = result.top_answer
        context.post(answer.answer_text, attachments=answer.attachments)

    def on_lookup_failure(self, context: TurnContext, query: str, error: LookupFailure) -> None:
        """Called when the knowledge base could not be asked. Re-raises by default."""
        logger.warning(f"Session '{self.session_id}': lookup failed for '{query}': {error}")
        raise error

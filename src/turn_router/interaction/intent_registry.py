"""
Registry binding match rules to handlers.

Resolves exactly one handler (or nothing) per utterance or per
knowledge-base score. Registration order is significant: it breaks ties
in both resolution modes.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple, Union

from ..exceptions import ConfigurationError
from ..matching import MatchResult, PhraseMatchRule, ScoreThresholdRule, find_best_match
from ..matching.rules import DEFAULT_SCORER, DEFAULT_THRESHOLD

logger = logging.getLogger(__name__)

Handler = Callable[..., None]


@dataclass(frozen=True)
class HandlerBinding:
    """One rule paired with one handler, stamped with its registration order."""
    rule: Union[PhraseMatchRule, ScoreThresholdRule]
    handler: Handler
    order: int


class PhraseResolution(NamedTuple):
    handler: Handler
    match: MatchResult
    binding: HandlerBinding


class IntentRegistry:
    """
    Ordered collection of (rule, handler) bindings.

    Built once per session, then frozen. A frozen registry rejects new
    bindings so resolution never sees a half-built rule set.

    Usage:
        registry = IntentRegistry()
        registry.on_phrases(["hi", "hello"], handle_greeting)
        registry.on_score_below(0.5, handle_low_confidence)
        registry.freeze()
    """

    def __init__(self, default_threshold: float = DEFAULT_THRESHOLD):
        """
        :param default_threshold: Threshold for on_phrases() when none is given
        """
        self._phrase_bindings: List[HandlerBinding] = []
        self._score_bindings: List[HandlerBinding] = []
        self._default_threshold = default_threshold
        self._frozen = False

    # ----------------------------
    # Registration
    # ----------------------------
    def on_phrase(self, rule: PhraseMatchRule, handler: Handler) -> HandlerBinding:
        """Bind a phrase rule to a handler(context, utterance)."""
        if not isinstance(rule, PhraseMatchRule):
            raise ConfigurationError(f"Expected PhraseMatchRule, got {type(rule).__name__}")
        binding = self._bind(rule, handler)
        self._phrase_bindings.append(binding)
        return binding

    def on_phrases(
        self,
        phrases: Sequence[str],
        handler: Handler,
        threshold: Optional[float] = None,
        ignore_case: bool = True,
        ignore_non_alphanumeric: bool = True,
        scorer: str = DEFAULT_SCORER,
    ) -> HandlerBinding:
        """Build a PhraseMatchRule from a phrase list and bind it."""
        rule = PhraseMatchRule.of(
            phrases,
            threshold=self._default_threshold if threshold is None else threshold,
            ignore_case=ignore_case,
            ignore_non_alphanumeric=ignore_non_alphanumeric,
            scorer=scorer,
        )
        return self.on_phrase(rule, handler)

    def on_score_below(self, maximum_score: float, handler: Handler) -> HandlerBinding:
        """Bind a handler(context, query, result) to scores below maximum_score."""
        binding = self._bind(ScoreThresholdRule(maximum_score), handler)
        self._score_bindings.append(binding)
        return binding

    def phrase(self, *phrases: str, **options) -> Callable[[Handler], Handler]:
        """Decorator form of on_phrases()."""
        def decorator(handler: Handler) -> Handler:
            self.on_phrases(phrases, handler, **options)
            return handler
        return decorator

    def score_below(self, maximum_score: float) -> Callable[[Handler], Handler]:
        """Decorator form of on_score_below()."""
        def decorator(handler: Handler) -> Handler:
            self.on_score_below(maximum_score, handler)
            return handler
        return decorator

    def freeze(self) -> None:
        """Stop accepting bindings."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def phrase_bindings(self) -> Tuple[HandlerBinding, ...]:
        return tuple(self._phrase_bindings)

    @property
    def score_bindings(self) -> Tuple[HandlerBinding, ...]:
        return tuple(self._score_bindings)

    def __len__(self) -> int:
        return len(self._phrase_bindings) + len(self._score_bindings)

    def _bind(self, rule, handler: Handler) -> HandlerBinding:
        if self._frozen:
            raise ConfigurationError("Registry is frozen; register handlers during session setup")
        if not callable(handler):
            raise ConfigurationError(f"Handler must be callable, got {handler!r}")
        return HandlerBinding(rule=rule, handler=handler, order=len(self))

    # ----------------------------
    # Resolution
    # ----------------------------
    def resolve_by_phrase(self, utterance: str) -> Optional[PhraseResolution]:
        """
        Resolve the handler whose rule best matches the utterance.

        Each rule contributes its best candidate that clears the rule's own
        threshold. The strictly highest score wins; on equal scores the
        earliest registered rule keeps the lead.

        :param utterance: User input for this turn
        :return: PhraseResolution, or None when no rule matches
        """
        best: Optional[PhraseResolution] = None
        best_score = 0.0

        for binding in self._phrase_bindings:
            match = find_best_match(binding.rule, utterance)
            if match is not None and match.score > best_score:
                best_score = match.score
                best = PhraseResolution(binding.handler, match, binding)

        if best is None:
            logger.debug(f"No phrase rule matched utterance '{utterance}'")
        else:
            logger.debug(
                f"Utterance '{utterance}' resolved to rule #{best.binding.order} "
                f"via '{best.match.candidate_phrase}' (score {best.match.score:.2f})"
            )
        return best

    def resolve_by_score(self, score: float) -> Optional[Handler]:
        """
        Resolve the handler for a knowledge-base confidence score.

        Rules are scanned by ascending maximum_score (registration order on
        ties); the first whose maximum_score is strictly greater than the
        score wins.

        :param score: Confidence of the top knowledge-base answer
        :return: Handler, or None when no rule qualifies
        """
        # sorted() is stable, so equal thresholds keep registration order
        for binding in sorted(self._score_bindings, key=lambda b: b.rule.maximum_score):
            if binding.rule.accepts(score):
                logger.debug(
                    f"Score {score} resolved to rule below {binding.rule.maximum_score}"
                )
                return binding.handler

        logger.debug(f"No score rule qualifies for score {score}")
        return None

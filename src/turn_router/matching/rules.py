"""
Declarative match rules bound to handlers by the intent registry.
"""
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from ..exceptions import ConfigurationError

DEFAULT_THRESHOLD = 0.5
DEFAULT_SCORER = "containment"


@dataclass(frozen=True)
class PhraseMatchRule:
    """
    Candidate phrases an utterance is scored against.

    Attributes:
        candidate_phrases: Known utterance variants, in registration order
        threshold: Minimum score a candidate needs to count as a match
        ignore_case: Case-insensitive containment check
        ignore_non_alphanumeric: Strip punctuation before scoring
        scorer: Name of the scoring function (see matching.similarity.SCORERS)
    """
    candidate_phrases: Tuple[str, ...]
    threshold: float = DEFAULT_THRESHOLD
    ignore_case: bool = True
    ignore_non_alphanumeric: bool = True
    scorer: str = DEFAULT_SCORER

    def __post_init__(self):
        phrases = self.candidate_phrases
        if isinstance(phrases, str):
            phrases = (phrases,)
        phrases = tuple(phrases)
        object.__setattr__(self, "candidate_phrases", phrases)

        if not phrases:
            raise ConfigurationError("PhraseMatchRule needs at least one candidate phrase")

        for phrase in phrases:
            if not isinstance(phrase, str) or not phrase.strip():
                raise ConfigurationError(
                    f"Candidate phrases must be non-empty strings, got {phrase!r}"
                )

        if not isinstance(self.threshold, (int, float)) or not math.isfinite(self.threshold):
            raise ConfigurationError(f"Threshold must be a finite number, got {self.threshold!r}")

        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(
                f"Threshold must be between 0.0 and 1.0, got {self.threshold}"
            )

        # Imported here: similarity depends on this module for MatchResult.
        from .similarity import SCORERS

        if self.scorer not in SCORERS:
            raise ConfigurationError(
                f"Unknown scorer '{self.scorer}'. "
                f"Must be one of: {list(SCORERS.keys())}"
            )

    @classmethod
    def of(cls, phrases: Sequence[str], **options) -> "PhraseMatchRule":
        """Build a rule from any sequence of phrases."""
        return cls(candidate_phrases=tuple(phrases), **options)


@dataclass(frozen=True)
class ScoreThresholdRule:
    """
    Upper bound on a knowledge-base confidence score.

    A handler bound to this rule is eligible when the score is strictly
    less than ``maximum_score``.
    """
    maximum_score: float

    def __post_init__(self):
        if not isinstance(self.maximum_score, (int, float)) or math.isnan(self.maximum_score):
            raise ConfigurationError(
                f"maximum_score must be a number, got {self.maximum_score!r}"
            )

    def accepts(self, score: float) -> bool:
        return score < self.maximum_score


@dataclass(frozen=True)
class MatchResult:
    """Best candidate phrase of one rule for one utterance."""
    candidate_phrase: str
    score: float

"""
Phrase matching layer.

Key components:
- normalize: punctuation stripping applied before scoring
- containment_score / SCORERS: utterance-to-phrase similarity
- PhraseMatchRule, ScoreThresholdRule: declarative rules bound to handlers
- MatchResult: best candidate of one rule for one utterance
"""
from .text_normalizer import normalize
from .rules import MatchResult, PhraseMatchRule, ScoreThresholdRule
from .similarity import SCORERS, containment_score, find_best_match, score

__all__ = [
    "normalize",
    "MatchResult",
    "PhraseMatchRule",
    "ScoreThresholdRule",
    "SCORERS",
    "containment_score",
    "find_best_match",
    "score",
]

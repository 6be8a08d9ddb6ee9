"""
Similarity scoring between an utterance and candidate phrases.

The default "containment" scorer reproduces the phrase-list scoring that
existing rule thresholds were tuned against. rapidfuzz scorers are
available per rule for typo-tolerant matching.
"""
import logging
from typing import Callable, Dict, Optional

from rapidfuzz import fuzz

from .rules import MatchResult, PhraseMatchRule
from .text_normalizer import normalize

logger = logging.getLogger(__name__)

Scorer = Callable[[str, str, bool, bool], float]


def _contains(haystack: str, needle: str, ignore_case: bool) -> bool:
    if ignore_case:
        return needle.lower() in haystack.lower()
    return needle in haystack


def containment_score(
    candidate: str,
    utterance: str,
    ignore_case: bool = True,
    ignore_non_alphanumeric: bool = True,
) -> float:
    """
    Score one candidate phrase against one utterance.

    Precedence:
    1. candidate contains utterance: len(utterance) / len(candidate)
    2. utterance contains candidate (case-sensitive):
       min(0.5 + len(candidate) / len(utterance), 0.9)
    3. otherwise the last utterance token found in the candidate:
       len(token) / len(candidate), or 0.0 when no token is found

    :param candidate: Candidate phrase from a rule
    :param utterance: User input for this turn
    :param ignore_case: Case-insensitive containment for steps 1 and 3
    :param ignore_non_alphanumeric: Normalize both sides first
    :return: Score, 0.0 when nothing overlaps
    """
    candidate_value = normalize(candidate.strip(), ignore_non_alphanumeric)
    utterance_value = normalize(utterance, ignore_non_alphanumeric)

    if not candidate_value or not utterance_value:
        return 0.0

    if _contains(candidate_value, utterance_value, ignore_case):
        return len(utterance_value) / len(candidate_value)

    if candidate_value in utterance_value:
        return min(0.5 + len(candidate_value) / len(utterance_value), 0.9)

    # Only the last matching token counts, not the sum of all matches.
    matched = ""
    for token in utterance_value.split(" "):
        if token and _contains(candidate_value, token, ignore_case):
            matched = token

    return len(matched) / len(candidate_value)


def _rapidfuzz_scorer(func: Callable[[str, str], float]) -> Scorer:
    def _score(
        candidate: str,
        utterance: str,
        ignore_case: bool = True,
        ignore_non_alphanumeric: bool = True,
    ) -> float:
        candidate_value = normalize(candidate.strip(), ignore_non_alphanumeric)
        utterance_value = normalize(utterance, ignore_non_alphanumeric)
        if ignore_case:
            candidate_value = candidate_value.lower()
            utterance_value = utterance_value.lower()
        # rapidfuzz scores are 0-100
        return func(candidate_value, utterance_value) / 100.0

    return _score


SCORERS: Dict[str, Scorer] = {
    "containment": containment_score,
    "ratio": _rapidfuzz_scorer(fuzz.ratio),
    "partial_ratio": _rapidfuzz_scorer(fuzz.partial_ratio),
    "token_sort_ratio": _rapidfuzz_scorer(fuzz.token_sort_ratio),
    "token_set_ratio": _rapidfuzz_scorer(fuzz.token_set_ratio),
}


def score(
    candidate: str,
    utterance: str,
    ignore_case: bool = True,
    ignore_non_alphanumeric: bool = True,
    scorer: str = "containment",
) -> float:
    """Score a candidate with the named scorer."""
    return SCORERS[scorer](candidate, utterance, ignore_case, ignore_non_alphanumeric)


def find_best_match(rule: PhraseMatchRule, utterance: str) -> Optional[MatchResult]:
    """
    Find the best candidate of a rule that clears its threshold.

    Earlier candidates win ties.

    :param rule: Phrase rule to evaluate
    :param utterance: User input for this turn
    :return: MatchResult, or None when no candidate reaches the threshold
    """
    scorer = SCORERS[rule.scorer]
    best: Optional[MatchResult] = None

    for candidate in rule.candidate_phrases:
        candidate_score = scorer(
            candidate, utterance, rule.ignore_case, rule.ignore_non_alphanumeric
        )
        if candidate_score < rule.threshold:
            continue
        if best is None or candidate_score > best.score:
            best = MatchResult(candidate_phrase=candidate, score=candidate_score)

    if best is not None:
        logger.debug(
            f"Best candidate '{best.candidate_phrase}' scored {best.score:.2f} "
            f"for utterance '{utterance}'"
        )
    return best

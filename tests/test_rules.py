"""
Tests for match rule value objects.
"""
import pytest
from turn_router.exceptions import ConfigurationError
from turn_router.matching import PhraseMatchRule, ScoreThresholdRule


class TestPhraseMatchRule:
    """Tests for PhraseMatchRule validation."""

    def test_defaults(self):
        """Test the documented defaults."""
        rule = PhraseMatchRule.of(["hello"])

        assert rule.threshold == 0.5
        assert rule.ignore_case is True
        assert rule.ignore_non_alphanumeric is True
        assert rule.scorer == "containment"

    def test_phrases_become_tuple_in_order(self):
        """Test that phrase order is kept and stored immutably."""
        rule = PhraseMatchRule.of(["b", "a", "c"])

        assert rule.candidate_phrases == ("b", "a", "c")

    def test_single_string_is_one_phrase(self):
        """Test that a bare string is not split into characters."""
        rule = PhraseMatchRule(candidate_phrases="hello")

        assert rule.candidate_phrases == ("hello",)

    def test_empty_phrase_list_rejected(self):
        """Test that an empty phrase list is a configuration error."""
        with pytest.raises(ConfigurationError):
            PhraseMatchRule.of([])

    def test_blank_phrase_rejected(self):
        """Test that blank phrases are rejected."""
        with pytest.raises(ConfigurationError):
            PhraseMatchRule.of(["hello", "   "])

    @pytest.mark.parametrize("threshold", [float("nan"), float("inf"), -0.1, 1.5])
    def test_invalid_threshold_rejected(self, threshold):
        """Test that non-finite or out-of-range thresholds are rejected."""
        with pytest.raises(ConfigurationError):
            PhraseMatchRule.of(["hello"], threshold=threshold)

    def test_unknown_scorer_rejected(self):
        """Test that unknown scorer names are rejected."""
        with pytest.raises(ConfigurationError, match="Unknown scorer"):
            PhraseMatchRule.of(["hello"], scorer="levenshtein")

    def test_rules_are_hashable(self):
        """Test that identical rules compare equal."""
        assert PhraseMatchRule.of(["a"]) == PhraseMatchRule.of(["a"])
        assert len({PhraseMatchRule.of(["a"]), PhraseMatchRule.of(["a"])}) == 1


class TestScoreThresholdRule:
    """Tests for ScoreThresholdRule."""

    def test_accepts_strictly_below(self):
        """Test that the bound is exclusive."""
        rule = ScoreThresholdRule(0.5)

        assert rule.accepts(0.49)
        assert not rule.accepts(0.5)
        assert not rule.accepts(0.7)

    def test_nan_rejected(self):
        """Test that NaN bounds are rejected."""
        with pytest.raises(ConfigurationError):
            ScoreThresholdRule(float("nan"))

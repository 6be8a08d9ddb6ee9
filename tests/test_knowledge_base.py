"""
Tests for knowledge-base wire models and the httpx client.
"""
import json

import httpx
import pytest
from turn_router.config import TurnRouterConfig
from turn_router.dialogs import QnADialog
from turn_router.exceptions import ConfigurationError, LookupFailure
from turn_router.knowledge_base import (
    SUBSCRIPTION_KEY_HEADER,
    KnowledgeBaseAnswer,
    KnowledgeBaseClient,
    KnowledgeBaseResult,
)


def _client(handler, **kwargs):
    options = {"max_answers": 3}
    options.update(kwargs)
    return KnowledgeBaseClient(
        "kb-123",
        "secret-key-value",
        endpoint="https://kb.example.com/qnamaker/v3.0/",
        transport=httpx.MockTransport(handler),
        **options,
    )


class TestModels:
    """Tests for KnowledgeBaseAnswer and KnowledgeBaseResult."""

    def test_score_scaled_by_context(self):
        """Test that percentage scores are scaled into [0, 1]."""
        result = KnowledgeBaseResult.model_validate(
            {"answers": [{"answer": "Yes", "score": 72.5, "qnaId": 4}]},
            context={"score_scale": 100.0},
        )

        assert result.top_answer.score == pytest.approx(0.725)
        assert result.top_answer.answer_id == 4

    def test_score_unscaled_without_context(self):
        """Test that scores pass through when no scale is given."""
        answer = KnowledgeBaseAnswer.model_validate({"answer": "Yes", "score": 0.4})

        assert answer.score == pytest.approx(0.4)

    def test_null_fields_default(self):
        """Test that null lists and text become empty values."""
        answer = KnowledgeBaseAnswer.model_validate(
            {"answer": None, "score": None, "questions": None, "metadata": None}
        )

        assert answer.answer_text == ""
        assert answer.score == 0.0
        assert answer.source_questions == []
        assert answer.metadata == []

    def test_attachment_markup_stripped_on_validation(self):
        """Test the image/png attachment scenario."""
        answer = KnowledgeBaseAnswer.model_validate(
            {
                "answer": 'Here it is <attachment contentType="image/png" contentUrl="https://x/y.png" />',
                "score": 90,
            },
            context={"score_scale": 100.0},
        )

        assert answer.answer_text == "Here it is"
        assert len(answer.attachments) == 1
        assert answer.attachments[0].content_type == "image/png"
        assert answer.attachments[0].content_url == "https://x/y.png"

    @pytest.mark.parametrize(
        "body",
        [
            {"answers": []},
            {"answers": None},
            {"answers": [{"answer": "No good match found in the KB", "score": 0, "qnaId": -1}]},
            {"answers": [{"answer": "Something", "score": 0}]},
        ],
    )
    def test_no_answer_sentinel(self, body):
        """Test every form of the no-answer sentinel."""
        assert KnowledgeBaseResult.model_validate(body).is_no_answer

    def test_real_answer_not_sentinel(self):
        """Test that a scored answer is not the sentinel."""
        result = KnowledgeBaseResult.model_validate({"answers": [{"answer": "Yes", "score": 10}]})

        assert not result.is_no_answer


class TestKnowledgeBaseClient:
    """Tests for KnowledgeBaseClient.generate_answer()."""

    def test_request_shape(self):
        """Test the URL, headers and JSON payload sent to the service."""
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["method"] = request.method
            seen["key"] = request.headers.get(SUBSCRIPTION_KEY_HEADER)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"answers": [{"answer": "Hi", "score": 0.8}]})

        client = _client(handler, metadata_boost=[("topic", "billing")], metadata_filter=[("lang", "en")])
        result = client.generate_answer("hello?")

        assert seen["method"] == "POST"
        assert seen["url"] == "https://kb.example.com/qnamaker/v3.0/knowledgebases/kb-123/generateAnswer"
        assert seen["key"] == "secret-key-value"
        assert seen["body"] == {
            "question": "hello?",
            "top": 3,
            "userId": "TurnRouter",
            "metadataBoost": [{"name": "topic", "value": "billing"}],
            "strictFilters": [{"name": "lang", "value": "en"}],
        }
        assert result.top_answer.score == pytest.approx(0.8)

    def test_scores_are_not_rescaled_by_default(self):
        """Test that scores reach callers exactly as the service returned them."""
        def handler(request):
            return httpx.Response(200, json={"answers": [{"answer": "Hi", "score": 0.7}]})

        assert _client(handler).generate_answer("q").top_answer.score == pytest.approx(0.7)

    def test_opt_in_score_scale(self):
        """Test that a score_scale divides percentage scores."""
        def handler(request):
            return httpx.Response(200, json={"answers": [{"answer": "Hi", "score": 70}]})

        result = _client(handler, score_scale=100.0).generate_answer("q")

        assert result.top_answer.score == pytest.approx(0.7)

    def test_sentinel_response_is_a_result(self):
        """Test that a no-answer response is returned, not raised."""
        def handler(request):
            return httpx.Response(
                200, json={"answers": [{"answer": "No good match found in the KB", "score": 0, "qnaId": -1}]}
            )

        result = _client(handler).generate_answer("what?")

        assert result.is_no_answer

    def test_timeout_raises_lookup_failure(self):
        """Test that timeouts become LookupFailure."""
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(LookupFailure, match="timed out") as exc_info:
            _client(handler, timeout=0.5).generate_answer("slow")

        assert exc_info.value.question == "slow"

    def test_http_error_raises_lookup_failure(self):
        """Test that non-2xx responses become LookupFailure."""
        def handler(request):
            return httpx.Response(500, text="boom")

        with pytest.raises(LookupFailure, match="HTTP 500"):
            _client(handler).generate_answer("q")

    def test_connection_error_raises_lookup_failure(self):
        """Test that transport errors become LookupFailure."""
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(LookupFailure, match="request failed"):
            _client(handler).generate_answer("q")

    def test_non_json_body_raises_lookup_failure(self):
        """Test that unparseable bodies become LookupFailure."""
        def handler(request):
            return httpx.Response(200, text="<html>not json</html>")

        with pytest.raises(LookupFailure, match="deserialize"):
            _client(handler).generate_answer("q")

    def test_unexpected_shape_raises_lookup_failure(self):
        """Test that JSON with the wrong shape becomes LookupFailure."""
        def handler(request):
            return httpx.Response(200, json={"answers": [{"score": "very high"}]})

        with pytest.raises(LookupFailure, match="unexpected shape"):
            _client(handler).generate_answer("q")

    @pytest.mark.parametrize("kb_id,key", [(None, "key"), ("kb", None), ("", "")])
    def test_missing_credentials_rejected(self, kb_id, key):
        """Test that missing id or key is a configuration error."""
        with pytest.raises(ConfigurationError):
            KnowledgeBaseClient(kb_id, key)

    def test_max_answers_must_be_positive(self):
        """Test that max_answers below 1 is rejected."""
        with pytest.raises(ConfigurationError):
            KnowledgeBaseClient("kb", "key", max_answers=0)

    def test_from_config(self):
        """Test building a client from TurnRouterConfig."""
        config = TurnRouterConfig(
            knowledge_base_id="kb-9",
            subscription_key="secret-key-value",
            max_answers=2,
            metadata_boost=[("a", "b")],
        )

        with KnowledgeBaseClient.from_config(config) as client:
            query = client.build_query("q")

        assert query.top == 2
        assert query.metadata_boost[0].name == "a"
        assert client.knowledge_base_id == "kb-9"


class TestScoreRoutingThroughClient:
    """Tests for score-bucket routing fed by a real client."""

    def _dialog(self, score, qna_id=1):
        def handler(request):
            return httpx.Response(
                200, json={"answers": [{"answer": "A", "score": score, "qnaId": qna_id}]}
            )

        config = TurnRouterConfig(knowledge_base_id="kb-1", subscription_key="secret-key-value")
        client = KnowledgeBaseClient.from_config(config, transport=httpx.MockTransport(handler))
        dialog = QnADialog(session_id="s1", knowledge_base=client)
        dialog.start()
        return dialog

    def test_score_below_rule_bound_fires_rule(self):
        """Test that 0.3 goes to the 0.5 rule's handler."""
        responses = self._dialog(0.3).handle_message("q")

        assert responses[0].text == "I found an answer that might help...A."

    def test_score_above_rule_bound_fires_default(self):
        """Test that 0.7 goes to the default handler."""
        responses = self._dialog(0.7).handle_message("q")

        assert responses[0].text.startswith("I found 1 answer(s)")
        assert "score of 0.7" in responses[0].text

    def test_zero_score_fires_no_match(self):
        """Test that the zero-score sentinel goes to the no-match handler."""
        responses = self._dialog(0).handle_message("q")

        assert responses[0].text == "Sorry, I couldn't find an answer for 'q'."

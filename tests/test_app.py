"""
Tests for the TurnRouterApp facade.
"""
from unittest.mock import Mock

import pytest
from turn_router import TurnRouterApp, TurnRouterConfig
from turn_router.dialogs import CommonResponsesDialog, QnADialog
from turn_router.exceptions import ConfigurationError
from turn_router.knowledge_base import KnowledgeBaseClient, KnowledgeBaseResult


class TestTurnRouterApp:
    """Tests for TurnRouterApp."""

    def test_requires_initialize(self):
        """Test that using the app before initialize() fails clearly."""
        app = TurnRouterApp(TurnRouterConfig())

        with pytest.raises(ConfigurationError, match="initialize"):
            app.chat("hello")

    def test_small_talk_without_knowledge_base(self):
        """Test that the common-responses dialog is the default without a knowledge base."""
        app = TurnRouterApp(TurnRouterConfig())
        app.initialize()

        responses = app.chat("thank you", session_id="abc")

        assert isinstance(app.sessions.get_dispatcher("abc"), CommonResponsesDialog)
        assert responses[0].text == "You're welcome."

    def test_config_flows_into_dispatchers(self):
        """Test that config options reach each session's dispatcher."""
        config = TurnRouterConfig(
            initial_message="Hello", no_match_message="Pardon?", phrase_threshold=0.8
        )
        app = TurnRouterApp(config)
        app.initialize()

        responses = app.chat("xyzzy", session_id="abc")
        dispatcher = app.sessions.get_dispatcher("abc")

        assert [r.text for r in responses] == [
            "Well hello there. What can I do for you today?",
            "Pardon?",
        ]
        assert dispatcher.registry.phrase_bindings[1].rule.threshold == 0.8

    def test_injected_knowledge_base_selects_qna_dialog(self):
        """Test that a knowledge base switches the default dialog."""
        knowledge_base = Mock()
        knowledge_base.generate_answer.return_value = KnowledgeBaseResult.model_validate(
            {"answers": [{"answer": "42", "score": 0.2}]}
        )
        app = TurnRouterApp(TurnRouterConfig(), knowledge_base=knowledge_base)
        app.initialize()

        responses = app.chat("meaning of life")

        assert isinstance(app.sessions.get_dispatcher("default"), QnADialog)
        assert responses[0].text == "I found an answer that might help...42."

    def test_configured_knowledge_base_builds_client(self):
        """Test that credentials in config produce an owned client."""
        config = TurnRouterConfig(knowledge_base_id="kb", subscription_key="0123456789")
        app = TurnRouterApp(config)
        app.initialize()

        assert isinstance(app._knowledge_base, KnowledgeBaseClient)
        app.close()

    def test_reset_drops_session(self):
        """Test that reset() forgets the session."""
        app = TurnRouterApp(TurnRouterConfig())
        app.initialize()
        app.chat("hi", session_id="abc")

        app.reset("abc")

        assert not app.sessions.has_session("abc")

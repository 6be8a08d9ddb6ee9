"""
Knowledge-base dialog bucketing answers by confidence.
"""
from ..interaction import IntentRegistry, TurnContext, TurnDispatcher
from ..knowledge_base import KnowledgeBaseResult

LOW_CONFIDENCE_SCORE = 0.5


class QnADialog(TurnDispatcher):
    """
    Answers every message from the knowledge base.

    Answers scoring below LOW_CONFIDENCE_SCORE are hedged; everything
    else goes through default_match_handler.
    """

    answers_from_knowledge_base = True

    def register_intents(self, registry: IntentRegistry) -> None:
        registry.on_score_below(LOW_CONFIDENCE_SCORE, self.handle_low_score)

    def handle_low_score(self, context: TurnContext, query: str, result: KnowledgeBaseResult) -> None:
        answer = result.top_answer
        context.post(
            f"I found an answer that might help...{answer.answer_text}.",
            attachments=answer.attachments,
        )

    def default_match_handler(self, context: TurnContext, query: str, result: KnowledgeBaseResult) -> None:
        answer = result.top_answer
        context.post(
            f"I found {len(result.answers)} answer(s) that might help...here is the first, "
            f"which returned a score of {answer.score}...{answer.answer_text}",
            attachments=answer.attachments,
        )

    def no_match_handler(self, context: TurnContext, utterance: str) -> None:
        context.post(self.no_match_message or f"Sorry, I couldn't find an answer for '{utterance}'.")

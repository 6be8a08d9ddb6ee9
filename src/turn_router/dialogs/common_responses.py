"""
Small-talk dialog answering greetings, status questions, goodbyes and thanks.
"""
from ..interaction import IntentRegistry, TurnContext, TurnDispatcher

GREETINGS = [
    "Hi", "Hi There", "Hello there", "Hey", "Hello", "Hey there",
    "Greetings", "Good morning", "Good afternoon", "Good evening", "Good day",
]
STATUS_REQUESTS = [
    "how goes it", "how do", "hows it going", "how are you",
    "how do you feel", "whats up", "sup", "hows things",
]
GOODBYES = ["bye", "bye bye", "got to go", "see you later", "laters", "adios"]
THANKS = ["thank you", "thanks", "much appreciated", "thanks very much", "thanking you"]


class CommonResponsesDialog(TurnDispatcher):
    """Phrase-matching dialog for everyday conversational openers."""

    def register_intents(self, registry: IntentRegistry) -> None:
        registry.on_phrases(
            GREETINGS,
            self.handle_greeting,
            threshold=0.5,
            ignore_case=False,
            ignore_non_alphanumeric=False,
        )
        registry.on_phrases(STATUS_REQUESTS, self.handle_status_request)
        registry.on_phrases(GOODBYES, self.handle_goodbye)
        registry.on_phrases(THANKS, self.handle_thanks)

    def handle_greeting(self, context: TurnContext, utterance: str) -> None:
        context.post("Well hello there. What can I do for you today?")

    def handle_status_request(self, context: TurnContext, utterance: str) -> None:
        context.post("I am great.")

    def handle_goodbye(self, context: TurnContext, utterance: str) -> None:
        context.post("Bye. Looking forward to our next awesome conversation already.")

    def handle_thanks(self, context: TurnContext, utterance: str) -> None:
        context.post("You're welcome.")

    def no_match_handler(self, context: TurnContext, utterance: str) -> None:
        context.post(self.no_match_message or "I'm not sure what you want.")

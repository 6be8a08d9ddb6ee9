class TurnRouterError(Exception):
    """Base exception for the turn router."""


class ConfigurationError(TurnRouterError):
    """Raised when required configuration is missing or invalid."""


class DispatcherNotStartedError(ConfigurationError):
    """Raised when a dispatcher receives a turn before start()."""


class NoMatchError(TurnRouterError):
    """Raised by the default no-match handler when nothing covers a turn."""

    def __init__(self, message: str, utterance: str = ""):
        super().__init__(message)
        self.utterance = utterance


class LookupFailure(TurnRouterError):
    """
    Raised when the knowledge base could not be asked.

    Distinct from a sentinel "no answer": the request failed, timed out,
    or returned data that could not be parsed.
    """

    def __init__(self, message: str, question: str = ""):
        super().__init__(message)
        self.question = question


class MalformedAttachmentMarkup(TurnRouterError):
    """Raised when an inline attachment directive cannot be parsed fully."""

    def __init__(self, message: str, partial_fields: dict = None):
        super().__init__(message)
        self.partial_fields = partial_fields or {}

"""
Turn Router: pick one handler per conversational turn.

Handlers are bound either to phrase lists (fuzzy matching against known
utterance variants) or to knowledge-base confidence ranges.
"""
from .app import TurnRouterApp
from .config import TurnRouterConfig
from .config_loader import load_config_from_env
from .exceptions import (
    ConfigurationError,
    DispatcherNotStartedError,
    LookupFailure,
    MalformedAttachmentMarkup,
    NoMatchError,
    TurnRouterError,
)
from .interaction import IntentRegistry, TurnContext, TurnDispatcher, TurnState
from .matching import MatchResult, PhraseMatchRule, ScoreThresholdRule
from .schemas import Attachment, TurnResponse

__all__ = [
    "TurnRouterApp",
    "TurnRouterConfig",
    "load_config_from_env",
    "ConfigurationError",
    "DispatcherNotStartedError",
    "LookupFailure",
    "MalformedAttachmentMarkup",
    "NoMatchError",
    "TurnRouterError",
    "IntentRegistry",
    "TurnContext",
    "TurnDispatcher",
    "TurnState",
    "MatchResult",
    "PhraseMatchRule",
    "ScoreThresholdRule",
    "Attachment",
    "TurnResponse",
]

"""
Interaction layer: handler registry and per-session turn dispatch.

This layer sits between the transport (Flask, CLI) and the handlers,
resolving exactly one handler or fallback per turn.
"""
from .turn_state import TurnState
from .turn_context import TurnContext
from .intent_registry import HandlerBinding, IntentRegistry, PhraseResolution
from .dispatcher import TurnDispatcher

__all__ = [
    "TurnState",
    "TurnContext",
    "HandlerBinding",
    "IntentRegistry",
    "PhraseResolution",
    "TurnDispatcher",
]

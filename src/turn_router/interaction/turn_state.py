"""
Lifecycle states of a turn dispatcher.
"""
from enum import Enum, auto


class TurnState(Enum):
    """States a session's dispatcher moves through."""
    IDLE = auto()
    AWAITING_INPUT = auto()
    RESOLVING = auto()
    DISPATCHED = auto()

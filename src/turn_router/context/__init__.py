"""
Session bookkeeping: one dispatcher per conversational session.
"""
from .session_manager import DispatcherFactory, SessionManager

__all__ = ["DispatcherFactory", "SessionManager"]

"""
Session manager module for the Chat Session Client.

This module handles the session lifecycle, credential hydration and
delivery of lifecycle events to listeners.
"""

from .session_manager import SessionManager, create_session_manager
from .listeners import SessionListener, ListenerRegistry
from .dispatch import Dispatcher, ImmediateDispatcher, EventLoopDispatcher

__all__ = [
    "SessionManager",
    "create_session_manager",
    "SessionListener",
    "ListenerRegistry",
    "Dispatcher",
    "ImmediateDispatcher",
    "EventLoopDispatcher"
]

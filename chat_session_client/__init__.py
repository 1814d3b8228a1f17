"""
Chat Session Client - session lifecycle management for a wrapped chat client.

This package loads saved account credentials, drives a remote chat session
through its startup and logout, and notifies listeners of lifecycle events.
"""

__version__ = "0.1.0"
__author__ = "Chat Session Client Team"
__email__ = "support@chat-session-client.dev"

from .models import Credentials, SessionState
from .config import Config, load_config
from .exceptions import (
    ChatSessionClientError,
    ConfigurationError,
    PersistenceError,
    SessionError,
    StorageConfigurationError,
    SessionStartError,
    LogoutError
)
from .session_manager import (
    SessionManager,
    SessionListener,
    create_session_manager,
    ImmediateDispatcher,
    EventLoopDispatcher
)

__all__ = [
    "Credentials",
    "SessionState",
    "Config",
    "load_config",
    "ChatSessionClientError",
    "ConfigurationError",
    "PersistenceError",
    "SessionError",
    "StorageConfigurationError",
    "SessionStartError",
    "LogoutError",
    "SessionManager",
    "SessionListener",
    "create_session_manager",
    "ImmediateDispatcher",
    "EventLoopDispatcher"
]

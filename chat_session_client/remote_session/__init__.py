"""
Remote session module for the Chat Session Client.

This module defines the opaque remote-session handle the session manager
drives, the local session store attached to it, and the backend registry.
"""

from .session_interface import RemoteSessionInterface, SessionStoreInterface
from .file_store import FileSessionStore
from .session_factory import RemoteSessionFactory

__all__ = [
    "RemoteSessionInterface",
    "SessionStoreInterface",
    "FileSessionStore",
    "RemoteSessionFactory"
]

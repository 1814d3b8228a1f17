"""
Custom exceptions for the Chat Session Client.

This module defines the exception hierarchy used throughout the application
for proper error handling and user feedback.
"""


class ChatSessionClientError(Exception):
    """Base exception for all Chat Session Client errors."""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(ChatSessionClientError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str = "Configuration error", details: str = None):
        super().__init__(message, details)


class PersistenceError(ChatSessionClientError):
    """Raised when persisted credentials cannot be written or removed."""

    def __init__(self, message: str = "Persistence error", details: str = None):
        super().__init__(message, details)


class SessionError(ChatSessionClientError):
    """Raised when session management encounters an error."""

    def __init__(self, message: str = "Session error", details: str = None):
        super().__init__(message, details)


class StorageConfigurationError(SessionError):
    """Raised when a session store cannot be attached to a remote session."""

    def __init__(self, message: str = "Storage configuration failed", details: str = None):
        super().__init__(message, details)


class SessionStartError(SessionError):
    """Raised when a remote session fails to start."""

    def __init__(self, message: str = "Session start failed", details: str = None):
        super().__init__(message, details)


class LogoutError(SessionError):
    """Raised when the remote side of a logout fails."""

    def __init__(self, message: str = "Logout failed", details: str = None):
        super().__init__(message, details)

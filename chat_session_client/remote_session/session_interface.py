"""
Abstract interface for remote chat sessions.

The session manager treats a remote session as an opaque handle that can be
given a local store, started and logged out. Backends implement
``RemoteSessionInterface``; local persistence backends implement
``SessionStoreInterface``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..models import Credentials


class SessionStoreInterface(ABC):
    """Local persistence backend attached to a remote session before it starts."""

    @abstractmethod
    async def open(self, credentials: Credentials) -> None:
        """
        Prepare the store for the account described by ``credentials``.

        Raises:
            StorageConfigurationError: If the store cannot be prepared
        """
        pass

    @abstractmethod
    async def save_account(self, info: Dict[str, Any]) -> None:
        """Persist account information reported by the server."""
        pass

    @abstractmethod
    async def load_account(self) -> Optional[Dict[str, Any]]:
        """Return previously saved account information, or None."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove everything the store holds for its account."""
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        pass


class RemoteSessionInterface(ABC):
    """
    Abstract handle on an authenticated connection to a chat backend.

    Startup is two-phase: ``configure_store`` must complete before ``start``.
    """

    def __init__(self, credentials: Credentials):
        self.credentials = credentials
        self.store: Optional[SessionStoreInterface] = None

    @abstractmethod
    async def configure_store(self, store: SessionStoreInterface) -> None:
        """
        Attach and open the local store for this session.

        Raises:
            StorageConfigurationError: If the store cannot be configured
        """
        pass

    @abstractmethod
    async def start(self) -> None:
        """
        Start the session against the backend.

        Raises:
            SessionStartError: If the session cannot be started
        """
        pass

    @abstractmethod
    async def logout(self) -> None:
        """
        Invalidate the session's access token on the backend.

        Raises:
            LogoutError: If the backend rejects the request
        """
        pass

    @property
    @abstractmethod
    def is_started(self) -> bool:
        pass

    def get_session_info(self) -> Dict[str, Any]:
        """Describe the session for status output."""
        return {
            "backend": type(self).__name__,
            "user_id": self.credentials.user_id,
            "home_server": self.credentials.home_server,
            "store_configured": self.store is not None and self.store.is_open,
            "started": self.is_started
        }

"""
Backend registry for remote sessions.

Maps a backend name from configuration to the ``RemoteSessionInterface``
implementation that talks to it.
"""

import logging
from typing import Dict, List

from .session_interface import RemoteSessionInterface
from ..config import Config
from ..exceptions import SessionError
from ..models import Credentials


class RemoteSessionFactory:
    """Factory for creating remote sessions by backend name."""

    _backends: Dict[str, type] = {}

    @classmethod
    def register_backend(cls, name: str, session_class: type) -> None:
        """
        Register a backend implementation.

        Args:
            name: Backend name used in configuration
            session_class: Class implementing RemoteSessionInterface
        """
        if not issubclass(session_class, RemoteSessionInterface):
            raise TypeError(
                f"{session_class} must implement RemoteSessionInterface"
            )
        cls._backends[name] = session_class

    @classmethod
    def unregister_backend(cls, name: str) -> None:
        cls._backends.pop(name, None)

    @classmethod
    def get_available_backends(cls) -> List[str]:
        """Get list of registered backend names."""
        _ensure_backends_registered()
        return sorted(cls._backends)

    @classmethod
    def create_session(
        cls,
        backend: str,
        credentials: Credentials,
        config: Config
    ) -> RemoteSessionInterface:
        """
        Create a remote session for ``credentials`` on ``backend``.

        Raises:
            SessionError: If the backend is not registered
        """
        _ensure_backends_registered()

        if backend not in cls._backends:
            raise SessionError(
                f"Unknown session backend: {backend}",
                f"available backends: {', '.join(sorted(cls._backends)) or 'none'}"
            )

        session_class = cls._backends[backend]
        logging.getLogger(__name__).debug(f"Creating {backend} session for {credentials.user_id}")
        return session_class(credentials, config)


def _ensure_backends_registered() -> None:
    """Import built-in backends so that they register themselves."""
    from ..slack_client import session  # noqa: F401

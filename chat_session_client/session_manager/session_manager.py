"""
Session manager for the account's remote chat session.

This module owns credential persistence, the session lifecycle state
machine and delivery of lifecycle events to registered listeners.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from ..config import Config
from ..exceptions import PersistenceError, SessionError, StorageConfigurationError, SessionStartError
from ..models import Credentials, SessionState
from ..remote_session.file_store import FileSessionStore
from ..remote_session.session_factory import RemoteSessionFactory
from ..remote_session.session_interface import RemoteSessionInterface, SessionStoreInterface
from ..storage.credential_store import CredentialStore
from ..storage.key_value_store import JsonFileKeyValueStore
from .dispatch import Dispatcher, EventLoopDispatcher, ImmediateDispatcher
from .listeners import ListenerRegistry


SessionFactory = Callable[[Credentials], RemoteSessionInterface]
StoreFactory = Callable[[Credentials], SessionStoreInterface]


class SessionManager:
    """
    Manager for a single account's remote session.

    Hydrates credentials from persisted storage, drives the remote session
    through its two-phase startup (configure store, then start) and notifies
    listeners when the session has started, failed to start or logged out.

    ``start()`` and ``logout()`` must be called from the thread running the
    host's event loop; their remote work is scheduled as asyncio tasks.
    """

    def __init__(
        self,
        config: Config,
        credential_store: Optional[CredentialStore] = None,
        session_factory: Optional[SessionFactory] = None,
        store_factory: Optional[StoreFactory] = None,
        dispatcher: Optional[Dispatcher] = None
    ):
        """
        Initialize the session manager and hydrate persisted credentials.

        Args:
            config: Application configuration
            credential_store: Where credentials are persisted. Defaults to the
                JSON file at ``config.credentials_path``.
            session_factory: Builds a remote session from credentials. Defaults
                to the backend named by ``config.session.backend``.
            store_factory: Builds the local store for a session. Defaults to a
                ``FileSessionStore`` under ``config.store_path``.
            dispatcher: Delivers listener callbacks. Defaults to the event loop
                running when each notification is scheduled.
        """
        self.config = config
        self.logger = logging.getLogger(__name__)

        self.credential_store = credential_store or CredentialStore(
            JsonFileKeyValueStore(config.credentials_path),
            key=config.session.credentials_key
        )
        self.session_factory = session_factory or self._create_remote_session
        self.store_factory = store_factory or self._create_session_store
        self.dispatcher = dispatcher
        self.failure_policy = config.session.failure_policy

        self.listeners = ListenerRegistry()
        self.session: Optional[RemoteSessionInterface] = None
        self.last_error: Optional[SessionError] = None

        stored = self.credential_store.load()
        if stored is not None:
            self._credentials: Optional[Credentials] = stored
            self._state = SessionState.NOT_STARTED
            self.logger.info(f"Loaded stored credentials for {stored.user_id}")
        else:
            self._credentials = None
            self._state = SessionState.NEEDS_CREDENTIALS
            self.logger.info("No stored credentials, waiting for login")

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def credentials(self) -> Optional[Credentials]:
        return self._credentials

    @credentials.setter
    def credentials(self, credentials: Optional[Credentials]) -> None:
        """
        Replace the account credentials.

        Complete credentials are persisted immediately; anything else deletes
        the persisted record and returns the manager to NEEDS_CREDENTIALS.
        Clearing always takes effect locally, even if the record cannot be
        deleted.

        Raises:
            PersistenceError: If the credential store cannot be written
        """
        if credentials is None or not credentials.is_complete():
            self._credentials = None
            self._state = SessionState.NEEDS_CREDENTIALS
            self.logger.info("Credentials cleared")
            self.credential_store.delete()
            return

        self.credential_store.save(credentials)
        self._credentials = credentials
        if self._state == SessionState.NEEDS_CREDENTIALS:
            self._state = SessionState.NOT_STARTED
        self.logger.info(f"Credentials set for {credentials.user_id}")

    @property
    def is_started(self) -> bool:
        return self._state == SessionState.STARTED

    def add_listener(self, listener) -> None:
        """Register a listener; it is held by weak reference."""
        self.listeners.add(listener)

    def remove_listener(self, listener) -> None:
        self.listeners.remove(listener)

    def start(self) -> Optional["asyncio.Task[bool]"]:
        """
        Create a fresh remote session and start it.

        Does nothing without credentials. Any previous session handle is
        dropped without being stopped. The state becomes STARTING before this
        method returns; STARTED is reached once both startup phases succeed.

        Returns:
            Optional[asyncio.Task[bool]]: Startup task resolving to True when
            both phases succeeded, or None if there are no credentials
        """
        if self._credentials is None:
            self.logger.debug("start() ignored: no credentials")
            return None

        loop = asyncio.get_running_loop()

        session = self.session_factory(self._credentials)
        if self.session is not None:
            self.logger.debug("Replacing existing session handle")
        self.session = session
        self.last_error = None
        self._state = SessionState.STARTING

        self.logger.info(f"Starting session for {self._credentials.user_id}")
        return loop.create_task(self._run_startup(session))

    def logout(self) -> Optional["asyncio.Task[None]"]:
        """
        Forget the credentials and log the remote session out.

        Local state is cleared immediately whatever the current state, even
        if the persisted record cannot be deleted. The remote logout runs in
        the background; ``on_logged_out`` is delivered once it completes,
        whether it succeeded or not. Without a session there is no remote
        call and no notification.

        Returns:
            Optional[asyncio.Task[None]]: Remote logout task, or None if there
            was no session
        """
        self._credentials = None
        self._state = SessionState.NEEDS_CREDENTIALS
        self.last_error = None

        session, self.session = self.session, None
        self.logger.info("Logged out locally")

        try:
            self.credential_store.delete()
        except PersistenceError as e:
            self.logger.error(f"Could not delete stored credentials on logout: {e}")

        if session is None:
            return None

        loop = asyncio.get_running_loop()
        return loop.create_task(self._run_logout(session))

    async def _run_startup(self, session: RemoteSessionInterface) -> bool:
        """Configure the session store, then start the session."""
        try:
            store = self.store_factory(session.credentials)
            await session.configure_store(store)
        except Exception as e:
            error = e if isinstance(e, StorageConfigurationError) else StorageConfigurationError(
                "Failed to configure session store", str(e)
            )
            self.logger.error(f"An error occurred setting the store: {error}")
            self._dispatch(lambda: self._fail_start(session, error))
            return False

        if session is not self.session or self._state != SessionState.STARTING:
            self.logger.debug("Abandoning startup of a replaced session")
            return False

        try:
            await session.start()
        except Exception as e:
            error = e if isinstance(e, SessionStartError) else SessionStartError(
                "Failed to start session", str(e)
            )
            self.logger.error(f"An error occurred starting the session: {error}")
            self._dispatch(lambda: self._fail_start(session, error))
            return False

        self._dispatch(lambda: self._complete_start(session))
        return True

    def _complete_start(self, session: RemoteSessionInterface) -> None:
        if session is not self.session or self._state != SessionState.STARTING:
            self.logger.debug("Ignoring start completion of a replaced session")
            return

        self._state = SessionState.STARTED
        self.logger.info("Session started")
        self.listeners.notify("on_session_started", session)

    def _fail_start(self, session: RemoteSessionInterface, error: SessionError) -> None:
        if session is not self.session or self._state != SessionState.STARTING:
            self.logger.debug("Ignoring start failure of a replaced session")
            return

        self.last_error = error
        if self.failure_policy == "stall":
            return

        self.session = None
        self._state = (
            SessionState.NOT_STARTED if self._credentials is not None
            else SessionState.NEEDS_CREDENTIALS
        )
        self.logger.info(f"Session reset to {self._state.value} after failure")
        self.listeners.notify("on_session_failed", error)

    async def _run_logout(self, session: RemoteSessionInterface) -> None:
        try:
            await session.logout()
        except Exception as e:
            self.logger.warning(f"Remote logout failed: {e}")

        self._dispatch(self._complete_logout)

    def _complete_logout(self) -> None:
        self.listeners.notify("on_logged_out")

    def _dispatch(self, callback: Callable[[], None]) -> None:
        self._get_dispatcher().dispatch(callback)

    def _get_dispatcher(self) -> Dispatcher:
        if self.dispatcher is not None:
            return self.dispatcher

        # Not cached: the manager may outlive the loop it was first used on
        try:
            return EventLoopDispatcher(asyncio.get_running_loop())
        except RuntimeError:
            # No loop in this thread: the caller already is the main context
            return ImmediateDispatcher()

    def _create_remote_session(self, credentials: Credentials) -> RemoteSessionInterface:
        return RemoteSessionFactory.create_session(self.config.session.backend, credentials, self.config)

    def _create_session_store(self, credentials: Credentials) -> SessionStoreInterface:
        return FileSessionStore(self.config.store_path)

    def get_manager_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the session manager.

        Returns:
            Dict[str, Any]: Manager state, account and session information
        """
        return {
            "state": self._state.value,
            "credentials": self._credentials.to_dict() if self._credentials else None,
            "session": self.session.get_session_info() if self.session else None,
            "listeners": len(self.listeners),
            "failure_policy": self.failure_policy,
            "last_error": str(self.last_error) if self.last_error else None
        }


def create_session_manager(config: Config, dispatcher: Optional[Dispatcher] = None) -> SessionManager:
    """
    Create a session manager wired to the configured backend and storage.

    Args:
        config: Application configuration
        dispatcher: Optional dispatcher for listener callbacks

    Returns:
        SessionManager: Manager hydrated from ``config.credentials_path``
    """
    return SessionManager(config, dispatcher=dispatcher)

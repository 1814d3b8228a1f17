"""
Session lifecycle listeners.

Listeners are held weakly, in registration order, so that a view going
away does not need to unregister itself.
"""

import logging
import weakref
from typing import Iterator, List

from ..exceptions import SessionError


class SessionListener:
    """
    Base class for objects interested in session lifecycle events.

    All callbacks are no-ops by default; subclasses override what they need.
    Callbacks are always invoked through the session manager's dispatcher.
    """

    def on_session_started(self, session) -> None:
        """Called once the remote session has configured its store and started."""
        pass

    def on_logged_out(self) -> None:
        """Called once the remote logout has completed, successfully or not."""
        pass

    def on_session_failed(self, error: SessionError) -> None:
        """Called when startup fails and the manager resets its state."""
        pass


class ListenerRegistry:
    """Ordered set of weakly referenced listeners."""

    def __init__(self):
        self._refs: List[weakref.ref] = []
        self.logger = logging.getLogger(__name__)

    def add(self, listener) -> None:
        if listener in self:
            return
        self._refs.append(weakref.ref(listener, self._discard_ref))

    def remove(self, listener) -> None:
        self._refs = [ref for ref in self._refs if ref() is not listener]

    def clear(self) -> None:
        self._refs.clear()

    def _discard_ref(self, ref: weakref.ref) -> None:
        if ref in self._refs:
            self._refs.remove(ref)

    def __iter__(self) -> Iterator:
        # Snapshot so listeners may unregister while being notified
        for ref in list(self._refs):
            listener = ref()
            if listener is not None:
                yield listener

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, listener) -> bool:
        return any(ref() is listener for ref in self._refs)

    def notify(self, method_name: str, *args) -> None:
        """
        Call ``method_name`` on every listener that implements it.

        A listener raising does not prevent delivery to the others.
        """
        for listener in self:
            callback = getattr(listener, method_name, None)
            if callback is None:
                continue
            try:
                callback(*args)
            except Exception as e:
                self.logger.error(
                    f"Error in listener {type(listener).__name__}.{method_name}: {e}",
                    exc_info=True
                )

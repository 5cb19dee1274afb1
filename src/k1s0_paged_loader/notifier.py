"""Change notification for paged loading state."""

from __future__ import annotations

import itertools
import logging

from .models import Listener

logger = logging.getLogger(__name__)


class ChangeNotifier:
    """Multi-subscriber change notifier.

    Listeners are kept in a plain mapping from subscription handle to
    callback and are invoked in registration order.
    """

    def __init__(self) -> None:
        self._listeners: dict[int, Listener] = {}
        self._handles = itertools.count(1)

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)

    def subscribe(self, listener: Listener) -> int:
        """Register a listener and return its subscription handle."""
        handle = next(self._handles)
        self._listeners[handle] = listener
        return handle

    def unsubscribe(self, listener: Listener | int) -> bool:
        """Remove a listener by handle or by the callback itself.

        Returns True when a subscription was removed. Removing by callback
        drops only its earliest registration.
        """
        if isinstance(listener, int):
            return self._listeners.pop(listener, None) is not None
        for handle, registered in self._listeners.items():
            if registered == listener:
                del self._listeners[handle]
                return True
        return False

    def notify(self) -> None:
        """Invoke every registered listener."""
        for handle, listener in list(self._listeners.items()):
            try:
                listener()
            except Exception:
                logger.exception(
                    "Change listener failed",
                    extra={"subscription": handle},
                )

    def dispose(self) -> None:
        """Release all listeners."""
        self._listeners.clear()

"""Observable connectivity flag shared with UI observers."""

import asyncio
import logging
import threading
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

ConnectivityCallback = Callable[[bool], None]


class ConnectivityState:
    """Boolean "connected to server" flag with change notifications.

    Only the owning client writes the flag (login, logout, ping). Any number
    of observers may read ``is_connected`` or subscribe to changes. Each
    observer receives the new value once per actual change.

    When a ``loop`` is given (typically the loop driving the UI), observers
    are invoked on that loop via ``call_soon_threadsafe``. Without a loop
    they are called inline from the writer's context. The stored value is
    updated immediately in both cases.

    Example:
        >>> state = ConnectivityState()
        >>> unsubscribe = state.subscribe(lambda value: print("connected:", value))
        >>> state.set(True)
        connected: True
        >>> unsubscribe()
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._value = False
        self._observers: List[ConnectivityCallback] = []
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._value

    def subscribe(self, callback: ConnectivityCallback) -> Callable[[], None]:
        """Register ``callback`` for changes and return an unsubscribe function."""
        with self._lock:
            self._observers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._observers:
                    self._observers.remove(callback)

        return unsubscribe

    def set(self, value: bool) -> None:
        """Update the flag, notifying observers when it changes."""
        with self._lock:
            changed = self._value != value
            self._value = value
            observers = list(self._observers)

        if not changed:
            return

        logger.debug(f"Connectivity changed to {value}")
        for callback in observers:
            if self._loop is not None and not self._loop.is_closed():
                self._loop.call_soon_threadsafe(callback, value)
            else:
                callback(value)

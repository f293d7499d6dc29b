"""
Application state container.

The Store owns the one current AppState, applies actions through the reducer,
persists each new snapshot and notifies subscribers.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Optional

from dentsync.config import get_config
from dentsync.db.storage import DEFAULT_STORAGE_KEY, LocalStorage, load_state, save_state
from dentsync.models import AppState

from .actions import BaseAction
from .reducer import reduce

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


class Store:
    """
    Single owner of the application state.

    `dispatch` is the only way to change the state. Actions are processed
    one at a time in the order received; an action dispatched from inside a
    listener is queued behind the one being processed.
    """

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        key: str = DEFAULT_STORAGE_KEY,
        initial_state: Optional[AppState] = None,
        reducer: Callable[[AppState, BaseAction], AppState] = reduce,
    ):
        self._storage = storage
        self._key = key
        self._reducer = reducer
        self._listeners: list[Listener] = []
        self._queue: deque[BaseAction] = deque()
        self._dispatching = False

        if initial_state is None:
            initial_state = load_state(storage, key) if storage is not None else AppState()
        self._state = initial_state

    @classmethod
    def from_config(cls) -> "Store":
        """Create a store backed by the configured data directory."""
        config = get_config()
        return cls(storage=LocalStorage(config.data_dir), key=config.storage_key)

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for state changes.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: BaseAction) -> AppState:
        """Apply an action and return the resulting state."""
        self._queue.append(action)
        if self._dispatching:
            return self._state

        self._dispatching = True
        try:
            while self._queue:
                self._apply(self._queue.popleft())
        finally:
            # Actions queued behind a failing one are not replayed later
            self._queue.clear()
            self._dispatching = False
        return self._state

    def _apply(self, action: BaseAction) -> None:
        new_state = self._reducer(self._state, action)
        if new_state is self._state:
            return
        self._state = new_state

        if self._storage is not None:
            save_state(self._storage, new_state, self._key)

        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("State listener %r failed", listener)

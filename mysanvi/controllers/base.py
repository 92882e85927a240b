"""Observable state holder shared by every screen controller"""

import enum
import logging
from dataclasses import replace
from typing import Callable, Generic, List, TypeVar

StateT = TypeVar("StateT")
Listener = Callable[[StateT], None]


class LoadStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class Controller(Generic[StateT]):
    """
    Owns one screen's state and notifies subscribers on every change.

    State objects are frozen dataclasses replaced wholesale on update, so a
    listener never observes a half-applied change. Once closed, late
    responses are dropped instead of mutating state.
    """

    def __init__(self, initial_state: StateT):
        self._state = initial_state
        self._listeners: List[Listener] = []
        self._closed = False

    @property
    def state(self) -> StateT:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._closed = True
        self._listeners.clear()

    def _update(self, **changes) -> bool:
        if self._closed:
            logging.debug(
                f"Dropping state update for closed {type(self).__name__}",
                extra={"step": "late_response", "fields": sorted(changes)},
            )
            return False
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)
        return True

"""Ordered observer list used for lifecycle notifications."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, List, Tuple

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class Signal:
    """
    Sequential publish/subscribe registry scoped to one manager.

    Listeners run in subscription order. They may be plain callables or
    coroutine functions. A failing listener never stops the ones after it;
    its exception is collected and handed back to the dispatcher.
    """

    def __init__(self, name: str = "signal"):
        self.name = name
        # (listener, fire once)
        self._listeners: List[Tuple[Listener, bool]] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, listener: Listener) -> bool:
        return any(existing == listener for existing, _ in self._listeners)

    def _subscribe(self, listener: Listener, once: bool) -> None:
        for index, (existing, _) in enumerate(self._listeners):
            if existing == listener:
                if once:
                    self._listeners[index] = (existing, True)
                return
        self._listeners.append((listener, once))

    def add(self, *listeners: Listener) -> "Signal":
        for listener in listeners:
            self._subscribe(listener, False)
        return self

    def add_once(self, *listeners: Listener) -> "Signal":
        for listener in listeners:
            self._subscribe(listener, True)
        return self

    def remove(self, *listeners: Listener) -> "Signal":
        self._listeners = [
            (existing, once) for existing, once in self._listeners
            if not any(existing == listener for listener in listeners)
        ]
        return self

    def clear(self) -> None:
        self._listeners.clear()

    async def dispatch(self, *payload: Any) -> List[Exception]:
        """Deliver ``payload`` to every listener.

        Returns:
            Exceptions raised by listeners, in delivery order.
        """
        errors: List[Exception] = []
        for listener, once in list(self._listeners):
            if once:
                self.remove(listener)
            try:
                result = listener(*payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.debug(f"Listener {listener!r} on {self.name} failed: {e}")
                errors.append(e)
        return errors


__all__ = ["Signal", "Listener"]

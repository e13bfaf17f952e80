from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, List, Optional, Union

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Optional[Awaitable[None]]]


class Event:
    """Ordered list of observers for one lifecycle signal.

    Handlers may be plain callables or coroutine functions. ``emit`` runs them
    one after another in subscription order; a failing handler is logged and
    does not stop the remaining ones.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            self.unsubscribe(handler)

        return unsubscribe

    def unsubscribe(self, handler: EventHandler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def __len__(self) -> int:
        return len(self._handlers)

    async def emit(self, *args: Any) -> None:
        for handler in list(self._handlers):
            try:
                result: Union[None, Awaitable[None]] = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.exception("Handler error for %s: %s", self.name, exc)


__all__ = ["Event", "EventHandler"]

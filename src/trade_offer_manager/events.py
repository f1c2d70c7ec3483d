"""EventSink - listener registry for debug traces, poll lifecycle and offer events."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable

from trade_offer_manager.models.events import EventName

log = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventSink:
    """Dispatches named events to any number of listeners.

    Emitting an event nobody listens to is fine. A listener that raises is
    logged and skipped so the remaining listeners (and the poll cycle) carry
    on. Coroutine listeners are started as tasks on the running loop; use
    ``drain()`` to wait for them.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventName, list[Listener]] = defaultdict(list)
        self._once: set[tuple[EventName, Listener]] = set()
        self._tasks: set[asyncio.Task] = set()

    def on(self, name: EventName | str, listener: Listener) -> Listener:
        """Subscribe ``listener`` and return it, so it can be passed to ``off()``."""
        self._listeners[EventName(name)].append(listener)
        return listener

    def once(self, name: EventName | str, listener: Listener) -> Listener:
        event = EventName(name)
        self._listeners[event].append(listener)
        self._once.add((event, listener))
        return listener

    def off(self, name: EventName | str, listener: Listener) -> None:
        event = EventName(name)
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            return
        self._once.discard((event, listener))

    def listener_count(self, name: EventName | str) -> int:
        return len(self._listeners.get(EventName(name), []))

    def emit(self, name: EventName | str, *args: Any) -> bool:
        """Call every listener of ``name``. Returns False if there were none."""
        event = EventName(name)
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            if (event, listener) in self._once:
                self.off(event, listener)
            try:
                result = listener(*args)
            except Exception:
                log.exception("Listener %r for %s failed", listener, event.value)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._tasks.add(task)
                task.add_done_callback(self._task_done)
        return bool(listeners)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("Async listener failed: %s", exc, exc_info=exc)

    async def drain(self) -> None:
        """Wait until every pending coroutine listener has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

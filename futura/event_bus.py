from __future__ import annotations
from collections import defaultdict
from collections.abc import Mapping
from typing import Any, Callable

from .errors import ProgrammerError
from .logging import logger


log = logger()


Listener = Callable[[Any], Any]


def event_name(event: Any) -> Any:
    if isinstance(event, Mapping):
        return event.get("name")
    return getattr(event, "name", None)


class EventBus:
    """Dispatches event objects to the listeners registered for their
    `name`."""
    def __init__(self):
        self.listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def on(self, name: str, listener: Listener) -> EventBus:
        self.listeners[name].append(listener)
        return self

    def off(self, name: str, listener: Listener) -> EventBus:
        if listener in self.listeners.get(name, []):
            self.listeners[name].remove(listener)
        return self

    def emit(self, event: Any) -> bool:
        name = event_name(event)
        if not isinstance(name, str) or not name:
            raise ProgrammerError(
                "Cannot emit event object without a String `name` property",
                {"event": event},
            )

        listeners = list(self.listeners.get(name, []))
        log.debug("emitting `%s` to %d listener(s)", name, len(listeners))
        for listener in listeners:
            listener(event)
        return bool(listeners)

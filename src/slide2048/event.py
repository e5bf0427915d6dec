import collections
from typing import Any, Callable

EventListener = Callable[..., Any]


class EventEmitter:
    """Dispatch named events to listeners in registration order"""

    listeners: dict[str, list[EventListener]]

    def __init__(self, names: tuple[str, ...] | None = None):
        self.listeners = collections.defaultdict(list)
        self._names = None if names is None else frozenset(names)

    def add_listener(
        self,
        name: str,
        fn: EventListener,
        prepend: bool = False,
    ) -> None:
        if self._names is not None and name not in self._names:
            raise ValueError(f"Unknown event {name!r}")

        listeners = self.listeners[name]

        if prepend:
            listeners.insert(0, fn)
        else:
            listeners.append(fn)

    def emit(self, /, name: str, *args: Any) -> None:
        for fn in self.listeners.get(name, ()):
            fn(*args)

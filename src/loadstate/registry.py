"""Process-scoped record of which boot modules have been loaded."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

LOGGER = logging.getLogger(__name__)

LoadListener = Callable[[str], None]


class LoadRegistry:
    """Insert-only set of loaded module identifiers.

    Create one instance at startup and hand it to the loader driver. A name
    is loaded once it has been marked; nothing ever unmarks it.
    """

    def __init__(self, preloaded: Iterable[str] = ()) -> None:
        self._loaded: set[str] = set()
        self._order: list[str] = []
        self._last_marked: str | None = None
        self._listeners: list[LoadListener] = []
        self._lock = threading.RLock()
        self.mark_all_loaded(preloaded)

    def mark_loaded(self, name: str) -> None:
        """Record ``name`` as loaded. Repeated calls are no-ops."""

        _require_name(name)
        with self._lock:
            self._last_marked = name
            if name in self._loaded:
                return
            self._loaded.add(name)
            self._order.append(name)
            LOGGER.debug("Marked '%s' as loaded", name)
            for listener in list(self._listeners):
                try:
                    listener(name)
                except Exception:
                    LOGGER.exception("Load listener %r failed for '%s'", listener, name)

    def mark_all_loaded(self, names: Iterable[str]) -> None:
        """Mark every name in ``names``, one at a time and in order."""

        if isinstance(names, str):
            raise TypeError("mark_all_loaded() expects an iterable of names, not a str.")
        with self._lock:
            for name in names:
                self.mark_loaded(name)

    load = mark_all_loaded

    def is_loaded(self, name: str) -> bool:
        _require_name(name)
        with self._lock:
            return name in self._loaded

    def add_listener(self, listener: LoadListener) -> None:
        """Call ``listener(name)`` for each name that becomes loaded from now on.

        A listener that raises is logged and skipped; marking still succeeds
        and the remaining listeners still run.
        """

        with self._lock:
            self._listeners.append(listener)

    @property
    def loaded_names(self) -> tuple[str, ...]:
        """Loaded names in the order they were first marked."""
        with self._lock:
            return tuple(self._order)

    @property
    def last_marked(self) -> str | None:
        with self._lock:
            return self._last_marked

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.is_loaded(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._loaded)

    def __repr__(self) -> str:
        return f"LoadRegistry(loaded={len(self)})"


def _require_name(name: object) -> None:
    if not isinstance(name, str):
        raise TypeError(f"Module name must be a str, got {type(name).__name__}.")


__all__ = ["LoadListener", "LoadRegistry"]

"""Delegated event bus keyed by (event kind, address pattern).

Handlers are bound to a pattern, not to an element, so a binding made
before the element exists still fires once it does. The binding table of
the default bus lives in _anchor and is shared by every node.

Each on() returns an opaque token. off() without a token removes every
handler on the pattern, whoever registered it; with a token it removes only
that registration.

Thread safety: call set_scheduler() once from the owning thread. After
that, any emit() from another thread is handed to the scheduler instead of
dispatching inline.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable

from wirenode import _anchor
from wirenode.store import Element, ElementStore, default_store

logger = logging.getLogger("wirenode.bus")

INPUT = "input"
CHANGE = "change"


@dataclass(frozen=True, slots=True)
class Event:
    """What a handler receives: the kind, the address it fired on, the element."""

    kind: str
    address: str
    target: Element | None = None


EventHandler = Callable[[Event], None]


def _kinds(kinds: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(kinds, str):
        return tuple(kinds.split())
    return tuple(kinds)


class EventBus:
    """Publish/subscribe over address patterns."""

    def __init__(
        self,
        table: dict[tuple[str, str], list] | None = None,
        store: ElementStore | None = None,
    ) -> None:
        self._table = _anchor.bindings if table is None else table
        self._store = store
        self._scheduler: Callable[[Callable[[], None]], None] | None = None
        self._scheduler_thread: threading.Thread | None = None

    def set_scheduler(self, scheduler: Callable[[Callable[[], None]], None]) -> None:
        """Marshal emits from other threads through ``scheduler``.

        Call once from the owning thread:
            bus.set_scheduler(loop.call_soon_threadsafe)
        """
        self._scheduler = scheduler
        self._scheduler_thread = threading.current_thread()

    def on(self, kinds: str | Iterable[str], pattern: str, handler: EventHandler) -> int:
        """Bind handler to every kind on pattern. Returns the registration token."""
        token = _anchor.new_token()
        for kind in _kinds(kinds):
            self._table.setdefault((kind, pattern), []).append((token, handler))
        return token

    def off(self, kinds: str | Iterable[str], pattern: str, token: int | None = None) -> int:
        """Remove bindings on pattern. Returns how many were removed."""
        removed = 0
        for kind in _kinds(kinds):
            entries = self._table.get((kind, pattern))
            if not entries:
                continue
            if token is None:
                removed += len(entries)
                del self._table[(kind, pattern)]
                continue
            kept = [entry for entry in entries if entry[0] != token]
            removed += len(entries) - len(kept)
            if kept:
                self._table[(kind, pattern)] = kept
            else:
                del self._table[(kind, pattern)]
        return removed

    def handlers(self, kind: str, pattern: str) -> list[EventHandler]:
        return [handler for _, handler in self._table.get((kind, pattern), [])]

    def has(self, kind: str, pattern: str, token: int) -> bool:
        return any(entry[0] == token for entry in self._table.get((kind, pattern), ()))

    def emit(self, kind: str, address: str) -> None:
        """Deliver ``kind`` on ``address`` to every bound handler, in bind order."""
        if self._scheduler is not None and threading.current_thread() != self._scheduler_thread:
            self._scheduler(lambda: self._emit_direct(kind, address))
        else:
            self._emit_direct(kind, address)

    trigger = emit

    def _emit_direct(self, kind: str, address: str) -> None:
        # Snapshot: handlers may bind or unbind during dispatch.
        entries = list(self._table.get((kind, address), ()))
        if not entries:
            return
        logger.debug("emit %s on %s to %d handler(s)", kind, address, len(entries))
        event = Event(kind, address, self._target(address))
        for _, handler in entries:
            handler(event)

    def _target(self, address: str) -> Element | None:
        store = self._store if self._store is not None else default_store
        if address in store:
            return store.resolve(address)
        return None


default_bus = EventBus()

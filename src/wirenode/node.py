"""Reactive nodes — elements that recompute when their sources change.

A ReactiveNode owns one element and listens for "input" and "change" on a
list of source addresses. When one fires, the node runs its handler, coerces
the result to a number, writes it into its own element and broadcasts
"change" on its own address, so nodes subscribed to it recompute in turn.

Bindings live on the shared event bus. Each registry entry keeps the token
of its own binding, so unsubscribe() can remove exactly what this node bound
(see NodeConfig.unbind_scope for the pattern-wide alternative).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

from wirenode._cascade import broadcasting
from wirenode.bus import CHANGE, INPUT, Event, EventBus, default_bus
from wirenode.coerce import coerce_numeric
from wirenode.config import get_config
from wirenode.store import Element, ElementStore, default_store, parse_template

logger = logging.getLogger("wirenode.node")

ReactiveFunction = Callable[[Union[Event, None]], Union[int, float, str]]

BOUND_KINDS = (INPUT, CHANGE)


@dataclass(frozen=True, slots=True)
class Handler:
    """subscribe() leading argument: handle the listed addresses with ``fn``."""

    fn: ReactiveFunction

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise TypeError(f"Handler needs a callable, got {self.fn!r}")


@dataclass(frozen=True, slots=True)
class DefaultOn:
    """subscribe() leading argument: also bind ``address`` with the default handler."""

    address: str


def _leading(first) -> tuple[ReactiveFunction | None, str | None]:
    """Resolve subscribe()'s first argument to (handler, extra address)."""
    if first is None:
        return None, None
    if isinstance(first, Handler):
        return first.fn, None
    if isinstance(first, DefaultOn):
        return None, first.address
    if isinstance(first, str):
        return None, first
    if callable(first):
        return first, None
    raise TypeError(f"subscribe() expects a handler or an address first, got {first!r}")


class _Entry:
    """One registry entry: a bound address, its handler and its bus token."""

    __slots__ = ("address", "fn", "token")

    def __init__(self, address: str, fn: ReactiveFunction | None) -> None:
        self.address = address
        self.fn = fn
        self.token: int | None = None


class ReactiveNode:
    """An addressable element whose value is recomputed from its sources.

    ``element`` may be an Element, the address of an existing element
    (``"#total"``) or a ``"<kind></kind>"`` template that creates a new
    element under a random id. ``id`` names the element when it has none,
    or names the element created from a template.

    Usage:
        node = ReactiveNode.create_new(lambda e: 0, "input", "#foo", "#bar")
        node.subscribe(lambda e: 2, "#biz")

        bus.emit("change", "#foo")   # node.value == 0
        bus.emit("change", "#biz")   # node.value == 2
    """

    def __init__(
        self,
        element: Element | str,
        fire: ReactiveFunction | None = None,
        id: str | None = None,
        *,
        store: ElementStore | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self._store = store if store is not None else default_store
        self._bus = bus if bus is not None else default_bus
        self._element = self._own(element, id)
        self._id = self._element.id
        self._entries: list[_Entry] = []
        self.fire = fire

    def _own(self, element: Element | str, id: str | None) -> Element:
        if isinstance(element, str):
            kind = parse_template(element)
            if kind is not None:
                return self._store.create(kind, id)
            return self._store.resolve(element)
        if not isinstance(element, Element):
            raise TypeError(f"Expected an Element or a string, got {element!r}")
        if id is not None:
            if element.id is not None and element.id != id:
                raise ValueError(f"Element already has id {element.id!r}, not {id!r}")
            element.id = id
        # Raises DuplicateId unless the store holds this very element.
        return self._store.add(element)

    @classmethod
    def wrap_existing(
        cls,
        fire: ReactiveFunction | None,
        address: str,
        *sources: str,
        store: ElementStore | None = None,
        bus: EventBus | None = None,
    ) -> ReactiveNode:
        """Build a node around the element at ``address`` and bind ``sources``."""
        node = cls(address, fire, store=store, bus=bus)
        node.subscribe(*sources)
        return node

    @classmethod
    def create_new(
        cls,
        fire: ReactiveFunction | None,
        kind: str,
        *sources: str,
        store: ElementStore | None = None,
        bus: EventBus | None = None,
    ) -> ReactiveNode:
        """Create a new ``kind`` element under a random id and bind ``sources``."""
        node = cls(f"<{kind}></{kind}>", fire, store=store, bus=bus)
        node.subscribe(*sources)
        return node

    @property
    def id(self) -> str:
        return self._id

    @property
    def element(self) -> Element:
        return self._element

    @property
    def subscriptions(self) -> list[str]:
        """Registered source addresses, in registration order."""
        return [entry.address for entry in self._entries]

    @property
    def is_bound(self) -> bool:
        """True if any registered binding is still live on the bus."""
        return any(
            entry.token is not None and self._bus.has(CHANGE, entry.address, entry.token)
            for entry in self._entries
        )

    @property
    def value(self) -> object:
        return self._store.get_value(self._element)

    def address(self) -> str:
        return f"#{self._id}"

    selector = address

    def subscribe(self, first=None, *addresses: str) -> ReactiveNode:
        """Bind addresses so that a change on any of them recomputes this node.

        ``first`` selects the handler for ``addresses``:
        - a callable or ``Handler(fn)``: ``fn`` handles every address listed.
        - an address string or ``DefaultOn(address)``: that address is bound
          too, and everything here uses the default handler.
        - None: the default handler.

        Repeating an address adds another binding; each one fires.
        """
        fn, extra = _leading(first)
        logger.debug("%s subscribe handler=%r extra=%r addresses=%r",
                     self.address(), fn, extra, addresses)
        for address in addresses:
            if not isinstance(address, str):
                raise TypeError(f"Addresses must be strings, got {address!r}")
        if extra is not None:
            entry = self._bind(_Entry(extra, None))
            if get_config().register_leading_address:
                self._entries.append(entry)
        for address in addresses:
            self._entries.append(self._bind(_Entry(address, fn)))
        return self

    def _bind(self, entry: _Entry) -> _Entry:
        fn = entry.fn

        def _on_event(event: Event) -> None:
            self._recompute(fn, event)

        entry.token = self._bus.on(BOUND_KINDS, entry.address, _on_event)
        return entry

    def _recompute(self, fn: ReactiveFunction | None, event: Event | None) -> None:
        handler = fn if callable(fn) else self.fire
        if handler is None:
            logger.warning("No function provided for trigger on %s", self.address())
            return
        value = coerce_numeric(handler(event))
        address = self.address()
        # Resolve by address so a removed element fails loudly.
        self._store.set_value(self._store.resolve(address), value)
        logger.debug("%s <- %r", address, value)
        with broadcasting(address):
            self._bus.emit(CHANGE, address)

    def refresh(self) -> None:
        """Recompute once with the default handler and no event."""
        self._recompute(None, None)

    def trigger(self) -> None:
        """Broadcast "change" on every subscribed address."""
        for address in self.subscriptions:
            self._bus.emit(CHANGE, address)

    def unsubscribe(self) -> None:
        """Remove the bus bindings of every registered address.

        The registry is kept, so resubscribe() can restore them. With
        ``unbind_scope="pattern"`` every handler on those addresses goes,
        including other nodes'.
        """
        self._unbind(get_config().unbind_scope)

    def _unbind(self, scope: str) -> None:
        for entry in self._entries:
            if scope == "pattern":
                self._bus.off(BOUND_KINDS, entry.address)
            elif entry.token is not None:
                self._bus.off(BOUND_KINDS, entry.address, entry.token)
            entry.token = None

    def resubscribe(self) -> None:
        """Rebind every registered address with the handler it was registered with."""
        self._unbind("node")
        for entry in self._entries:
            self._bind(entry)

    def clear(self) -> None:
        """Unsubscribe and forget every registered address."""
        self.unsubscribe()
        self._entries = []

    def __repr__(self) -> str:
        state = "bound" if self.is_bound else "unbound"
        return f"ReactiveNode({self.address()}, {len(self._entries)} subscriptions, {state})"

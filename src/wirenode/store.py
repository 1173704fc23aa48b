"""Element store — id-keyed registry of elements with a mutable value slot.

An element is addressed as ``"#" + id``. The default store keeps its table
in _anchor so every node in the process shares it; a store built with
``ElementStore({})`` is private.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from wirenode import _anchor
from wirenode.errors import DuplicateId, UnresolvedAddress

_TEMPLATE = re.compile(r"^<(.*)></(.*)>$")


@dataclass(eq=False)
class Element:
    """An addressable element holding one scalar value."""

    kind: str
    id: str | None = None
    value: object = ""

    @property
    def address(self) -> str:
        return address_of(self.id)

    def __repr__(self) -> str:
        return f"Element({self.kind!r}, id={self.id!r}, value={self.value!r})"


def address_of(element_id: str | None) -> str:
    return f"#{element_id}"


def parse_template(text: str) -> str | None:
    """Return the kind of a ``<kind></kind>`` template, or None."""
    match = _TEMPLATE.match(text)
    return match.group(1) if match else None


class ElementStore:
    """Key-based element container with address resolution."""

    def __init__(self, table: dict[str, Element] | None = None) -> None:
        self._elements = _anchor.elements if table is None else table

    def create(self, kind: str, id: str | None = None, value: object = "") -> Element:
        """Instantiate a new element of ``kind`` under a fresh or given id.

        Raises DuplicateId if ``id`` is taken.
        """
        element = Element(kind, id if id is not None else self.new_id(), value)
        return self.add(element)

    def add(self, element: Element) -> Element:
        """Store ``element`` under its id. Re-adding the same element is a no-op.

        Raises DuplicateId if a different element holds the id.
        """
        if element.id is None:
            element.id = self.new_id()
        existing = self._elements.get(element.id)
        if existing is not None and existing is not element:
            raise DuplicateId(element.id)
        self._elements[element.id] = element
        return element

    def remove(self, address: str) -> Element:
        element = self.resolve(address)
        del self._elements[element.id]
        return element

    def new_id(self) -> str:
        while True:
            candidate = _anchor.new_id()
            if candidate not in self._elements:
                return candidate

    def resolve(self, address: str) -> Element:
        """Look up the element at ``"#id"``. Raises UnresolvedAddress."""
        if not isinstance(address, str) or not address.startswith("#"):
            raise UnresolvedAddress(address)
        element = self._elements.get(address[1:])
        if element is None:
            raise UnresolvedAddress(address)
        return element

    def get_value(self, handle: Element | str) -> object:
        return self._handle(handle).value

    def set_value(self, handle: Element | str, value: object) -> None:
        self._handle(handle).value = value

    def _handle(self, handle: Element | str) -> Element:
        return self.resolve(handle) if isinstance(handle, str) else handle

    def __contains__(self, address: str) -> bool:
        try:
            self.resolve(address)
        except UnresolvedAddress:
            return False
        return True

    def __len__(self) -> int:
        return len(self._elements)


default_store = ElementStore()

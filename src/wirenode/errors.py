"""wirenode error hierarchy.

All wirenode-specific errors inherit from WirenodeError for easy catching.
"""


class WirenodeError(Exception):
    """Base error for all wirenode operations."""


class UnresolvedAddress(WirenodeError, LookupError):
    """An address does not resolve to any element in the store."""

    def __init__(self, address: str) -> None:
        super().__init__(f"No element at address {address!r}")
        self.address = address


class DuplicateId(WirenodeError, ValueError):
    """A different element is already stored under this id."""

    def __init__(self, element_id: str) -> None:
        super().__init__(f"Another element already has id {element_id!r}")
        self.element_id = element_id


class CycleDetected(WirenodeError, RecursionError):
    """A cascade of recomputations exceeded the configured depth."""

    def __init__(self, address: str, depth: int) -> None:
        super().__init__(
            f"Cascade through {address!r} exceeded depth {depth}; "
            "the subscription graph probably contains a cycle"
        )
        self.address = address
        self.depth = depth


class ConfigError(WirenodeError, ValueError):
    """Invalid configuration value."""

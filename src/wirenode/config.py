"""Process-wide node configuration.

NodeConfig is frozen; configure() swaps the current instance. Nodes read the
current config at call time, so a change applies to existing nodes too.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, replace

from wirenode.errors import ConfigError

UNBIND_SCOPES = ("node", "pattern")


@dataclass(frozen=True, slots=True)
class NodeConfig:
    """Behavior switches for ReactiveNode.

    Attributes:
        unbind_scope: ``"node"`` removes only the calling node's bindings on
            unsubscribe. ``"pattern"`` removes every handler bound to the
            pattern, whichever node registered it.
        register_leading_address: When a string is passed as the first
            argument of ``subscribe``, also record it in ``subscriptions``.
            When False it is bound but not recorded, and so survives
            ``unsubscribe``/``clear``.
        max_cascade_depth: Nested broadcasts allowed before ``CycleDetected``
            is raised. None disables the guard.

    """

    unbind_scope: str = "node"
    register_leading_address: bool = True
    max_cascade_depth: int | None = 100

    def __post_init__(self) -> None:
        if self.unbind_scope not in UNBIND_SCOPES:
            raise ConfigError(
                f"unbind_scope must be one of {UNBIND_SCOPES}, got {self.unbind_scope!r}"
            )
        if self.max_cascade_depth is not None and self.max_cascade_depth < 1:
            raise ConfigError(
                f"max_cascade_depth must be positive or None, got {self.max_cascade_depth!r}"
            )


_current = NodeConfig()


def get_config() -> NodeConfig:
    return _current


def configure(**changes) -> NodeConfig:
    """Replace fields of the current config. Returns the previous config."""
    global _current
    previous = _current
    _current = replace(_current, **changes)
    return previous


def set_config(config: NodeConfig) -> None:
    global _current
    _current = config


@contextmanager
def override(**changes):
    """Context manager for a scoped config change.

    Usage:
        with override(unbind_scope="pattern"):
            node.unsubscribe()
    """
    previous = configure(**changes)
    try:
        yield _current
    finally:
        set_config(previous)

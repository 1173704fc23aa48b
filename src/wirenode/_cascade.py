"""Cascade depth tracking.

A node's broadcast runs the handlers of every node subscribed to it inline,
so a cascade is a nested call stack. contextvars holds the current nesting
depth; each broadcast made from a recomputation goes one level deeper.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager

from wirenode.config import get_config
from wirenode.errors import CycleDetected

# Number of recomputation broadcasts currently on the stack.
current_depth: contextvars.ContextVar[int] = contextvars.ContextVar(
    "current_depth", default=0
)


@contextmanager
def broadcasting(address: str):
    """Enter one cascade level for a broadcast on ``address``.

    Raises CycleDetected once the depth passes ``max_cascade_depth``.
    """
    depth = current_depth.get() + 1
    limit = get_config().max_cascade_depth
    if limit is not None and depth > limit:
        raise CycleDetected(address, limit)
    token = current_depth.set(depth)
    try:
        yield depth
    finally:
        current_depth.reset(token)


def get_depth() -> int:
    """Current cascade depth. Useful for testing."""
    return current_depth.get()

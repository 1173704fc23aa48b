"""Data anchor — plain Python structures that hold all shared node state.

This module stores the raw data behind the default element store and the
default event bus. Separating data from behavior means the behavior modules
can be replaced while the data persists.
"""

import itertools
import random
import string

# Element state
elements: dict[str, object] = {}  # element id -> Element

# Binding table, keyed only by (kind, pattern). Not partitioned per node.
bindings: dict[tuple[str, str], list] = {}  # (kind, pattern) -> [(token, handler)]

# Bus registration tokens
_token_counter = itertools.count(1)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_token() -> int:
    return next(_token_counter)


def new_id(length: int = 11) -> str:
    """Short random base-36 identifier. Uniqueness is checked by the store."""
    return "".join(random.choices(_ID_ALPHABET, k=length))


def reset() -> None:
    """Drop every element and binding. Used by tests."""
    elements.clear()
    bindings.clear()

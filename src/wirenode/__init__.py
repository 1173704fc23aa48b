"""wirenode: reactive value nodes over a delegated event bus."""

from importlib.metadata import version as _version

__version__ = _version("wirenode")

from wirenode._cascade import get_depth
from wirenode.bus import CHANGE, INPUT, Event, EventBus, default_bus
from wirenode.coerce import coerce_numeric
from wirenode.config import NodeConfig, configure, get_config, override
from wirenode.errors import (
    ConfigError,
    CycleDetected,
    DuplicateId,
    UnresolvedAddress,
    WirenodeError,
)
from wirenode.node import DefaultOn, Handler, ReactiveNode
from wirenode.store import Element, ElementStore, default_store

__all__ = [
    "ReactiveNode",
    "Handler",
    "DefaultOn",
    "Element",
    "ElementStore",
    "default_store",
    "Event",
    "EventBus",
    "default_bus",
    "INPUT",
    "CHANGE",
    "coerce_numeric",
    "NodeConfig",
    "configure",
    "get_config",
    "override",
    "get_depth",
    "WirenodeError",
    "UnresolvedAddress",
    "DuplicateId",
    "CycleDetected",
    "ConfigError",
]

import pytest

from wirenode import _anchor
from wirenode.config import NodeConfig, set_config


@pytest.fixture(autouse=True)
def _fresh_state():
    """Every test starts with an empty element table, bus and default config."""
    _anchor.reset()
    set_config(NodeConfig())
    yield
    _anchor.reset()
    set_config(NodeConfig())

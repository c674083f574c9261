from __future__ import annotations

from .jid import (
    G_US,
    FullJid,
    jid_decode,
    jid_encode,
    jid_normalized_user,
)
from .nodes import (
    assert_node_error_free,
    get_binary_node_child,
    get_binary_node_child_string,
    get_binary_node_children,
    has_binary_node_child,
)
from .types import BinaryNode

__all__ = [
    "G_US",
    "BinaryNode",
    "FullJid",
    "assert_node_error_free",
    "get_binary_node_child",
    "get_binary_node_child_string",
    "get_binary_node_children",
    "has_binary_node_child",
    "jid_decode",
    "jid_encode",
    "jid_normalized_user",
]

"""
Typed accessors over `BinaryNode` trees.

Decoders should go through these helpers instead of walking `content` by hand.
Lookups by tag return the first match; duplicate tags at one level are not
treated as an error.
"""

from __future__ import annotations

from ..exceptions import GroupQueryError
from .types import BinaryNode


def get_binary_node_children(node: BinaryNode | None, tag: str) -> list[BinaryNode]:
    if not node or not isinstance(node.content, list):
        return []
    return [c for c in node.content if isinstance(c, BinaryNode) and c.tag == tag]


def get_binary_node_child(node: BinaryNode | None, tag: str) -> BinaryNode | None:
    if not node or not isinstance(node.content, list):
        return None
    for c in node.content:
        if isinstance(c, BinaryNode) and c.tag == tag:
            return c
    return None


def has_binary_node_child(node: BinaryNode | None, tag: str) -> bool:
    return get_binary_node_child(node, tag) is not None


def get_binary_node_child_string(node: BinaryNode | None, tag: str) -> str | None:
    child = get_binary_node_child(node, tag)
    if child is None:
        return None
    if isinstance(child.content, str):
        return child.content
    if isinstance(child.content, (bytes, bytearray, memoryview)):
        return bytes(child.content).decode("utf-8")
    return None


def assert_node_error_free(node: BinaryNode) -> None:
    """
    Raise `GroupQueryError` if `node` is an error-shaped response.

    Both `<iq type="error">` and a nested `<error code=.. text=..>` child count.
    """

    err = get_binary_node_child(node, "error")
    if err is not None:
        raise GroupQueryError(
            code=err.attrs.get("code") or "unknown",
            text=err.attrs.get("text") or "",
            node=node,
        )
    if node.attrs.get("type") == "error":
        raise GroupQueryError(code="unknown", node=node)

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

BinaryNodeData: TypeAlias = list["BinaryNode"] | str | bytes | None


@dataclass(slots=True)
class BinaryNode:
    """
    One node of the binary stanza tree exchanged with the server.

    - `tag`: node name
    - `attrs`: string map of attributes (keys unique, order irrelevant)
    - `content`: ordered child nodes, a text/byte payload, or None
    """

    tag: str
    attrs: dict[str, str]
    content: BinaryNodeData = None

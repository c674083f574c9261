from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .wabinary.types import BinaryNode


class GroupsError(Exception):
    """Base error for the wagroups library."""


class TransportError(GroupsError):
    """The query transport failed to deliver a request or its response."""


class DecodeError(GroupsError):
    """A successful response did not have the shape the decoder expects."""


class AuthError(GroupsError):
    """Local identity is missing or incomplete."""


class GroupQueryError(GroupsError):
    """
    The server rejected a group query.

    WhatsApp answers with `<iq type="error"><error code="..." text="..."/></iq>`.
    """

    def __init__(self, *, code: str, text: str = "", node: BinaryNode | None = None) -> None:
        msg = f"group query rejected (error={code})"
        if text:
            msg = f"{msg}: {text}"
        super().__init__(msg)
        self.code = code
        self.text = text
        self.node = node

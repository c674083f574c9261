from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Contact:
    id: str  # JID
    name: str | None = None
    lid: str | None = None


@dataclass(slots=True)
class AuthenticationCreds:
    """
    The slice of session credentials the group layer reads.

    Only the local identity is needed: it attributes locally synthesized
    history records. Keys and pairing material stay with the transport.
    """

    me: Contact | None = None

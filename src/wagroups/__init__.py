"""
wagroups: asyncio group management for the WhatsApp Web binary node protocol.

Builds `w:g2` group queries, correlates them with their responses and decodes
group metadata into immutable snapshots. Encoding, encryption and the
connection itself are left to the transport that supplies `query()`.
"""

from __future__ import annotations

from .exceptions import DecodeError, GroupQueryError, GroupsError, TransportError
from .groups import GroupMetadata, GroupsSocket, extract_group_metadata
from .socket import IqCorrelator

__all__ = [
    "DecodeError",
    "GroupMetadata",
    "GroupQueryError",
    "GroupsError",
    "GroupsSocket",
    "IqCorrelator",
    "TransportError",
    "extract_group_metadata",
]

__version__ = "0.1.0"

from __future__ import annotations

from .metadata import extract_group_metadata, extract_participants_update, extract_sub_groups
from .socket import GroupsSocket
from .types import (
    Community,
    GroupInviteMessage,
    GroupMetadata,
    GroupParticipant,
    GroupSetting,
    MessageKey,
    ParticipantAction,
    ParticipantUpdateResult,
    StubMessage,
    SubGroup,
    WAMessageStubType,
)

__all__ = [
    "Community",
    "GroupInviteMessage",
    "GroupMetadata",
    "GroupParticipant",
    "GroupSetting",
    "GroupsSocket",
    "MessageKey",
    "ParticipantAction",
    "ParticipantUpdateResult",
    "StubMessage",
    "SubGroup",
    "WAMessageStubType",
    "extract_group_metadata",
    "extract_participants_update",
    "extract_sub_groups",
]

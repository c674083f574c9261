from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Literal, TypeAlias

ParticipantAction: TypeAlias = Literal["add", "remove", "promote", "demote"]
GroupSetting: TypeAlias = Literal["announcement", "not_announcement", "locked", "unlocked"]
QueryType: TypeAlias = Literal["get", "set"]


class WAMessageStubType(IntEnum):
    # Values match `WebMessageInfo.StubType` in the WhatsApp protobuf schema.
    GROUP_PARTICIPANT_ADD = 27


@dataclass(frozen=True, slots=True)
class GroupParticipant:
    id: str
    admin: str | None = None  # "admin" | "superadmin" | None
    lid: str | None = None


@dataclass(frozen=True, slots=True)
class Community:
    parent: bool = False
    incognito: bool = False
    allow_non_admin_sub_group_creation: bool = False
    membership_approval_mode: str | None = None
    linked_parent_id: str | None = None
    default: bool = False


@dataclass(frozen=True, slots=True)
class GroupMetadata:
    """
    Snapshot of a group as returned by the server.

    Built fresh from each response; `size` is always `len(participants)`.
    """

    id: str
    subject: str = ""
    subject_owner: str | None = None
    subject_time: int | None = None
    size: int = 0
    creation: int | None = None
    owner: str | None = None
    desc: str | None = None
    desc_id: str | None = None
    community: Community | None = None
    member_add_mode: str | None = None
    restrict: bool = False
    announce: bool = False
    join_approval_mode: bool = False
    participants: tuple[GroupParticipant, ...] = ()
    ephemeral_duration: int | None = None


@dataclass(frozen=True, slots=True)
class SubGroup:
    id: str
    subject: str | None = None
    subject_time: int | None = None
    size: int | None = None
    default: bool = False


@dataclass(frozen=True, slots=True)
class ParticipantUpdateResult:
    jid: str
    status: str


@dataclass(frozen=True, slots=True)
class MessageKey:
    remote_jid: str
    id: str | None = None
    from_me: bool = False
    participant: str | None = None


@dataclass(frozen=True, slots=True)
class GroupInviteMessage:
    group_jid: str
    invite_code: str
    invite_expiration: int
    group_name: str | None = None
    caption: str | None = None


@dataclass(frozen=True, slots=True)
class StubMessage:
    """A locally synthesized history record for a group system event."""

    key: MessageKey
    message_stub_type: WAMessageStubType
    message_timestamp: int
    participant: str | None = None
    message_stub_parameters: tuple[str, ...] = field(default_factory=tuple)

"""
Request builders for `w:g2` group queries.

Every function here is pure: it returns the child node(s) that go inside the
`iq` envelope, or the envelope itself (`build_group_iq`). Free text (subject,
description body) is carried as UTF-8 byte content, never as an attribute.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..wabinary.types import BinaryNode
from .types import GroupSetting, ParticipantAction, QueryType

GROUPS_XMLNS = "w:g2"


def build_group_iq(jid: str, type: QueryType, content: list[BinaryNode]) -> BinaryNode:
    return BinaryNode(
        tag="iq",
        attrs={"type": type, "xmlns": GROUPS_XMLNS, "to": jid},
        content=content,
    )


def participant_nodes(jids: Iterable[str]) -> list[BinaryNode]:
    return [BinaryNode(tag="participant", attrs={"jid": jid}) for jid in jids]


def metadata_query_node() -> BinaryNode:
    return BinaryNode(tag="query", attrs={"request": "interactive"})


def create_group_node(subject: str, participants: Iterable[str], *, key: str) -> BinaryNode:
    return BinaryNode(
        tag="create",
        attrs={"subject": subject, "key": key},
        content=participant_nodes(participants),
    )


def create_community_node(subject: str) -> BinaryNode:
    return BinaryNode(
        tag="create",
        attrs={"subject": subject},
        content=[
            BinaryNode(
                tag="parent",
                attrs={"default_membership_approval_mode": "request_required"},
            )
        ],
    )


def sub_groups_node() -> BinaryNode:
    return BinaryNode(tag="sub_groups", attrs={})


def delete_parent_node() -> BinaryNode:
    return BinaryNode(tag="delete_parent", attrs={})


def leave_node(group_id: str) -> BinaryNode:
    return BinaryNode(
        tag="leave",
        attrs={},
        content=[BinaryNode(tag="group", attrs={"id": group_id})],
    )


def subject_node(subject: str) -> BinaryNode:
    return BinaryNode(tag="subject", attrs={}, content=subject.encode("utf-8"))


def participants_update_node(action: ParticipantAction, participants: Iterable[str]) -> BinaryNode:
    return BinaryNode(tag=action, attrs={}, content=participant_nodes(participants))


def description_node(description: str | None, *, new_id: str, prev: str | None) -> BinaryNode:
    """
    Build a versioned description update.

    `prev` is the `desc_id` currently on the server; the server rejects edits
    whose `prev` is stale. An empty/None description deletes it.
    """

    attrs: dict[str, str] = {"id": new_id} if description else {"delete": "true"}
    if prev:
        attrs["prev"] = prev
    content: list[BinaryNode] | None = None
    if description:
        content = [BinaryNode(tag="body", attrs={}, content=description.encode("utf-8"))]
    return BinaryNode(tag="description", attrs=attrs, content=content)


def invite_node(code: str | None = None) -> BinaryNode:
    return BinaryNode(tag="invite", attrs={"code": code} if code else {})


def accept_invite_v4_node(*, code: str, expiration: int, admin: str) -> BinaryNode:
    return BinaryNode(
        tag="accept",
        attrs={"code": code, "expiration": str(expiration), "admin": admin},
    )


def ephemeral_node(expiration: int) -> BinaryNode:
    if expiration and expiration > 0:
        return BinaryNode(tag="ephemeral", attrs={"expiration": str(expiration)})
    return BinaryNode(tag="not_ephemeral", attrs={})


def setting_node(setting: GroupSetting) -> BinaryNode:
    return BinaryNode(tag=setting, attrs={})


def participating_node() -> BinaryNode:
    return BinaryNode(
        tag="participating",
        attrs={},
        content=[
            BinaryNode(tag="participants", attrs={}),
            BinaryNode(tag="description", attrs={}),
        ],
    )

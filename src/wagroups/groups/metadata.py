"""
Decoders for group query responses.

Every optional child is looked up independently: a missing child leaves its
field at the default. Only a missing `<group/>` (or group `id`) in a response
that should carry one is a hard `DecodeError`.
"""

from __future__ import annotations

from ..exceptions import DecodeError
from ..wabinary.jid import G_US, jid_encode, jid_normalized_user
from ..wabinary.nodes import (
    get_binary_node_child,
    get_binary_node_child_string,
    get_binary_node_children,
    has_binary_node_child,
)
from ..wabinary.types import BinaryNode
from .types import (
    Community,
    GroupMetadata,
    GroupParticipant,
    ParticipantAction,
    ParticipantUpdateResult,
    SubGroup,
)

# Policy flags are signalled by the presence of an (empty) child node, never
# by an attribute value: field name -> child tag.
PRESENCE_FLAGS: dict[str, str] = {
    "restrict": "locked",
    "announce": "announcement",
    "join_approval_mode": "membership_approval_mode",
}

PARTICIPANT_OK_STATUS = "200"


def _int_attr(node: BinaryNode, key: str) -> int | None:
    raw = node.attrs.get(key)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise DecodeError(f"<{node.tag} {key}={raw!r}> is not an integer") from e


def _text_child(node: BinaryNode, tag: str) -> str | None:
    try:
        return get_binary_node_child_string(node, tag)
    except UnicodeDecodeError as e:
        raise DecodeError(f"<{node.tag}><{tag}/> is not valid UTF-8") from e


def _presence_flags(group: BinaryNode) -> dict[str, bool]:
    return {name: has_binary_node_child(group, tag) for name, tag in PRESENCE_FLAGS.items()}


def _normalize_group_id(raw: str) -> str:
    return raw if "@" in raw else jid_encode(raw, "g.us")


def _extract_community(group: BinaryNode) -> Community | None:
    parent = get_binary_node_child(group, "parent")
    linked_parent = get_binary_node_child(group, "linked_parent")
    if parent is None and linked_parent is None:
        return None
    return Community(
        parent=parent is not None,
        incognito=has_binary_node_child(group, "incognito"),
        allow_non_admin_sub_group_creation=has_binary_node_child(
            group, "allow_non_admin_sub_group_creation"
        ),
        # Only the parent node carries the approval mode.
        membership_approval_mode=(
            parent.attrs.get("default_membership_approval_mode") if parent is not None else None
        ),
        linked_parent_id=linked_parent.attrs.get("jid") if linked_parent is not None else None,
        default=has_binary_node_child(group, "default_sub_group"),
    )


def _extract_participants(group: BinaryNode) -> tuple[GroupParticipant, ...]:
    return tuple(
        GroupParticipant(
            id=p.attrs.get("jid", ""),
            admin=p.attrs.get("type") or None,
            lid=p.attrs.get("lid"),
        )
        for p in get_binary_node_children(group, "participant")
    )


def extract_group_metadata(result: BinaryNode) -> GroupMetadata:
    """Decode the `<group/>` child of a response into `GroupMetadata`."""

    group = get_binary_node_child(result, "group")
    if group is None:
        raise DecodeError(f"<{result.tag}> response missing <group/>")
    raw_id = group.attrs.get("id")
    if not raw_id:
        raise DecodeError("<group/> missing id")

    desc: str | None = None
    desc_id: str | None = None
    desc_child = get_binary_node_child(group, "description")
    if desc_child is not None:
        desc = _text_child(desc_child, "body")
        desc_id = desc_child.attrs.get("id")

    eph_node = get_binary_node_child(group, "ephemeral")
    ephemeral_duration = _int_attr(eph_node, "expiration") if eph_node is not None else None

    creator = group.attrs.get("creator")
    participants = _extract_participants(group)

    return GroupMetadata(
        id=_normalize_group_id(raw_id),
        subject=group.attrs.get("subject", ""),
        subject_owner=group.attrs.get("s_o"),
        subject_time=_int_attr(group, "s_t"),
        size=len(participants),
        creation=_int_attr(group, "creation"),
        owner=jid_normalized_user(creator) if creator else None,
        desc=desc,
        desc_id=desc_id,
        community=_extract_community(group),
        member_add_mode=_text_child(group, "member_add_mode"),
        participants=participants,
        ephemeral_duration=ephemeral_duration,
        **_presence_flags(group),
    )


def extract_sub_groups(result: BinaryNode) -> list[SubGroup]:
    sub_groups = get_binary_node_child(result, "sub_groups")
    out: list[SubGroup] = []
    for group in get_binary_node_children(sub_groups, "group"):
        raw_id = group.attrs.get("id")
        if not raw_id:
            raise DecodeError("<sub_groups/> entry missing id")
        out.append(
            SubGroup(
                id=raw_id if "@" in raw_id else f"{raw_id}{G_US}",
                subject=group.attrs.get("subject"),
                subject_time=_int_attr(group, "s_t"),
                size=_int_attr(group, "size"),
                default=has_binary_node_child(group, "default_sub_group"),
            )
        )
    return out


def extract_participants_update(
    result: BinaryNode, action: ParticipantAction
) -> list[ParticipantUpdateResult]:
    """
    Per-participant outcome of an add/remove/promote/demote.

    Participants carrying an `error` attribute failed with that code; the rest
    succeeded. The call as a whole does not fail on partial rejection.
    """

    node = get_binary_node_child(result, action)
    if node is None:
        raise DecodeError(f"<{result.tag}> response missing <{action}/>")
    return [
        ParticipantUpdateResult(
            jid=p.attrs.get("jid", ""),
            status=p.attrs.get("error") or PARTICIPANT_OK_STATUS,
        )
        for p in get_binary_node_children(node, "participant")
    ]

from __future__ import annotations

import pytest

from wagroups.exceptions import DecodeError
from wagroups.groups import (
    Community,
    GroupParticipant,
    ParticipantUpdateResult,
    extract_group_metadata,
    extract_participants_update,
    extract_sub_groups,
)
from wagroups.groups import nodes
from wagroups.wabinary import BinaryNode


def _result(group: BinaryNode) -> BinaryNode:
    return BinaryNode(tag="iq", attrs={"type": "result", "from": "g.us"}, content=[group])


def _group(*children: BinaryNode, **attrs: str) -> BinaryNode:
    base = {"id": "120363000000000001", "subject": "Team", "s_t": "1700000000"}
    base.update(attrs)
    return BinaryNode(tag="group", attrs=base, content=list(children))


def _participant(jid: str, **attrs: str) -> BinaryNode:
    return BinaryNode(tag="participant", attrs={"jid": jid, **attrs})


def test_full_group_decodes() -> None:
    group = _group(
        BinaryNode(
            tag="description",
            attrs={"id": "DESC1"},
            content=[BinaryNode(tag="body", attrs={}, content=b"rules & <stuff>")],
        ),
        BinaryNode(tag="member_add_mode", attrs={}, content=b"admin_add"),
        BinaryNode(tag="announcement", attrs={}),
        BinaryNode(tag="ephemeral", attrs={"expiration": "604800"}),
        _participant("1@s.whatsapp.net", type="superadmin"),
        _participant("2@s.whatsapp.net", type="admin", lid="22@lid"),
        _participant("3@s.whatsapp.net"),
        creation="1690000000",
        creator="1:7@s.whatsapp.net",
        s_o="2@s.whatsapp.net",
    )
    meta = extract_group_metadata(_result(group))

    assert meta.id == "120363000000000001@g.us"
    assert meta.subject == "Team"
    assert meta.subject_owner == "2@s.whatsapp.net"
    assert meta.subject_time == 1700000000
    assert meta.creation == 1690000000
    assert meta.owner == "1@s.whatsapp.net"
    assert meta.desc == "rules & <stuff>"
    assert meta.desc_id == "DESC1"
    assert meta.member_add_mode == "admin_add"
    assert meta.announce is True
    assert meta.restrict is False
    assert meta.join_approval_mode is False
    assert meta.community is None
    assert meta.ephemeral_duration == 604800
    assert meta.size == 3
    assert meta.participants == (
        GroupParticipant(id="1@s.whatsapp.net", admin="superadmin"),
        GroupParticipant(id="2@s.whatsapp.net", admin="admin", lid="22@lid"),
        GroupParticipant(id="3@s.whatsapp.net", admin=None),
    )


def test_create_then_decode_keeps_participants_in_order() -> None:
    jids = ["a@s.whatsapp.net", "b@s.whatsapp.net", "c@s.whatsapp.net"]
    request = nodes.create_group_node("Trio", jids, key="K")
    assert isinstance(request.content, list)

    # Synthetic server answer echoing the requested participants.
    response = _result(_group(*[_participant(p.attrs["jid"]) for p in request.content]))
    meta = extract_group_metadata(response)
    assert meta.size == 3
    assert [p.id for p in meta.participants] == jids


def test_size_ignores_transmitted_size_attribute() -> None:
    meta = extract_group_metadata(_result(_group(_participant("1@s.whatsapp.net"), size="40")))
    assert meta.size == 1


def test_decode_is_idempotent() -> None:
    response = _result(
        _group(
            BinaryNode(tag="locked", attrs={}),
            BinaryNode(tag="parent", attrs={"default_membership_approval_mode": "request_required"}),
            _participant("1@s.whatsapp.net", type="admin"),
        )
    )
    assert extract_group_metadata(response) == extract_group_metadata(response)


@pytest.mark.parametrize(
    ("tag", "field"),
    [
        ("locked", "restrict"),
        ("announcement", "announce"),
        ("membership_approval_mode", "join_approval_mode"),
    ],
)
def test_policy_flags_are_presence_only(tag: str, field: str) -> None:
    present = extract_group_metadata(_result(_group(BinaryNode(tag=tag, attrs={}))))
    absent = extract_group_metadata(_result(_group()))
    assert getattr(present, field) is True
    assert getattr(absent, field) is False


def test_linked_parent_only_community() -> None:
    group = _group(
        BinaryNode(tag="linked_parent", attrs={"jid": "120363999@g.us"}),
        BinaryNode(tag="default_sub_group", attrs={}),
    )
    meta = extract_group_metadata(_result(group))
    assert meta.community == Community(
        parent=False,
        incognito=False,
        allow_non_admin_sub_group_creation=False,
        membership_approval_mode=None,
        linked_parent_id="120363999@g.us",
        default=True,
    )


def test_parent_community() -> None:
    group = _group(
        BinaryNode(tag="parent", attrs={"default_membership_approval_mode": "request_required"}),
        BinaryNode(tag="incognito", attrs={}),
        BinaryNode(tag="allow_non_admin_sub_group_creation", attrs={}),
    )
    community = extract_group_metadata(_result(group)).community
    assert community is not None
    assert community.parent is True
    assert community.incognito is True
    assert community.allow_non_admin_sub_group_creation is True
    assert community.membership_approval_mode == "request_required"
    assert community.linked_parent_id is None


def test_ephemeral_unset_is_distinct_from_zero() -> None:
    assert extract_group_metadata(_result(_group())).ephemeral_duration is None

    day = _group(BinaryNode(tag="ephemeral", attrs={"expiration": "86400"}))
    assert extract_group_metadata(_result(day)).ephemeral_duration == 86400

    zero = _group(BinaryNode(tag="ephemeral", attrs={"expiration": "0"}))
    assert extract_group_metadata(_result(zero)).ephemeral_duration == 0


def test_qualified_id_is_kept_verbatim() -> None:
    meta = extract_group_metadata(_result(_group(id="555-777@g.us")))
    assert meta.id == "555-777@g.us"


def test_missing_optional_children_use_defaults() -> None:
    meta = extract_group_metadata(
        _result(BinaryNode(tag="group", attrs={"id": "1"}, content=None))
    )
    assert meta.id == "1@g.us"
    assert meta.subject == ""
    assert meta.subject_time is None
    assert meta.owner is None
    assert meta.desc is None
    assert meta.desc_id is None
    assert meta.member_add_mode is None
    assert meta.participants == ()
    assert meta.size == 0


def test_missing_group_child_is_decode_error() -> None:
    with pytest.raises(DecodeError):
        extract_group_metadata(BinaryNode(tag="iq", attrs={"type": "result"}))


def test_missing_group_id_is_decode_error() -> None:
    with pytest.raises(DecodeError):
        extract_group_metadata(_result(BinaryNode(tag="group", attrs={"subject": "x"})))


def test_non_numeric_timestamp_is_decode_error() -> None:
    with pytest.raises(DecodeError):
        extract_group_metadata(_result(_group(s_t="yesterday")))


def test_sub_groups_summary() -> None:
    result = BinaryNode(
        tag="iq",
        attrs={"type": "result"},
        content=[
            BinaryNode(
                tag="sub_groups",
                attrs={},
                content=[
                    BinaryNode(
                        tag="group",
                        attrs={"id": "111", "subject": "General", "s_t": "1700000000", "size": "12"},
                        content=[BinaryNode(tag="default_sub_group", attrs={})],
                    ),
                    BinaryNode(tag="group", attrs={"id": "222", "subject": "Events"}),
                ],
            )
        ],
    )
    subs = extract_sub_groups(result)
    assert [s.id for s in subs] == ["111@g.us", "222@g.us"]
    assert subs[0].size == 12
    assert subs[0].subject_time == 1700000000
    assert subs[0].default is True
    assert subs[1].size is None
    assert subs[1].default is False


def test_participants_update_reports_partial_failure() -> None:
    result = BinaryNode(
        tag="iq",
        attrs={"type": "result"},
        content=[
            BinaryNode(
                tag="add",
                attrs={},
                content=[
                    _participant("A@s.whatsapp.net", error="403"),
                    _participant("B@s.whatsapp.net"),
                ],
            )
        ],
    )
    assert extract_participants_update(result, "add") == [
        ParticipantUpdateResult(jid="A@s.whatsapp.net", status="403"),
        ParticipantUpdateResult(jid="B@s.whatsapp.net", status="200"),
    ]


def test_participants_update_missing_action_child() -> None:
    with pytest.raises(DecodeError):
        extract_participants_update(BinaryNode(tag="iq", attrs={}, content=[]), "remove")


@pytest.mark.parametrize(
    "bad_child",
    [
        BinaryNode(
            tag="description",
            attrs={"id": "D"},
            content=[BinaryNode(tag="body", attrs={}, content=b"\xff\xfe bad")],
        ),
        BinaryNode(tag="member_add_mode", attrs={}, content=b"\xc3"),
    ],
)
def test_invalid_utf8_text_is_decode_error(bad_child: BinaryNode) -> None:
    with pytest.raises(DecodeError) as ei:
        extract_group_metadata(_result(_group(bad_child)))
    assert isinstance(ei.value.__cause__, UnicodeDecodeError)

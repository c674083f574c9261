from __future__ import annotations

from wagroups.groups import nodes
from wagroups.wabinary import BinaryNode


def _tags(content: object) -> list[str]:
    assert isinstance(content, list)
    return [c.tag for c in content if isinstance(c, BinaryNode)]


def test_group_iq_envelope() -> None:
    iq = nodes.build_group_iq("123@g.us", "get", [nodes.metadata_query_node()])
    assert iq.tag == "iq"
    assert iq.attrs == {"type": "get", "xmlns": "w:g2", "to": "123@g.us"}
    assert _tags(iq.content) == ["query"]
    assert isinstance(iq.content, list)
    assert iq.content[0].attrs == {"request": "interactive"}


def test_create_group_keeps_participant_order() -> None:
    node = nodes.create_group_node("Team", ["a@s.whatsapp.net", "b@s.whatsapp.net"], key="K1")
    assert node.attrs == {"subject": "Team", "key": "K1"}
    assert isinstance(node.content, list)
    assert [p.tag for p in node.content] == ["participant", "participant"]
    assert [p.attrs["jid"] for p in node.content] == ["a@s.whatsapp.net", "b@s.whatsapp.net"]


def test_create_community_has_parent() -> None:
    node = nodes.create_community_node("Neighbours")
    assert node.attrs == {"subject": "Neighbours"}
    assert isinstance(node.content, list)
    assert node.content[0].tag == "parent"
    assert node.content[0].attrs == {"default_membership_approval_mode": "request_required"}


def test_subject_is_byte_content() -> None:
    node = nodes.subject_node('a "quoted" <subject>')
    assert node.attrs == {}
    assert node.content == 'a "quoted" <subject>'.encode()


def test_description_update_references_previous_version() -> None:
    node = nodes.description_node("hello", new_id="NEW", prev="OLD")
    assert node.attrs == {"id": "NEW", "prev": "OLD"}
    assert isinstance(node.content, list)
    assert node.content[0].tag == "body"
    assert node.content[0].content == b"hello"


def test_description_first_version_has_no_prev() -> None:
    node = nodes.description_node("hello", new_id="NEW", prev=None)
    assert node.attrs == {"id": "NEW"}


def test_description_delete_has_no_content() -> None:
    node = nodes.description_node(None, new_id="NEW", prev="OLD")
    assert node.attrs == {"delete": "true", "prev": "OLD"}
    assert node.content is None


def test_ephemeral_toggle() -> None:
    on = nodes.ephemeral_node(86400)
    assert on.tag == "ephemeral"
    assert on.attrs == {"expiration": "86400"}

    off = nodes.ephemeral_node(0)
    assert off.tag == "not_ephemeral"
    assert off.attrs == {}


def test_leave_and_invite_nodes() -> None:
    leave = nodes.leave_node("123@g.us")
    assert _tags(leave.content) == ["group"]
    assert isinstance(leave.content, list)
    assert leave.content[0].attrs == {"id": "123@g.us"}

    assert nodes.invite_node().attrs == {}
    assert nodes.invite_node("CODE").attrs == {"code": "CODE"}

    accept = nodes.accept_invite_v4_node(code="C", expiration=1700000000, admin="9@s.whatsapp.net")
    assert accept.tag == "accept"
    assert accept.attrs == {"code": "C", "expiration": "1700000000", "admin": "9@s.whatsapp.net"}


def test_participating_query() -> None:
    node = nodes.participating_node()
    assert _tags(node.content) == ["participants", "description"]

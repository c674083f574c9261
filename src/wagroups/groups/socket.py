from __future__ import annotations

import dataclasses
import logging
from collections.abc import Awaitable, Callable

from ..auth.state import AuthenticationState
from ..config import GroupsConfig, MessageUpsertType
from ..exceptions import DecodeError
from ..util.asyncio import SerialQueue
from ..util.events import AsyncEventEmitter
from ..util.ids import generate_message_id, unix_timestamp_seconds
from ..wabinary.jid import G_US
from ..wabinary.nodes import assert_node_error_free, get_binary_node_child, get_binary_node_children
from ..wabinary.types import BinaryNode
from . import nodes
from .metadata import extract_group_metadata, extract_participants_update, extract_sub_groups
from .types import (
    GroupInviteMessage,
    GroupMetadata,
    GroupSetting,
    MessageKey,
    ParticipantAction,
    ParticipantUpdateResult,
    QueryType,
    StubMessage,
    SubGroup,
    WAMessageStubType,
)

logger = logging.getLogger(__name__)

QueryFn = Callable[[BinaryNode], Awaitable[BinaryNode]]
UpsertMessageFn = Callable[[StubMessage, MessageUpsertType], Awaitable[None]]


class GroupsSocket:
    """
    Group management on top of an `iq` query primitive.

    `query` sends a request node and returns its correlated response (for
    example `IqCorrelator.query`). Local history side effects go through
    `upsert_message` when given, otherwise they are published as
    `messages.upsert` on `events`.
    """

    def __init__(
        self,
        *,
        query: QueryFn,
        auth: AuthenticationState,
        events: AsyncEventEmitter | None = None,
        upsert_message: UpsertMessageFn | None = None,
        config: GroupsConfig | None = None,
    ) -> None:
        self._query = query
        self.auth = auth
        self.events = events or AsyncEventEmitter()
        self.config = config or GroupsConfig()
        self._upsert_message = upsert_message or self._emit_upsert

        # Invite acceptance mutates local history; calls run one at a time in call order.
        self._accept_queue = SerialQueue(name="wagroups.group_accept_invite_v4")

    async def close(self) -> None:
        await self._accept_queue.close()

    async def _emit_upsert(self, record: StubMessage, mode: MessageUpsertType) -> None:
        await self.events.emit("messages.upsert", {"messages": [record], "type": mode})

    async def group_query(self, jid: str, type: QueryType, content: list[BinaryNode]) -> BinaryNode:
        node = nodes.build_group_iq(jid, type, content)
        logger.debug("group query %s %s -> %s", type, content[0].tag if content else "-", jid)
        result = await self._query(node)
        assert_node_error_free(result)
        return result

    async def group_metadata(self, jid: str) -> GroupMetadata:
        result = await self.group_query(jid, "get", [nodes.metadata_query_node()])
        return extract_group_metadata(result)

    async def group_create(self, subject: str, participants: list[str]) -> GroupMetadata:
        result = await self.group_query(
            G_US,
            "set",
            [nodes.create_group_node(subject, participants, key=generate_message_id())],
        )
        return extract_group_metadata(result)

    async def community_create(self, subject: str) -> GroupMetadata:
        result = await self.group_query(G_US, "set", [nodes.create_community_node(subject)])
        return extract_group_metadata(result)

    async def community_get_sub_groups(self, jid: str) -> list[SubGroup]:
        result = await self.group_query(jid, "get", [nodes.sub_groups_node()])
        return extract_sub_groups(result)

    async def community_deactivate(self, jid: str) -> str | None:
        result = await self.group_query(jid, "set", [nodes.delete_parent_node()])
        deleted = get_binary_node_child(result, "delete")
        return deleted.attrs.get("reason") if deleted is not None else None

    async def group_leave(self, jid: str) -> None:
        await self.group_query(G_US, "set", [nodes.leave_node(jid)])

    async def group_update_subject(self, jid: str, subject: str) -> None:
        await self.group_query(jid, "set", [nodes.subject_node(subject)])

    async def group_participants_update(
        self, jid: str, participants: list[str], action: ParticipantAction
    ) -> list[ParticipantUpdateResult]:
        result = await self.group_query(
            jid, "set", [nodes.participants_update_node(action, participants)]
        )
        return extract_participants_update(result, action)

    async def group_update_description(self, jid: str, description: str | None = None) -> None:
        """
        Set or (with no description) delete the group description.

        Reads the current `desc_id` first so the update references the version
        it replaces.
        """

        metadata = await self.group_metadata(jid)
        await self.group_query(
            jid,
            "set",
            [
                nodes.description_node(
                    description, new_id=generate_message_id(), prev=metadata.desc_id
                )
            ],
        )

    async def group_invite_code(self, jid: str) -> str | None:
        result = await self.group_query(jid, "get", [nodes.invite_node()])
        invite = get_binary_node_child(result, "invite")
        return invite.attrs.get("code") if invite is not None else None

    async def group_revoke_invite(self, jid: str) -> str | None:
        result = await self.group_query(jid, "set", [nodes.invite_node()])
        invite = get_binary_node_child(result, "invite")
        return invite.attrs.get("code") if invite is not None else None

    async def group_accept_invite(self, code: str) -> str | None:
        result = await self.group_query(G_US, "set", [nodes.invite_node(code)])
        group = get_binary_node_child(result, "group")
        return group.attrs.get("jid") if group is not None else None

    async def group_get_invite_info(self, code: str) -> GroupMetadata:
        result = await self.group_query(G_US, "get", [nodes.invite_node(code)])
        return extract_group_metadata(result)

    async def group_accept_invite_v4(
        self, key: str | MessageKey, invite_message: GroupInviteMessage
    ) -> str | None:
        """
        Accept a `GroupInviteMessage`.

        `key` is the key of the invite message, or just the JID of whoever sent
        it. With a full key (one that has an `id`) the invite is also marked
        expired locally and a "participant added" record is upserted.
        """

        return await self._accept_queue.run(
            lambda: self._accept_invite_v4(key, invite_message)
        )

    async def _accept_invite_v4(
        self, key: str | MessageKey, invite_message: GroupInviteMessage
    ) -> str | None:
        if isinstance(key, str):
            key = MessageKey(remote_jid=key)

        result = await self.group_query(
            invite_message.group_jid,
            "set",
            [
                nodes.accept_invite_v4_node(
                    code=invite_message.invite_code,
                    expiration=invite_message.invite_expiration,
                    admin=key.remote_jid,
                )
            ],
        )

        if key.id:
            # Local bookkeeping only: failures here never undo the accepted join.
            try:
                await self._expire_invite_message(key, invite_message)
            except Exception:
                logger.warning("could not expire invite message %s", key.id, exc_info=True)
            try:
                await self._upsert_participant_added(key, invite_message.group_jid)
            except Exception:
                logger.warning(
                    "could not record join of %s", invite_message.group_jid, exc_info=True
                )

        return result.attrs.get("from")

    async def _expire_invite_message(
        self, key: MessageKey, invite_message: GroupInviteMessage
    ) -> None:
        expired = dataclasses.replace(invite_message, invite_expiration=0, invite_code="")
        await self.events.emit(
            "messages.update",
            [{"key": key, "update": {"message": {"group_invite_message": expired}}}],
        )

    async def _upsert_participant_added(self, key: MessageKey, group_jid: str) -> None:
        record = StubMessage(
            key=MessageKey(
                remote_jid=group_jid,
                id=generate_message_id(),
                from_me=False,
                participant=key.remote_jid,
            ),
            message_stub_type=WAMessageStubType.GROUP_PARTICIPANT_ADD,
            message_stub_parameters=(self.auth.me_id(),),
            participant=key.remote_jid,
            message_timestamp=unix_timestamp_seconds(),
        )
        await self._upsert_message(record, self.config.invite_upsert_type)

    async def group_toggle_ephemeral(self, jid: str, ephemeral_expiration: int) -> None:
        await self.group_query(jid, "set", [nodes.ephemeral_node(ephemeral_expiration)])

    async def group_setting_update(self, jid: str, setting: GroupSetting) -> None:
        await self.group_query(jid, "set", [nodes.setting_node(setting)])

    async def group_fetch_all_participating(self) -> dict[str, GroupMetadata]:
        """
        Fetch metadata for every group this account participates in.

        Each `<group/>` is decoded on its own; one that fails to decode is
        logged and skipped rather than failing the whole batch.
        """

        result = await self.group_query(G_US, "get", [nodes.participating_node()])
        data: dict[str, GroupMetadata] = {}
        groups = get_binary_node_child(result, "groups")
        for group_node in get_binary_node_children(groups, "group"):
            try:
                meta = extract_group_metadata(
                    BinaryNode(tag="result", attrs={}, content=[group_node])
                )
            except DecodeError as e:
                logger.warning("skipping undecodable group %r: %s", group_node.attrs.get("id"), e)
                continue
            data[meta.id] = meta
        return data

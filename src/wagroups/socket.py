from __future__ import annotations

import asyncio
import datetime as dt
import logging
from collections.abc import Awaitable, Callable

from .config import GroupsConfig
from .exceptions import TransportError
from .util.events import AsyncEventEmitter
from .wabinary.types import BinaryNode

logger = logging.getLogger(__name__)

DEF_TAG_PREFIX = "tag:"

SendNode = Callable[[BinaryNode], Awaitable[None]]


class IqCorrelator:
    """
    Request/response correlation for `iq` stanzas.

    Outgoing queries are stamped with a unique `id`; the caller's transport
    feeds every incoming node to `dispatch()`, and the node whose `id` matches
    a pending query resolves it. Encoding, encryption and connection handling
    belong to `send_node` and whatever drives `dispatch()`.
    """

    def __init__(
        self,
        send_node: SendNode,
        *,
        events: AsyncEventEmitter | None = None,
        config: GroupsConfig | None = None,
    ) -> None:
        self._send_node = send_node
        self.events = events or AsyncEventEmitter()
        self.config = config or GroupsConfig()

        self._epoch = 1
        self._uq_tag = f"{int(dt.datetime.now().timestamp())}-"

    def next_tag(self) -> str:
        self._epoch += 1
        return f"{self._uq_tag}{self._epoch}"

    async def query(self, node: BinaryNode, *, timeout_s: float | None = None) -> BinaryNode:
        if "id" not in node.attrs:
            node.attrs["id"] = self.next_tag()
        msg_id = node.attrs["id"]

        # Register waiter before sending to avoid missing fast responses.
        event = f"{DEF_TAG_PREFIX}{msg_id}"
        fut = self.events.wait_for_future(event)
        if timeout_s is None:
            timeout_s = self.config.query_timeout_s
        try:
            await self._send_node(node)
            logger.debug("sent %s id=%s to=%s", node.tag, msg_id, node.attrs.get("to"))
            res = await asyncio.wait_for(fut, timeout=timeout_s)
        finally:
            self.events.discard_waiter(event, fut)
        if not isinstance(res, BinaryNode):
            raise TransportError(f"unexpected query response type: {type(res).__name__}")
        return res

    async def dispatch(self, node: BinaryNode) -> bool:
        """Route an incoming node to the pending query with the same `id`, if any."""

        msg_id = node.attrs.get("id")
        if not msg_id:
            return False
        return await self.events.emit(f"{DEF_TAG_PREFIX}{msg_id}", node)

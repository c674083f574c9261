from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

MessageUpsertType = Literal["notify", "append"]


@dataclass(slots=True)
class GroupsConfig:
    # Applies to `IqCorrelator.query`; `GroupsSocket` leaves timeouts to its transport.
    query_timeout_s: float = 60.0

    # Upsert mode for the "participant added" record synthesized after accepting an invite.
    invite_upsert_type: MessageUpsertType = "notify"

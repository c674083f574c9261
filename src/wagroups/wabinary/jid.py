from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias, cast

G_US = "@g.us"

JidServer: TypeAlias = Literal[
    "c.us",
    "g.us",
    "broadcast",
    "s.whatsapp.net",
    "call",
    "lid",
    "newsletter",
    "bot",
    "hosted",
    "hosted.lid",
]


@dataclass(frozen=True, slots=True)
class FullJid:
    user: str
    server: JidServer
    device: int | None = None
    agent: int | None = None


def jid_encode(
    user: str | int | None, server: JidServer, device: int | None = None, agent: int | None = None
) -> str:
    u = "" if user is None else str(user)
    # Agent/device are omitted when falsy (device=0 => no ":0").
    a = f"_{agent}" if agent else ""
    d = f":{device}" if device else ""
    return f"{u}{a}{d}@{server}"


def jid_decode(jid: str | None) -> FullJid | None:
    if not jid:
        return None
    sep = jid.find("@")
    if sep < 0:
        return None

    server = cast(JidServer, jid[sep + 1 :])
    user_agent, *device_parts = jid[:sep].split(":")
    user, *agent_parts = user_agent.split("_")

    device = int(device_parts[0]) if device_parts and device_parts[0].isdigit() else None
    agent = int(agent_parts[0]) if agent_parts and agent_parts[0].isdigit() else None
    return FullJid(user=user, server=server, device=device, agent=agent)


def jid_normalized_user(jid: str | None) -> str:
    """Strip device/agent parts and map the legacy `c.us` server to `s.whatsapp.net`."""

    decoded = jid_decode(jid)
    if not decoded:
        return ""
    server: JidServer = "s.whatsapp.net" if decoded.server == "c.us" else decoded.server
    return jid_encode(decoded.user, server)

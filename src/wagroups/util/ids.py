from __future__ import annotations

import secrets
import time

MESSAGE_ID_PREFIX = "3EB0"


def generate_message_id() -> str:
    """Random message/stanza id in the `3EB0...` shape used by web clients."""

    return MESSAGE_ID_PREFIX + secrets.token_hex(8).upper()


def unix_timestamp_seconds() -> int:
    return int(time.time())

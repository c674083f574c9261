from __future__ import annotations

from .creds import AuthenticationCreds, Contact
from .state import AuthenticationState

__all__ = [
    "AuthenticationCreds",
    "AuthenticationState",
    "Contact",
]

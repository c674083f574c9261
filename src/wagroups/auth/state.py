from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import AuthError
from .creds import AuthenticationCreds


@dataclass(slots=True)
class AuthenticationState:
    creds: AuthenticationCreds

    def me_id(self) -> str:
        me = self.creds.me
        if not me or not me.id:
            raise AuthError("not authenticated")
        return me.id

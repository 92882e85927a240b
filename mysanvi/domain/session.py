"""In-memory holder for the current SaGer credential"""

import logging
from typing import Optional

from mysanvi.domain.models import Credential


class SessionStore:
    """
    Single-owner session context threaded through the controllers.

    The credential is swapped as one immutable reference, so readers see
    either the previous pair or the new pair, never a mix. There is no
    expiry tracking: the access token is treated as valid until a request
    fails with an authorization error.
    """

    def __init__(self) -> None:
        self._credential: Optional[Credential] = None

    def save(self, access: str, refresh: str) -> None:
        if not access or not refresh:
            # A partial credential is not a valid state
            logging.warning("Discarding partial credential", extra={"step": "session_save"})
            self._credential = None
            return
        self._credential = Credential(access_token=access, refresh_token=refresh)

    def save_credential(self, credential: Credential) -> None:
        self.save(credential.access_token, credential.refresh_token)

    def clear(self) -> None:
        self._credential = None

    @property
    def refresh_token(self) -> Optional[str]:
        return self._credential.refresh_token if self._credential else None

    def get_auth_header(self) -> Optional[str]:
        """Authorization header value, or None when no session is held"""
        if self._credential is None:
            return None
        return f"Bearer {self._credential.access_token}"

    def has_valid_session(self) -> bool:
        credential = self._credential
        return bool(credential and credential.access_token and credential.refresh_token)

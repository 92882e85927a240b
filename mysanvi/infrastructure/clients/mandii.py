"""Mandii HTTP client - linked-account probe only"""

import httpx
from typing import Optional
from mysanvi.config import settings
from mysanvi.domain.models import BackendPresence
from mysanvi.infrastructure.clients.decoding import decode_mandii_profile, decode_presence
from mysanvi.infrastructure.clients.transport import BackendClient


class MandiiClient(BackendClient):
    """Client for the Mandii community backend"""

    backend = "mandii"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url or settings.mandii_api_base, timeout, transport)

    async def check_user_status(self, phone: str) -> BackendPresence:
        """
        Look up the community account for a phone number.

        Raises:
            NetworkError, HttpError: Backend unreachable or refused
            DecodeError: Body is not a presence record
        """
        data = await self._request("POST", "v1/check-user-status/", json={"phone": phone})
        try:
            return decode_presence(data, "mandii", decode_mandii_profile)
        except (KeyError, ValueError, TypeError) as e:
            raise self._decode_failed("user status", e) from e

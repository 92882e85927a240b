"""Cross-backend user status reconciliation"""

import logging
from typing import Protocol

from mysanvi.config import Settings
from mysanvi.domain.exceptions import DecodeError, HttpError, NetworkError
from mysanvi.domain.models import AuthResult, BackendPresence, MandiiProfile, SagerProfile, UserStatus
from mysanvi.infrastructure.observability.metrics import status_probe_fallback_counter


class PresenceProbe(Protocol):
    async def check_user_status(self, phone: str) -> BackendPresence: ...


def primary_presence_from_auth(auth: AuthResult) -> BackendPresence:
    """
    SaGer presence as implied by a successful verify/login.

    A credential was just issued, so the account exists; the profile is
    whatever the auth response carried.
    """
    profile = auth.user or SagerProfile(is_phone_verified=True)
    return BackendPresence(exists=True, profile=profile)


def initial_user_status(phone: str, auth: AuthResult) -> UserStatus:
    """Status handed to the dashboard right after login; Mandii not yet probed"""
    return UserStatus(
        phone=phone,
        sager=primary_presence_from_auth(auth),
        mandii=BackendPresence.unchecked(),
    )


async def probe_secondary(probe: PresenceProbe, phone: str) -> BackendPresence:
    """
    Mandii presence, failing open to absent.

    A down or misbehaving community backend must never block login, so
    transport, HTTP and decode failures all resolve to `exists=False`.
    """
    try:
        return await probe.check_user_status(phone)
    except (NetworkError, HttpError, DecodeError) as e:
        status_probe_fallback_counter.inc()
        logging.warning(
            f"Mandii status probe failed, treating as absent: {e}",
            extra={"step": "status_probe_fallback", "phone": phone},
        )
        return BackendPresence.absent()


async def resolve_user_status(
    phone: str,
    probe: PresenceProbe,
    primary: BackendPresence,
) -> UserStatus:
    """
    Combine both backends into one UserStatus.

    Flow:
    1. Probe Mandii's check-user-status endpoint
    2. Fall back to absent on any failure
    3. Reuse the SaGer presence from the auth flow (not re-queried)
    """
    secondary = await probe_secondary(probe, phone)
    return UserStatus(phone=phone, sager=primary, mandii=secondary)


def community_destination_url(status: UserStatus, config: Settings) -> str:
    """Owner's shop page when Mandii knows their shop, else the generic feed"""
    profile = status.mandii.profile
    if status.mandii.exists and isinstance(profile, MandiiProfile) and profile.shop_id is not None:
        return config.mandii_shop_url(profile.shop_id)
    return config.mandii_feed_url

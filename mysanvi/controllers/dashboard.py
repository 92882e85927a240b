"""Dashboard: routes the user to SaGer, Mandii or the sales ledger"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from mysanvi.config import Settings, settings as default_settings
from mysanvi.controllers.base import Controller
from mysanvi.domain.models import UserStatus
from mysanvi.domain.session import SessionStore
from mysanvi.domain.status import PresenceProbe, community_destination_url, resolve_user_status


class DestinationKind(str, enum.Enum):
    LOGIN = "login"
    SALES = "sales"
    SHOP_PROFILE = "shop_profile"
    COMMUNITY = "community"
    EXTERNAL = "external"


@dataclass(frozen=True)
class Destination:
    kind: DestinationKind
    url: Optional[str] = None


@dataclass(frozen=True)
class DashboardState:
    user_status: UserStatus
    sager_authenticated: bool = False
    resolving_mandii: bool = False


class DashboardController(Controller[DashboardState]):
    def __init__(
        self,
        user_status: UserStatus,
        session: SessionStore,
        mandii: PresenceProbe,
        config: Settings | None = None,
    ):
        super().__init__(DashboardState(user_status=user_status, sager_authenticated=session.has_valid_session()))
        self.session = session
        self.mandii = mandii
        self.config = config or default_settings

    def open_sager(self) -> Destination:
        """Shop profile with a valid session, else the public SaGer site"""
        authenticated = self.session.has_valid_session()
        self._update(sager_authenticated=authenticated)
        if authenticated:
            return Destination(DestinationKind.SHOP_PROFILE)
        return Destination(DestinationKind.EXTERNAL, url=self.config.sager_public_url)

    def open_sales(self) -> Destination:
        return Destination(DestinationKind.SALES)

    async def open_mandii(self) -> Destination:
        """
        Resolve Mandii presence and pick the community destination.

        Never fails: anything unexpected from the resolver routes to the
        generic feed.
        """
        current = self.state.user_status
        self._update(resolving_mandii=True)
        try:
            status = await resolve_user_status(current.phone, self.mandii, current.sager)
        except Exception as e:
            logging.error(f"User status resolution failed: {e}", extra={"step": "open_mandii"})
            self._update(resolving_mandii=False)
            return Destination(DestinationKind.COMMUNITY, url=self.config.mandii_feed_url)

        self._update(user_status=status, resolving_mandii=False)
        return Destination(DestinationKind.COMMUNITY, url=community_destination_url(status, self.config))

    def logout(self) -> Destination:
        self.session.clear()
        self._update(sager_authenticated=False)
        return Destination(DestinationKind.LOGIN)

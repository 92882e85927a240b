"""Application container: owns the session and clients, hands out controllers"""

import logging
from typing import List, Optional

import httpx

from mysanvi.config import Settings, settings as default_settings
from mysanvi.controllers.base import Controller
from mysanvi.controllers.community import CommunityWebViewController, PageRenderer
from mysanvi.controllers.dashboard import DashboardController
from mysanvi.controllers.login import LoginController
from mysanvi.controllers.sales import SalesLedgerController
from mysanvi.controllers.shop_profile import ShopProfileController
from mysanvi.domain.exceptions import AuthenticationRequired
from mysanvi.domain.models import UserStatus
from mysanvi.domain.session import SessionStore
from mysanvi.infrastructure.clients.mandii import MandiiClient
from mysanvi.infrastructure.clients.sager import SagerClient
from mysanvi.infrastructure.observability.logging import setup_logging


class MySanviApp:
    """
    Process-scoped service instance with an explicit init/teardown lifecycle.

    The session store lives here and is threaded into each controller, so
    there is no module-level session state.
    """

    def __init__(self, config: Settings, sager: SagerClient, mandii: MandiiClient):
        self.config = config
        self.session = SessionStore()
        self.sager = sager
        self.mandii = mandii
        self._controllers: List[Controller] = []

    async def __aenter__(self) -> "MySanviApp":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _track(self, controller: Controller) -> Controller:
        self._controllers = [c for c in self._controllers if not c.closed]
        self._controllers.append(controller)
        return controller

    # Controllers

    def login(self) -> LoginController:
        return self._track(LoginController(self.sager, self.session))

    def dashboard(self, user_status: UserStatus) -> DashboardController:
        return self._track(DashboardController(user_status, self.session, self.mandii, self.config))

    def sales_ledger(self) -> SalesLedgerController:
        return self._track(SalesLedgerController(self.sager, self.session))

    def shop_profile(self) -> ShopProfileController:
        return self._track(ShopProfileController(self.sager, self.session, self.config))

    def community(self, url: str, renderer: PageRenderer) -> CommunityWebViewController:
        return self._track(CommunityWebViewController(url, renderer, self.config))

    # Session lifecycle

    async def refresh_session(self) -> None:
        """
        Exchange the refresh token for a new access token.

        Raises:
            AuthenticationRequired: No session to refresh
            NetworkError, HttpError, DecodeError: Refresh call failed
        """
        refresh = self.session.refresh_token
        if not refresh:
            raise AuthenticationRequired("No refresh token available")
        access = await self.sager.refresh_access_token(refresh)
        self.session.save(access, refresh)
        logging.info("Access token refreshed", extra={"step": "token_refresh"})

    def logout(self) -> None:
        self.session.clear()

    async def aclose(self) -> None:
        for controller in self._controllers:
            controller.close()
        self._controllers.clear()
        self.session.clear()


def create_app(
    config: Optional[Settings] = None,
    sager_transport: Optional[httpx.AsyncBaseTransport] = None,
    mandii_transport: Optional[httpx.AsyncBaseTransport] = None,
    configure_logging: bool = True,
) -> MySanviApp:
    """Create and wire the client core"""
    config = config or default_settings
    if configure_logging:
        setup_logging(config.log_level)

    sager = SagerClient(config.sager_api_base, config.http_timeout_seconds, sager_transport)
    mandii = MandiiClient(config.mandii_api_base, config.http_timeout_seconds, mandii_transport)
    return MySanviApp(config, sager, mandii)

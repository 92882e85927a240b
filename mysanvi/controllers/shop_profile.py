"""Shop profile: overview plus four independently loaded analytics tabs"""

import enum
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

from mysanvi.config import Settings, settings as default_settings
from mysanvi.controllers.base import Controller, LoadStatus
from mysanvi.domain.exceptions import AuthenticationRequired, MySanviError
from mysanvi.domain.session import SessionStore
from mysanvi.infrastructure.clients.sager import SagerClient
from mysanvi.infrastructure.observability.metrics import overview_fallback_counter


class ShopTab(str, enum.Enum):
    OVERVIEW = "overview"
    SALES = "sales"
    DEBTS = "debts"
    PREDICTIONS = "predictions"
    ANALYTICS = "analytics"


@dataclass(frozen=True)
class TabState:
    status: LoadStatus = LoadStatus.IDLE
    data: Any = None
    error_message: Optional[str] = None


def _initial_tabs() -> Dict[ShopTab, TabState]:
    return {tab: TabState() for tab in ShopTab}


@dataclass(frozen=True)
class ShopProfileState:
    selected_tab: ShopTab = ShopTab.OVERVIEW
    tabs: Dict[ShopTab, TabState] = field(default_factory=_initial_tabs)
    today_loading: bool = False
    today_amount: Decimal = Decimal("0")
    today_count: int = 0
    today_is_fallback: bool = False


class ShopProfileController(Controller[ShopProfileState]):
    def __init__(self, sager: SagerClient, session: SessionStore, config: Settings | None = None):
        super().__init__(ShopProfileState())
        self.sager = sager
        self.session = session
        self.config = config or default_settings

    def tab(self, tab: ShopTab) -> TabState:
        return self.state.tabs[tab]

    async def select_tab(self, tab: ShopTab) -> None:
        self._update(selected_tab=tab)
        if tab is not ShopTab.OVERVIEW:
            await self.refresh(tab)

    async def refresh(self, tab: ShopTab) -> None:
        """Reload one tab; its previous snapshot is replaced, never merged"""
        if tab is ShopTab.OVERVIEW:
            await self.load_overview()
            return

        self._set_tab(tab, TabState(status=LoadStatus.LOADING, data=self.tab(tab).data))
        try:
            data = await self._fetch(tab)
        except AuthenticationRequired:
            self._set_tab(tab, TabState(status=LoadStatus.ERROR, error_message="Authentication required"))
            return
        except MySanviError as e:
            logging.warning(f"Shop profile tab load failed: {e}", extra={"step": "load_tab", "tab": tab.value})
            self._set_tab(tab, TabState(status=LoadStatus.ERROR, error_message=f"Failed to load data: {e}"))
            return
        self._set_tab(tab, TabState(status=LoadStatus.LOADED, data=data))

    async def _fetch(self, tab: ShopTab) -> Any:
        auth = self.session.get_auth_header()
        if tab is ShopTab.SALES:
            return await self.sager.list_sales(auth)
        if tab is ShopTab.DEBTS:
            return await self.sager.list_debts(auth)
        if tab is ShopTab.PREDICTIONS:
            return await self.sager.list_predictions(auth)
        return await self.sager.get_daily_summary(auth, days=self.config.summary_days, top=self.config.summary_top)

    async def load_overview(self) -> None:
        """
        Fetch today's sales figure from a one-day summary.

        Fail-soft: any failure, including a missing session, shows the
        configured fallback figures instead of an error.
        """
        self._update(today_loading=True)
        try:
            summary = await self.sager.get_daily_summary(self.session.get_auth_header(), days=1)
        except MySanviError as e:
            overview_fallback_counter.inc()
            logging.warning(f"Today's sales unavailable, using fallback: {e}", extra={"step": "load_overview"})
            self._update(
                today_loading=False,
                today_amount=Decimal(self.config.overview_fallback_amount),
                today_count=self.config.overview_fallback_count,
                today_is_fallback=True,
            )
            return

        latest = summary.latest_total()
        self._update(
            today_loading=False,
            today_amount=latest.total_amount if latest else Decimal("0"),
            today_count=latest.total_count if latest else 0,
            today_is_fallback=False,
        )

    def _set_tab(self, tab: ShopTab, tab_state: TabState) -> None:
        self._update(tabs={**self.state.tabs, tab: tab_state})

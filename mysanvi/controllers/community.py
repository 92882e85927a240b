"""Embedded Mandii web view"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from mysanvi.config import Settings, settings as default_settings
from mysanvi.controllers.base import Controller


class PageRenderer(Protocol):
    """Embedded web renderer supplied by the UI layer"""

    def load(self, url: str) -> None: ...

    def reload(self) -> None: ...


@dataclass(frozen=True)
class CommunityState:
    url: str
    current_url: str
    title: str = "Mandii"
    loading: bool = True
    failed: bool = False


class CommunityWebViewController(Controller[CommunityState]):
    """Keeps navigation inside the Mandii host and tracks page load state"""

    def __init__(self, url: str, renderer: PageRenderer, config: Settings | None = None):
        super().__init__(CommunityState(url=url, current_url=url))
        self.renderer = renderer
        self.config = config or default_settings

    @property
    def allowed_host(self) -> str:
        return self.config.mandii_host

    def start(self) -> None:
        self._update(loading=True, failed=False)
        self.renderer.load(self.state.url)

    def should_block(self, url: Optional[str]) -> bool:
        """True for any destination outside the Mandii host"""
        if url and self.allowed_host in url:
            return False
        logging.info("Blocked external navigation", extra={"step": "webview_block", "url": url})
        return True

    def on_page_started(self, url: Optional[str]) -> None:
        changes = {"loading": True, "failed": False}
        if url:
            changes["current_url"] = url
        self._update(**changes)

    def on_page_finished(self, url: Optional[str], title: Optional[str]) -> None:
        changes = {"loading": False}
        if url:
            changes["current_url"] = url
        if title and title.strip():
            changes["title"] = title
        self._update(**changes)

    def on_page_failed(self, url: Optional[str] = None, description: Optional[str] = None) -> None:
        logging.warning(f"Community page failed to load: {description}", extra={"step": "webview_error", "url": url})
        self._update(loading=False, failed=True)

    def refresh(self) -> None:
        self._update(loading=True, failed=False)
        self.renderer.reload()

    def retry(self) -> None:
        """Reload the original URL after a failed load"""
        self._update(loading=True, failed=False, current_url=self.state.url)
        self.renderer.load(self.state.url)

    @property
    def subtitle(self) -> Optional[str]:
        if self.state.current_url != self.state.url:
            return "Mandii Community"
        return None

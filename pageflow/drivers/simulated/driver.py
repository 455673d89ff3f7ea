"""In-process simulated browser."""

import asyncio
import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from pageflow.drivers.base import (
    BrowserDriver,
    ElementHandle,
    Matcher,
    PageDriver,
    SessionDriver,
    Strategy,
)
from pageflow.drivers.simulated.config import SimulatedConfig
from pageflow.drivers.simulated.dom import CookieJar, SimDocument, SimElement, query
from pageflow.drivers.simulated.sites import CitizenPortal, PracticeSite, Response, SimSite
from pageflow.models.cookie import Cookie

log = logging.getLogger(__name__)

MAX_REDIRECTS = 5
BLANK_URL = "about:blank"


class TargetClosedError(RuntimeError):
    """Raised when an operation targets a closed page or session."""


class DetachedElementError(RuntimeError):
    """Raised when an element no longer belongs to the page's document."""


class SimulatedElement(ElementHandle):
    def __init__(self, page: "SimulatedPage", element: SimElement) -> None:
        self._page = page
        self._element = element

    def _attached(self) -> SimElement:
        self._page.ensure_open()
        if self._element not in self._page.document.elements:
            raise DetachedElementError(f"Element '{self._element.key}' is not attached")
        return self._element

    async def fill(self, text: str) -> None:
        await self._page.tick()
        element = self._attached()
        if not element.is_input:
            raise ValueError(f"Element '{element.key}' is not an input")
        element.value = text
        self._page.document.focused = element

    async def click(self) -> None:
        await self._page.tick()
        element = self._attached()
        self._page.document.focused = element
        await self._page.activate(element)

    async def check(self) -> None:
        await self._page.tick()
        element = self._attached()
        if not element.is_checkbox:
            raise ValueError(f"Element '{element.key}' is not a checkbox")
        element.checked = True

    async def focus(self) -> None:
        await self._page.tick()
        self._page.document.focused = self._attached()

    async def is_visible(self) -> bool:
        return self._attached().visible

    async def is_focused(self) -> bool:
        return self._page.document.focused is self._attached()

    async def is_checked(self) -> bool:
        element = self._attached()
        if not element.is_checkbox:
            raise ValueError(f"Element '{element.key}' is not a checkbox")
        return element.checked

    async def text_content(self) -> str:
        return self._attached().text


class SimulatedPage(PageDriver):
    def __init__(self, session: "SimulatedSession") -> None:
        self._session = session
        self._closed = False
        self.document = SimDocument(url=BLANK_URL, title="")

    @property
    def url(self) -> str:
        return self.document.url

    @property
    def is_closed(self) -> bool:
        return self._closed

    def ensure_open(self) -> None:
        if self._closed:
            raise TargetClosedError("Target page has been closed")

    async def tick(self) -> None:
        self.ensure_open()
        await self._session.tick()

    async def goto(self, url: str) -> int | None:
        await self.tick()
        site = self._session.site_for(url)
        response = site.render(urlsplit(url).path or "/", self._session.jar)
        return await self._load(site, response)

    async def _load(self, site: SimSite, response: Response) -> int:
        for _ in range(MAX_REDIRECTS):
            if response.location is None:
                break
            log.debug("Redirected to %s", response.location)
            site = self._session.site_for(response.location)
            response = site.render(urlsplit(response.location).path, self._session.jar)
        if response.document is None:
            raise ConnectionError(f"Too many redirects (status {response.status})")
        self.document = response.document
        return response.status

    async def activate(self, element: SimElement) -> None:
        if element.is_checkbox:
            element.checked = not element.checked
        elif element.submits:
            site = self._session.site_for(self.url)
            response = site.submit(
                urlsplit(self.url).path, self.document.form_values(), self._session.jar
            )
            await self._load(site, response)

    async def find(
        self, strategy: Strategy, matcher: Matcher, options: Mapping[str, Any]
    ) -> Sequence[ElementHandle]:
        await self.tick()
        return [
            SimulatedElement(self, element)
            for element in query(self.document, strategy, matcher, options)
        ]

    async def press(self, key: str) -> None:
        await self.tick()
        document = self.document
        focused = document.focused
        if key == "Tab":
            order = document.tab_order()
            if not order:
                return
            if focused not in order:
                document.focused = order[0]
            else:
                document.focused = order[(order.index(focused) + 1) % len(order)]
        elif key == "Space" and focused is not None:
            if focused.is_checkbox or focused.role == "button":
                await self.activate(focused)
        elif key == "Enter" and focused is not None:
            if focused.role == "button" or focused.is_input:
                submit = next((e for e in document if e.submits), None)
                if submit is not None:
                    await self.activate(submit)
        elif len(key) == 1 and focused is not None and focused.is_input:
            focused.value += key

    async def screenshot(self, path: str, *, full_page: bool = True) -> None:
        await self.tick()
        if not self._session.config.screenshots_enabled:
            raise RuntimeError("Screenshots are disabled for this browser")
        await asyncio.to_thread(Path(path).write_text, self.document.render_text())

    async def close(self) -> None:
        self._closed = True


class SimulatedSession(SessionDriver):
    def __init__(self, browser: "SimulatedBrowser") -> None:
        self._browser = browser
        self.jar = CookieJar()
        self.pages: list[SimulatedPage] = []
        self.closed = False

    @property
    def config(self) -> SimulatedConfig:
        return self._browser.config

    async def tick(self) -> None:
        if self.closed:
            raise TargetClosedError("Browser context has been closed")
        if self.config.latency > 0:
            await asyncio.sleep(self.config.latency)

    def site_for(self, url: str) -> SimSite:
        return self._browser.site_for(url)

    async def new_page(self) -> PageDriver:
        await self.tick()
        page = SimulatedPage(self)
        self.pages.append(page)
        return page

    async def cookies(self) -> Sequence[Cookie]:
        await self.tick()
        return self.jar.all()

    async def clear_cookies(self) -> None:
        await self.tick()
        self.jar.clear()

    async def close(self) -> None:
        for page in self.pages:
            await page.close()
        self.closed = True


@dataclass(frozen=True, kw_only=True)
class SimulatedBrowser(BrowserDriver):
    """Browser that serves the built-in demo sites from memory."""

    config: SimulatedConfig
    sites: Mapping[str, SimSite]

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: SimulatedConfig
    ) -> AsyncGenerator["SimulatedBrowser", None]:
        """Create a browser hosting the citizen portal and the practice site."""
        citizen = CitizenPortal(
            accounts={u: p.get_secret_value() for u, p in config.citizen_accounts.items()},
            cookie_secure=config.session_cookie_secure,
            cookie_http_only=config.session_cookie_http_only,
        )
        practice = PracticeSite(
            accounts={u: p.get_secret_value() for u, p in config.practice_accounts.items()},
            cookie_secure=config.session_cookie_secure,
            cookie_http_only=config.session_cookie_http_only,
        )
        yield cls(config=config, sites={site.host: site for site in (citizen, practice)})

    def site_for(self, url: str) -> SimSite:
        host = urlsplit(url).hostname
        if host is None or host not in self.sites:
            raise TimeoutError(f"Navigation to {url} timed out: host unreachable")
        return self.sites[host]

    @asynccontextmanager
    async def open_session(self) -> AsyncGenerator[SessionDriver, None]:
        session = SimulatedSession(self)
        try:
            yield session
        finally:
            await session.close()

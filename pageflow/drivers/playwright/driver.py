"""Playwright implementation of the driver capability surface."""

import logging
from collections.abc import AsyncGenerator, Iterator, Mapping, Sequence
from contextlib import asynccontextmanager, contextmanager
from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import Browser, BrowserContext, Locator, Page, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pageflow.drivers.base import (
    BrowserDriver,
    ElementHandle,
    Matcher,
    PageDriver,
    SessionDriver,
    Strategy,
)
from pageflow.drivers.playwright.config import PlaywrightConfig
from pageflow.models.cookie import Cookie

log = logging.getLogger(__name__)


@contextmanager
def _timeouts() -> Iterator[None]:
    """Surface Playwright timeouts as the builtin TimeoutError."""
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise TimeoutError(e.message) from e


def to_cookie(raw: Mapping[str, Any]) -> Cookie:
    """Convert a Playwright cookie dict to a Cookie snapshot."""
    expires = raw.get("expires")
    return Cookie(
        name=raw["name"],
        value=raw["value"],
        domain=raw.get("domain", ""),
        path=raw.get("path", "/"),
        expires=None if expires is None or expires < 0 else float(expires),
        secure=bool(raw.get("secure", False)),
        http_only=bool(raw.get("httpOnly", False)),
        same_site=raw.get("sameSite"),
    )


class PlaywrightElement(ElementHandle):
    def __init__(self, locator: Locator) -> None:
        self._locator = locator

    async def fill(self, text: str) -> None:
        with _timeouts():
            await self._locator.fill(text)

    async def click(self) -> None:
        with _timeouts():
            await self._locator.click()

    async def check(self) -> None:
        with _timeouts():
            await self._locator.check()

    async def focus(self) -> None:
        with _timeouts():
            await self._locator.focus()

    async def is_visible(self) -> bool:
        return await self._locator.is_visible()

    async def is_focused(self) -> bool:
        with _timeouts():
            focused: bool = await self._locator.evaluate(
                "el => el === document.activeElement"
            )
        return focused

    async def is_checked(self) -> bool:
        with _timeouts():
            return await self._locator.is_checked()

    async def text_content(self) -> str:
        with _timeouts():
            return await self._locator.inner_text()


class PlaywrightPage(PageDriver):
    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    @property
    def is_closed(self) -> bool:
        return self._page.is_closed()

    async def goto(self, url: str) -> int | None:
        try:
            with _timeouts():
                response = await self._page.goto(url)
        except PlaywrightError as e:
            raise ConnectionError(e.message) from e
        return response.status if response is not None else None

    def _locator(self, strategy: Strategy, matcher: Matcher, options: Mapping[str, Any]) -> Locator:
        if strategy == "role":
            return self._page.get_by_role(options["role"], name=matcher)
        if strategy == "label":
            return self._page.get_by_label(matcher)
        if strategy == "text":
            return self._page.get_by_text(matcher)
        if not isinstance(matcher, str):
            raise TypeError("Structural selectors must be strings")
        return self._page.locator(matcher)

    async def find(
        self, strategy: Strategy, matcher: Matcher, options: Mapping[str, Any]
    ) -> Sequence[ElementHandle]:
        locator = self._locator(strategy, matcher, options)
        count = await locator.count()
        return [PlaywrightElement(locator.nth(i)) for i in range(count)]

    async def press(self, key: str) -> None:
        await self._page.keyboard.press(key)

    async def screenshot(self, path: str, *, full_page: bool = True) -> None:
        with _timeouts():
            await self._page.screenshot(path=path, full_page=full_page)

    async def close(self) -> None:
        await self._page.close()


class PlaywrightSession(SessionDriver):
    def __init__(self, context: BrowserContext) -> None:
        self._context = context

    async def new_page(self) -> PageDriver:
        return PlaywrightPage(await self._context.new_page())

    async def cookies(self) -> Sequence[Cookie]:
        return [to_cookie(raw) for raw in await self._context.cookies()]

    async def clear_cookies(self) -> None:
        await self._context.clear_cookies()


@dataclass(frozen=True, kw_only=True)
class PlaywrightBrowser(BrowserDriver):
    """Playwright-backed browser; one browser context per session."""

    config: PlaywrightConfig
    browser: Browser = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: PlaywrightConfig
    ) -> AsyncGenerator["PlaywrightBrowser", None]:
        """Launch the configured browser for the lifetime of the context."""
        async with async_playwright() as playwright:
            browser_type = getattr(playwright, config.browser)
            log.info("Launching %s (headless=%s)", config.browser, config.headless)
            browser = await browser_type.launch(headless=config.headless)
            try:
                yield cls(config=config, browser=browser)
            finally:
                await browser.close()

    @asynccontextmanager
    async def open_session(self) -> AsyncGenerator[SessionDriver, None]:
        context = await self.browser.new_context(
            ignore_https_errors=self.config.ignore_https_errors,
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            },
        )
        context.set_default_timeout(self.config.timeout_ms)
        context.set_default_navigation_timeout(self.config.timeout_ms)
        try:
            yield PlaywrightSession(context)
        finally:
            await context.close()

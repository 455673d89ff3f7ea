"""Capabilities page objects are composed from.

Screens do not share a base class. Each one holds a ``PageContext`` and
implements the capability protocols it needs by delegating to it.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import urljoin

from pageflow.assertions import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT, expect_eventually
from pageflow.drivers.base import Matcher, PageDriver, SessionDriver
from pageflow.errors import NavigationError, ScreenshotCaptureError
from pageflow.locators import BoundLocatorSet, LocatorSet
from pageflow.models.cookie import Cookie

log = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]+")


@runtime_checkable
class Navigable(Protocol):
    async def navigate(self, target: str) -> None: ...


@runtime_checkable
class ScreenshotCapable(Protocol):
    async def take_screenshot(self, name: str) -> str | None: ...


@runtime_checkable
class CookieReadable(Protocol):
    async def read_cookie(self, name: str) -> Cookie | None: ...


@runtime_checkable
class LocatorBearing(Protocol):
    @property
    def locators(self) -> BoundLocatorSet: ...


def screenshot_filename(name: str) -> str:
    """Deterministic, filesystem-safe file name for a screenshot name."""
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', name).strip('_') or 'screenshot'}.png"


@dataclass(frozen=True, kw_only=True)
class PageContext:
    """A page handle plus the session it belongs to.

    Page objects never outlive the context they were built with; once the
    page is closed every driver call through it fails.
    """

    page: PageDriver
    session: SessionDriver
    screenshot_dir: Path
    base_url: str | None = None
    assertion_timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @property
    def url(self) -> str:
        return self.page.url

    def bind(self, locator_set: LocatorSet) -> BoundLocatorSet:
        return locator_set.bind(self.page)

    async def navigate(self, target: str) -> None:
        """Navigate to an absolute URL or a path relative to the base URL.

        Raises:
            NavigationError: On a non-2xx status or when the driver cannot
                finish the navigation

        """
        url = urljoin(self.base_url or self.page.url, target)
        log.debug("Navigating to %s", url)
        try:
            status = await self.page.goto(url)
        except TimeoutError as e:
            raise NavigationError(url, reason=f"timeout ({e})") from e
        except ConnectionError as e:
            raise NavigationError(url, reason=str(e)) from e

        if status is not None and not 200 <= status < 300:
            raise NavigationError(url, status=status)

    async def assert_url(self, expected: Matcher) -> str:
        """Wait until the page URL equals a string or matches a pattern."""

        async def current_url() -> str:
            return self.page.url

        def matches(url: str) -> bool:
            if isinstance(expected, str):
                return url == expected
            return expected.search(url) is not None

        return await expect_eventually(
            current_url,
            matches,
            message="Page URL should match",
            expected=expected if isinstance(expected, str) else f"/{expected.pattern}/",
            timeout=self.assertion_timeout,
            poll_interval=self.poll_interval,
        )

    async def press(self, key: str) -> None:
        await self.page.press(key)

    async def capture_screenshot(self, name: str) -> str:
        """Write a full page screenshot and return its path.

        Raises:
            ScreenshotCaptureError: If the driver cannot capture the page

        """
        path = self.screenshot_dir / screenshot_filename(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await self.page.screenshot(str(path), full_page=True)
        except Exception as e:
            raise ScreenshotCaptureError(f"Could not capture '{name}': {e}") from e
        return str(path)

    async def take_screenshot(self, name: str) -> str | None:
        """Best-effort screenshot; failures are logged, never raised."""
        try:
            return await self.capture_screenshot(name)
        except ScreenshotCaptureError as e:
            log.warning("%s", e)
            return None

    async def read_cookie(self, name: str) -> Cookie | None:
        """Read a cookie from the session at call time."""
        for cookie in await self.session.cookies():
            if cookie.name == name:
                return cookie
        return None

"""Secure area screen showing a flash banner after login."""

from dataclasses import dataclass

from pageflow.assertions import expect_eventually
from pageflow.drivers.base import Matcher
from pageflow.locators import BoundLocatorSet, LocatorSet, by_selector
from pageflow.models.cookie import Cookie
from pageflow.pages.capabilities import PageContext

SECURE_AREA_LOCATORS = LocatorSet.of(banner=by_selector("#flash.success"))


@dataclass(frozen=True, kw_only=True)
class SecureAreaScreen:
    context: PageContext
    locator_set: LocatorSet = SECURE_AREA_LOCATORS

    @property
    def locators(self) -> BoundLocatorSet:
        return self.context.bind(self.locator_set)

    async def navigate(self, target: str) -> None:
        await self.context.navigate(target)

    async def take_screenshot(self, name: str) -> str | None:
        return await self.context.take_screenshot(name)

    async def read_cookie(self, name: str) -> Cookie | None:
        return await self.context.read_cookie(name)

    def current_url(self) -> str:
        return self.context.url

    async def assert_success_banner(self, text: Matcher) -> None:
        """Assert the success banner is visible and contains text."""
        banner = self.locators["banner"]

        async def banner_text() -> str | None:
            if await banner.count() == 0 or not await banner.is_visible():
                return None
            return await banner.text()

        def contains(observed: str | None) -> bool:
            if observed is None:
                return False
            if isinstance(text, str):
                return text in observed
            return text.search(observed) is not None

        await expect_eventually(
            banner_text,
            contains,
            message="Success banner should be visible and contain the text",
            expected=text if isinstance(text, str) else f"/{text.pattern}/",
            timeout=self.context.assertion_timeout,
            poll_interval=self.context.poll_interval,
        )

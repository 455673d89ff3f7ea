"""Dashboard screen reached after a successful login."""

import re
from dataclasses import dataclass

from pageflow.assertions import expect_eventually
from pageflow.locators import BoundLocatorSet, LocatorSet, by_role
from pageflow.models.cookie import Cookie
from pageflow.pages.capabilities import PageContext

DASHBOARD_LOCATORS = LocatorSet.of(
    heading=by_role("heading", re.compile("citizen dashboard", re.IGNORECASE)),
)


@dataclass(frozen=True, kw_only=True)
class DashboardScreen:
    context: PageContext
    locator_set: LocatorSet = DASHBOARD_LOCATORS
    url_pattern: re.Pattern[str] = re.compile(r"dashboard")

    @property
    def locators(self) -> BoundLocatorSet:
        return self.context.bind(self.locator_set)

    async def navigate(self, target: str) -> None:
        await self.context.navigate(target)

    async def take_screenshot(self, name: str) -> str | None:
        return await self.context.take_screenshot(name)

    async def read_cookie(self, name: str) -> Cookie | None:
        return await self.context.read_cookie(name)

    async def assert_present(self) -> None:
        """Assert the page URL matches and the dashboard heading is visible."""
        await self.context.assert_url(self.url_pattern)

        heading = self.locators["heading"]

        async def heading_visible() -> bool:
            return await heading.count() > 0 and await heading.is_visible()

        await expect_eventually(
            heading_visible,
            bool,
            message="Dashboard heading should be visible",
            expected=True,
            timeout=self.context.assertion_timeout,
            poll_interval=self.context.poll_interval,
        )

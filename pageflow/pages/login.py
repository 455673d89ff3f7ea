"""Login screen: credentials entry, remember-me and accessibility checks."""

import logging
import re
from dataclasses import dataclass

from pageflow.assertions import expect_eventually
from pageflow.config import Credentials
from pageflow.errors import PageAssertionError
from pageflow.locators import BoundLocatorSet, Locator, LocatorSet, by_label, by_role
from pageflow.models.cookie import Cookie
from pageflow.pages.capabilities import PageContext

log = logging.getLogger(__name__)

MAX_TAB_STOPS = 20

LOGIN_LOCATORS = LocatorSet.of(
    username=[
        by_role("textbox", re.compile("username", re.IGNORECASE)),
        by_label(re.compile("username", re.IGNORECASE)),
    ],
    password=by_label(re.compile("password", re.IGNORECASE)),
    remember_me=by_label(re.compile("remember me", re.IGNORECASE)),
    submit=by_role("button", re.compile("sign in", re.IGNORECASE)),
)


async def _visible(locator: Locator) -> bool:
    if await locator.count() == 0:
        return False
    return await locator.is_visible()


@dataclass(frozen=True, kw_only=True)
class LoginScreen:
    """Login form with username, password, remember-me and submit controls."""

    context: PageContext
    locator_set: LocatorSet = LOGIN_LOCATORS

    @property
    def locators(self) -> BoundLocatorSet:
        return self.context.bind(self.locator_set)

    async def navigate(self, target: str) -> None:
        await self.context.navigate(target)

    async def take_screenshot(self, name: str) -> str | None:
        return await self.context.take_screenshot(name)

    async def read_cookie(self, name: str) -> Cookie | None:
        return await self.context.read_cookie(name)

    async def enter_username(self, username: str) -> None:
        await self.locators["username"].fill(username)

    async def enter_password(self, password: str) -> None:
        await self.locators["password"].fill(password)

    async def click_login(self) -> None:
        await self.locators["submit"].click()

    async def set_remember_me(self, *, via_keyboard: bool) -> None:
        """Check the remember-me control.

        The keyboard path focuses the control and presses Space only when it
        is unchecked, so both paths leave the control checked.
        """
        remember_me = self.locators["remember_me"]
        if via_keyboard:
            await remember_me.focus()
            if not await remember_me.is_checked():
                await self.context.press("Space")
        else:
            await remember_me.check()

    async def is_remember_me_checked(self) -> bool:
        return await self.locators["remember_me"].is_checked()

    async def login(
        self,
        credentials: Credentials,
        *,
        remember_me_via_keyboard: bool = True,
        remember_me: bool = True,
    ) -> None:
        """Fill credentials, optionally tick remember-me, then submit."""
        log.debug("Logging in as %s", credentials.username)
        await self.enter_username(credentials.username)
        await self.enter_password(credentials.password.get_secret_value())
        if remember_me:
            await self.set_remember_me(via_keyboard=remember_me_via_keyboard)
        await self.click_login()

    async def verify_accessibility_markup(self) -> None:
        """Assert labelled inputs are visible and reachable by keyboard in order.

        Must start from a neutral focus state (a freshly loaded page). Tabs
        through the page with no pointer input and checks that the username
        field receives focus before the password field.
        """
        for name in ("username", "password"):
            await expect_eventually(
                lambda locator=self.locators[name]: _visible(locator),
                bool,
                message=f"{name} field should be visible",
                expected=True,
                timeout=self.context.assertion_timeout,
                poll_interval=self.context.poll_interval,
            )

        fields = {"username": self.locators["username"], "password": self.locators["password"]}
        reached: list[str] = []
        for _ in range(MAX_TAB_STOPS):
            await self.context.press("Tab")
            for name, locator in fields.items():
                if name not in reached and await locator.is_focused():
                    reached.append(name)
            if len(reached) == len(fields):
                break

        if reached != ["username", "password"]:
            raise PageAssertionError(
                "Keyboard tab order should reach username before password",
                expected=["username", "password"],
                observed=reached,
            )

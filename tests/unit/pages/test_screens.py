"""Tests for the dashboard and secure area screens and cookie checks."""

from pathlib import Path

import pytest

from pageflow.config import Credentials
from pageflow.drivers.simulated import SimulatedConfig
from pageflow.errors import PageAssertionError
from pageflow.fixtures import (
    DASHBOARD_SCREEN,
    LOGIN_SCREEN,
    PAGE,
    SECURE_AREA_SCREEN,
    FixtureProvider,
)
from pageflow.pages.cookies import assert_cookie_hardened
from pageflow.suites.practice_login import PRACTICE_LOGIN_LOCATORS
from pageflow.testing.simulated import simulated_provider

PORTAL = "https://gov-portal.example.gov"
PRACTICE_SECURE = "https://practice.expandtesting.com/secure"
CREDENTIALS = Credentials(username="valid_citizen_01", password="SecurePass123!")


async def test_dashboard_present_after_login(provider: FixtureProvider) -> None:
    """URL and heading both match once logged in."""
    async with provider.scope("dashboard") as scope:
        login = await scope.provide(LOGIN_SCREEN)
        await login.navigate(f"{PORTAL}/login")
        await login.login(CREDENTIALS)

        dashboard = await scope.provide(DASHBOARD_SCREEN)
        await dashboard.assert_present()


async def test_dashboard_absent_without_session(provider: FixtureProvider) -> None:
    """The guarded dashboard redirects to login and the assertion fails."""
    async with provider.scope("dashboard") as scope:
        dashboard = await scope.provide(DASHBOARD_SCREEN)
        await dashboard.navigate(f"{PORTAL}/dashboard")

        with pytest.raises(PageAssertionError, match="Page URL should match") as exc_info:
            await dashboard.assert_present()

    assert exc_info.value.observed == f"{PORTAL}/login"


async def test_secure_area_banner_after_login(provider: FixtureProvider) -> None:
    """The success banner contains the expected text."""
    async with provider.scope("secure") as scope:
        page = await scope.provide(PAGE)
        await page.navigate(PRACTICE_SECURE)
        form = page.bind(PRACTICE_LOGIN_LOCATORS)
        await form["username"].fill("practice")
        await form["password"].fill("SuperSecretPassword!")
        await form["submit"].click()

        secure_area = await scope.provide(SECURE_AREA_SCREEN)
        await secure_area.assert_success_banner("You logged into a secure area!")
        assert secure_area.current_url() == PRACTICE_SECURE


async def test_secure_area_banner_missing(provider: FixtureProvider) -> None:
    """Without a session the success banner never appears."""
    async with provider.scope("secure") as scope:
        secure_area = await scope.provide(SECURE_AREA_SCREEN)
        await secure_area.navigate(PRACTICE_SECURE)

        with pytest.raises(PageAssertionError, match="Success banner") as exc_info:
            await secure_area.assert_success_banner("You logged into a secure area!")

    assert exc_info.value.observed is None


async def test_session_cookie_is_hardened(provider: FixtureProvider) -> None:
    """Default portal cookies are Secure and HttpOnly."""
    async with provider.scope("cookie") as scope:
        login = await scope.provide(LOGIN_SCREEN)
        await login.navigate(f"{PORTAL}/login")
        await login.login(CREDENTIALS)

        cookie = await assert_cookie_hardened(login)

    assert cookie.secure and cookie.http_only


async def test_missing_session_cookie(provider: FixtureProvider) -> None:
    """Reports an absent cookie."""
    async with provider.scope("cookie") as scope:
        login = await scope.provide(LOGIN_SCREEN)

        with pytest.raises(PageAssertionError, match="should exist"):
            await assert_cookie_hardened(login)


@pytest.mark.parametrize(
    ("config", "flag"),
    [
        (SimulatedConfig(session_cookie_secure=False), "Secure"),
        (SimulatedConfig(session_cookie_http_only=False), "HttpOnly"),
    ],
)
async def test_weak_session_cookie(
    screenshot_dir: Path, config: SimulatedConfig, flag: str
) -> None:
    """Each missing flag is reported on its own."""
    async with (
        simulated_provider(screenshot_dir, config=config) as provider,
        provider.scope("cookie") as scope,
    ):
        login = await scope.provide(LOGIN_SCREEN)
        await login.navigate(f"{PORTAL}/login")
        await login.login(CREDENTIALS)

        with pytest.raises(PageAssertionError, match=f"must be {flag}") as exc_info:
            await assert_cookie_hardened(login)

    assert exc_info.value.observed is False


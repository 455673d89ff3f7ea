"""Per-unit fixture scopes.

A ``FixtureScope`` is built for exactly one test execution unit and passed
down explicitly; there is no global registry. Fixtures are constructed lazily
on first request, at most once per scope, and torn down when the scope
closes.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable, Sequence
from contextlib import AbstractAsyncContextManager, AsyncExitStack, asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, cast

from pageflow.config import RunSettings
from pageflow.drivers.base import BrowserDriver, PageDriver, SessionDriver
from pageflow.errors import FixtureError
from pageflow.pages.capabilities import PageContext
from pageflow.pages.dashboard import DashboardScreen
from pageflow.pages.login import LoginScreen
from pageflow.pages.secure_area import SecureAreaScreen

log = logging.getLogger(__name__)

type FixtureFactory[T] = Callable[["FixtureScope"], AbstractAsyncContextManager[T]]
type TeardownHook = Callable[["FixtureScope"], Awaitable[None]]


@dataclass(frozen=True, eq=False)
class Fixture[T]:
    """Key and factory of one fixture. Compared by identity."""

    name: str
    factory: FixtureFactory[T]

    def __repr__(self) -> str:
        return f"Fixture({self.name!r})"


def fixture[T](
    name: str,
) -> Callable[[Callable[["FixtureScope"], AsyncIterator[T]]], Fixture[T]]:
    """Turn an async generator ``(scope) -> value`` into a fixture.

    Code before ``yield`` is setup, code after it is teardown.
    """

    def decorator(func: Callable[["FixtureScope"], AsyncIterator[T]]) -> Fixture[T]:
        return Fixture(name=name, factory=asynccontextmanager(func))

    return decorator


class FixtureScope:
    """Fixtures of one test execution unit."""

    def __init__(
        self,
        *,
        unit_id: str,
        driver: BrowserDriver,
        settings: RunSettings,
        base_url: str | None = None,
        teardown_hooks: Sequence[TeardownHook] = (),
    ) -> None:
        self.unit_id = unit_id
        self.driver = driver
        self.settings = settings
        self.base_url = base_url
        self._teardown_hooks = tuple(teardown_hooks)
        self._stack = AsyncExitStack()
        self._instances: dict[Fixture[Any], Any] = {}
        self._resolving: list[Fixture[Any]] = []
        self._pages: list[PageContext] = []
        self._closing = False
        self._closed = False

    async def __aenter__(self) -> "FixtureScope":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def is_provisioned(self, key: Fixture[Any]) -> bool:
        return key in self._instances

    async def provide[T](self, key: Fixture[T]) -> T:
        """Return the scope's instance of key, constructing it on first use.

        Raises:
            FixtureError: If the scope is closed or fixtures depend on each
                other in a cycle

        """
        if self._closed:
            raise FixtureError(f"Scope {self.unit_id} is closed; cannot provide {key.name}")

        if key in self._instances:
            return cast(T, self._instances[key])

        if key in self._resolving:
            chain = " -> ".join(f.name for f in [*self._resolving, key])
            raise FixtureError(f"Fixture dependency cycle: {chain}")

        self._resolving.append(key)
        try:
            log.debug("Setting up fixture %s for %s", key.name, self.unit_id)
            instance = await self._stack.enter_async_context(key.factory(self))
        finally:
            self._resolving.pop()

        self._instances[key] = instance
        return instance

    async def new_page(self, base_url: str | None = None) -> PageContext:
        """Open another page in the unit's session.

        The page shares cookies and storage with every other page of the
        scope, becomes the active page, and is closed with the scope.
        """
        session = await self.provide(SESSION)
        page = await session.new_page()
        self._stack.push_async_callback(_close_page_if_open, page)
        context = PageContext(
            page=page,
            session=session,
            screenshot_dir=self.settings.screenshot_dir,
            base_url=base_url or self.base_url,
            assertion_timeout=self.settings.assertion_timeout,
            poll_interval=self.settings.poll_interval,
        )
        self._pages.append(context)
        return context

    @property
    def active_page(self) -> PageContext | None:
        """Most recently opened page that is still open."""
        for context in reversed(self._pages):
            if not context.page.is_closed:
                return context
        return None

    async def aclose(self) -> None:
        """Run teardown hooks, then tear fixtures down in reverse order.

        Hooks run on every close whether or not any fixture was requested,
        and may still request fixtures of the scope.
        """
        if self._closing or self._closed:
            return
        self._closing = True

        hook_errors: list[Exception] = []
        for hook in self._teardown_hooks:
            try:
                await hook(self)
            except Exception as e:
                log.error("Teardown hook failed for %s: %s", self.unit_id, e, exc_info=e)
                hook_errors.append(e)

        self._closed = True
        await self._stack.aclose()
        self._instances.clear()

        if hook_errors:
            raise FixtureError(
                f"{len(hook_errors)} teardown hook(s) failed for {self.unit_id}"
            ) from hook_errors[0]


async def _close_page_if_open(page: PageDriver) -> None:
    if not page.is_closed:
        await page.close()


@dataclass(frozen=True, kw_only=True)
class FixtureProvider:
    """Builds one fresh ``FixtureScope`` per test execution unit."""

    driver: BrowserDriver
    settings: RunSettings = field(default_factory=RunSettings)
    teardown_hooks: Sequence[TeardownHook] = ()

    @asynccontextmanager
    async def scope(
        self, unit_id: str, *, base_url: str | None = None
    ) -> AsyncGenerator[FixtureScope, None]:
        """Open a scope for one unit and close it on exit."""
        async with FixtureScope(
            unit_id=unit_id,
            driver=self.driver,
            settings=self.settings,
            base_url=base_url,
            teardown_hooks=self.teardown_hooks,
        ) as scope:
            yield scope


@fixture("session")
async def _session(scope: FixtureScope) -> AsyncIterator[SessionDriver]:
    async with scope.driver.open_session() as session:
        yield session


@fixture("page")
async def _page(scope: FixtureScope) -> AsyncIterator[PageContext]:
    yield await scope.new_page()


@fixture("login_screen")
async def _login_screen(scope: FixtureScope) -> AsyncIterator[LoginScreen]:
    yield LoginScreen(context=await scope.provide(PAGE))


@fixture("dashboard_screen")
async def _dashboard_screen(scope: FixtureScope) -> AsyncIterator[DashboardScreen]:
    yield DashboardScreen(context=await scope.provide(PAGE))


@fixture("secure_area_screen")
async def _secure_area_screen(scope: FixtureScope) -> AsyncIterator[SecureAreaScreen]:
    yield SecureAreaScreen(context=await scope.provide(PAGE))


SESSION: Fixture[SessionDriver] = _session
PAGE: Fixture[PageContext] = _page
LOGIN_SCREEN: Fixture[LoginScreen] = _login_screen
DASHBOARD_SCREEN: Fixture[DashboardScreen] = _dashboard_screen
SECURE_AREA_SCREEN: Fixture[SecureAreaScreen] = _secure_area_screen


async def clear_session_cookies(scope: FixtureScope) -> None:
    """Before-hook that starts a unit from an empty cookie jar."""
    session = await scope.provide(SESSION)
    await session.clear_cookies()

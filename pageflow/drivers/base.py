"""Abstract browser driver capability surface.

Everything page objects and runners need from a browser automation backend is
declared here. Implementations live in sibling packages and are loaded by key
through the ``pageflow.drivers`` entry point group.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any, Literal

from pageflow.models.cookie import Cookie

type Strategy = Literal["role", "label", "text", "structural"]
type Matcher = str | re.Pattern[str]


class ElementHandle(ABC):
    """A single element matched on a live page."""

    @abstractmethod
    async def fill(self, text: str) -> None:
        """Replace the element's value with text."""

    @abstractmethod
    async def click(self) -> None:
        """Activate the element with a pointer click."""

    @abstractmethod
    async def check(self) -> None:
        """Set a checkbox to checked (no-op when already checked)."""

    @abstractmethod
    async def focus(self) -> None:
        """Move keyboard focus to the element."""

    @abstractmethod
    async def is_visible(self) -> bool:
        """Whether the element is rendered and visible."""

    @abstractmethod
    async def is_focused(self) -> bool:
        """Whether the element holds keyboard focus."""

    @abstractmethod
    async def is_checked(self) -> bool:
        """Checked state of a checkbox."""

    @abstractmethod
    async def text_content(self) -> str:
        """Visible text of the element."""


class PageDriver(ABC):
    """One open page (tab) inside a session."""

    @property
    @abstractmethod
    def url(self) -> str:
        """Current page URL."""

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Whether the page has been closed."""

    @abstractmethod
    async def goto(self, url: str) -> int | None:
        """Navigate to url.

        Returns:
            HTTP status of the main document, or None when the driver cannot
            tell (e.g. same-document navigation)

        Raises:
            TimeoutError: If navigation did not finish in time
            ConnectionError: If navigation failed without a response

        """

    @abstractmethod
    async def find(
        self, strategy: Strategy, matcher: Matcher, options: Mapping[str, Any]
    ) -> Sequence[ElementHandle]:
        """Return every element currently matching the strategy and matcher."""

    @abstractmethod
    async def press(self, key: str) -> None:
        """Dispatch a keyboard key press to the focused element."""

    @abstractmethod
    async def screenshot(self, path: str, *, full_page: bool = True) -> None:
        """Write a screenshot of the page to path."""

    @abstractmethod
    async def close(self) -> None:
        """Close the page."""


class SessionDriver(ABC):
    """An isolated browser context: cookie jar and storage shared by its pages."""

    @abstractmethod
    async def new_page(self) -> PageDriver:
        """Open a new page in this session."""

    @abstractmethod
    async def cookies(self) -> Sequence[Cookie]:
        """Snapshot every cookie currently stored in the session."""

    @abstractmethod
    async def clear_cookies(self) -> None:
        """Remove every cookie from the session."""


class BrowserDriver(ABC):
    """Entry point of a browser backend."""

    @abstractmethod
    def open_session(self) -> AbstractAsyncContextManager[SessionDriver]:
        """Open a fresh, isolated session that is closed on exit."""

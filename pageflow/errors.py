"""Error taxonomy for page objects, fixtures and runners."""

from typing import Any


class PageflowError(Exception):
    """Base class for errors raised by pageflow."""


class LocatorResolutionError(PageflowError):
    """Raised when a locator matches zero or several elements at action time."""

    def __init__(self, strategy: str, matcher: str, count: int) -> None:
        self.strategy = strategy
        self.matcher = matcher
        self.count = count
        problem = "no element" if count == 0 else f"{count} elements (ambiguous)"
        super().__init__(
            f"Locator {strategy}={matcher!r} resolved to {problem}"
        )


class NavigationError(PageflowError):
    """Raised when navigation does not end in a success status."""

    def __init__(self, url: str, *, status: int | None = None, reason: str = "") -> None:
        self.url = url
        self.status = status
        detail = reason or f"status {status}"
        super().__init__(f"Navigation to {url} failed: {detail}")


class ScreenshotCaptureError(PageflowError):
    """Raised when a screenshot cannot be written. Never fails a step."""


class PageAssertionError(AssertionError):
    """Observed page state does not match the expected state."""

    def __init__(self, message: str, *, expected: Any, observed: Any) -> None:
        self.expected = expected
        self.observed = observed
        super().__init__(f"{message} (expected: {expected!r}, observed: {observed!r})")


class FixtureError(PageflowError):
    """Raised for fixture dependency cycles or use of a closed scope."""


class DuplicateScenarioError(PageflowError):
    """Raised when two scenarios are registered under the same name."""


class DuplicateCaseIdError(PageflowError):
    """Raised when two rows of one data-driven case share an id."""


class DriverNotFoundError(PageflowError):
    """Raised when a driver is not found."""


class SuiteNotFoundError(PageflowError):
    """Raised when a suite is not found."""

"""Declarative element locators resolved lazily against a live page."""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pageflow.drivers.base import ElementHandle, Matcher, PageDriver, Strategy
from pageflow.errors import LocatorResolutionError

STRATEGY_PRIORITY: Sequence[Strategy] = ("role", "label", "text", "structural")


@dataclass(frozen=True, kw_only=True)
class LocatorDescriptor:
    """How to find one element: strategy, matcher and strategy options."""

    strategy: Strategy
    matcher: Matcher
    options: Mapping[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        """Render the matcher the way it appears in error messages."""
        if isinstance(self.matcher, re.Pattern):
            flags = "i" if self.matcher.flags & re.IGNORECASE else ""
            matcher = f"/{self.matcher.pattern}/{flags}"
        else:
            matcher = self.matcher
        if role := self.options.get("role"):
            return f"{role}[name={matcher}]"
        return matcher


def by_role(role: str, name: Matcher) -> LocatorDescriptor:
    """Match by ARIA role and accessible name."""
    return LocatorDescriptor(strategy="role", matcher=name, options={"role": role})


def by_label(label: Matcher) -> LocatorDescriptor:
    """Match a form control by its associated label."""
    return LocatorDescriptor(strategy="label", matcher=label)


def by_text(text: Matcher) -> LocatorDescriptor:
    """Match by visible text."""
    return LocatorDescriptor(strategy="text", matcher=text)


def by_selector(selector: str) -> LocatorDescriptor:
    """Match by structural (CSS) selector."""
    return LocatorDescriptor(strategy="structural", matcher=selector)


@dataclass(frozen=True, kw_only=True)
class Locator:
    """A named locator bound to a page.

    Every action resolves the element again: nothing is cached, since the
    document may have been replaced since the last call.
    """

    page: PageDriver
    name: str
    candidates: Sequence[LocatorDescriptor]

    async def resolve(self) -> ElementHandle:
        """Resolve to exactly one element, trying strategies by priority.

        A strategy that matches several elements fails immediately rather
        than falling back to a lower priority strategy.

        Raises:
            LocatorResolutionError: If no strategy yields a single match

        """
        for descriptor in self.candidates:
            matches = await self.page.find(
                descriptor.strategy, descriptor.matcher, descriptor.options
            )
            if len(matches) == 1:
                return matches[0]
            if len(matches) > 1:
                raise LocatorResolutionError(
                    descriptor.strategy, descriptor.describe(), len(matches)
                )

        last = self.candidates[-1]
        raise LocatorResolutionError(last.strategy, last.describe(), 0)

    async def count(self) -> int:
        """Number of matches for the highest priority strategy that matches."""
        for descriptor in self.candidates:
            matches = await self.page.find(
                descriptor.strategy, descriptor.matcher, descriptor.options
            )
            if matches:
                return len(matches)
        return 0

    async def fill(self, text: str) -> None:
        await (await self.resolve()).fill(text)

    async def click(self) -> None:
        await (await self.resolve()).click()

    async def check(self) -> None:
        await (await self.resolve()).check()

    async def focus(self) -> None:
        await (await self.resolve()).focus()

    async def is_visible(self) -> bool:
        return await (await self.resolve()).is_visible()

    async def is_focused(self) -> bool:
        return await (await self.resolve()).is_focused()

    async def is_checked(self) -> bool:
        return await (await self.resolve()).is_checked()

    async def text(self) -> str:
        return await (await self.resolve()).text_content()

    async def contains_text(self, pattern: Matcher) -> bool:
        """Whether the element text contains pattern (substring or regex)."""
        text = await self.text()
        if isinstance(pattern, re.Pattern):
            return pattern.search(text) is not None
        return pattern in text


@dataclass(frozen=True)
class LocatorSet:
    """Declarative locators for one screen, keyed by element name.

    Each entry holds one or more candidate descriptors; candidates are kept
    in strategy priority order (role, label, text, structural).
    """

    entries: Mapping[str, Sequence[LocatorDescriptor]]

    @classmethod
    def of(
        cls, **locators: LocatorDescriptor | Sequence[LocatorDescriptor]
    ) -> "LocatorSet":
        """Build a set from keyword arguments."""
        entries: dict[str, Sequence[LocatorDescriptor]] = {}
        for name, value in locators.items():
            candidates = [value] if isinstance(value, LocatorDescriptor) else list(value)
            if not candidates:
                raise ValueError(f"Locator '{name}' has no candidates")
            candidates.sort(key=lambda d: STRATEGY_PRIORITY.index(d.strategy))
            entries[name] = tuple(candidates)
        return cls(entries)

    def override(
        self, **locators: LocatorDescriptor | Sequence[LocatorDescriptor]
    ) -> "LocatorSet":
        """Return a copy with some entries replaced."""
        merged = dict(self.entries)
        merged.update(LocatorSet.of(**locators).entries)
        return LocatorSet(merged)

    def bind(self, page: PageDriver) -> "BoundLocatorSet":
        """Bind every entry to page without resolving anything."""
        return BoundLocatorSet(
            {
                name: Locator(page=page, name=name, candidates=candidates)
                for name, candidates in self.entries.items()
            }
        )


@dataclass(frozen=True)
class BoundLocatorSet:
    """Locators of a screen bound to one page."""

    locators: Mapping[str, Locator]

    def __getitem__(self, name: str) -> Locator:
        try:
            return self.locators[name]
        except KeyError:
            raise KeyError(
                f"No locator named '{name}'. Known: {sorted(self.locators)}"
            ) from None

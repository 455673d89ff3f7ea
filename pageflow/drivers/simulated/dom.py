"""Minimal document model of the simulated browser."""

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pageflow.drivers.base import Matcher, Strategy
from pageflow.models.cookie import Cookie


@dataclass(kw_only=True, eq=False)
class SimElement:
    """One element. Identity matters: a re-rendered page has new elements."""

    key: str
    role: str | None = None
    name: str = ""
    label: str | None = None
    text: str = ""
    selectors: frozenset[str] = frozenset()
    focusable: bool = False
    visible: bool = True
    value: str = ""
    checked: bool = False
    submits: bool = False

    @property
    def is_checkbox(self) -> bool:
        return self.role == "checkbox"

    @property
    def is_input(self) -> bool:
        return self.role in ("textbox", "searchbox") or "input" in self.selectors

    def describe(self) -> str:
        """Text rendering used for screenshots."""
        state = []
        if self.value:
            state.append("value=***" if "password" in self.selectors else f"value={self.value!r}")
        if self.is_checkbox:
            state.append("checked" if self.checked else "unchecked")
        if not self.visible:
            state.append("hidden")
        label = self.name or self.label or self.text
        return f"<{self.role or 'generic'} {label!r}{' ' if state else ''}{' '.join(state)}>"


@dataclass(kw_only=True, eq=False)
class SimDocument:
    url: str
    title: str
    elements: list[SimElement] = field(default_factory=list)
    focused: SimElement | None = None

    def __iter__(self) -> Iterator[SimElement]:
        return iter(self.elements)

    def form_values(self) -> Mapping[str, str | bool]:
        """Values of every input and checkbox keyed by element key."""
        values: dict[str, str | bool] = {}
        for element in self.elements:
            if element.is_checkbox:
                values[element.key] = element.checked
            elif element.is_input:
                values[element.key] = element.value
        return values

    def tab_order(self) -> list[SimElement]:
        return [e for e in self.elements if e.focusable and e.visible]

    def render_text(self) -> str:
        lines = [f"{self.title} <{self.url}>"]
        lines.extend(
            ("> " if e is self.focused else "  ") + e.describe() for e in self.elements
        )
        return "\n".join(lines) + "\n"


def matches(matcher: Matcher, value: str | None) -> bool:
    """Regex search, or case-insensitive substring for plain strings."""
    if value is None:
        return False
    if isinstance(matcher, re.Pattern):
        return matcher.search(value) is not None
    return matcher.casefold() in value.casefold()


def query(
    document: SimDocument,
    strategy: Strategy,
    matcher: Matcher,
    options: Mapping[str, Any],
) -> list[SimElement]:
    """Elements of document matching one locator strategy."""
    if strategy == "role":
        role = options.get("role")
        return [
            e
            for e in document
            if e.visible and e.role == role and matches(matcher, e.name)
        ]
    if strategy == "label":
        return [e for e in document if matches(matcher, e.label)]
    if strategy == "text":
        return [e for e in document if e.visible and matches(matcher, e.text)]
    if not isinstance(matcher, str):
        raise TypeError("Structural selectors must be strings")
    return [e for e in document if matcher in e.selectors]


class CookieJar:
    """Cookies of one simulated session, keyed by domain and name."""

    def __init__(self) -> None:
        self._cookies: dict[tuple[str, str], Cookie] = {}

    def set(self, cookie: Cookie) -> None:
        self._cookies[(cookie.domain, cookie.name)] = cookie

    def get(self, domain: str, name: str) -> Cookie | None:
        return self._cookies.get((domain, name))

    def all(self) -> list[Cookie]:
        return list(self._cookies.values())

    def clear(self) -> None:
        self._cookies.clear()

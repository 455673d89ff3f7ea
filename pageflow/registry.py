"""Explicit, ordered registry of scenarios and data-driven cases."""

from collections.abc import Iterator, Sequence

from pageflow.cases import DataDrivenCase
from pageflow.errors import DuplicateScenarioError
from pageflow.models.case import CaseRow
from pageflow.steps import Scenario

type Entry = Scenario | DataDrivenCase


class ScenarioRegistry:
    """Scenarios and cases in registration order, unique by name."""

    __test__ = False

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}

    def add(self, entry: Entry) -> Entry:
        """Register an entry.

        Raises:
            DuplicateScenarioError: If the name is already registered

        """
        if entry.name in self._entries:
            raise DuplicateScenarioError(f"Scenario '{entry.name}' is already registered")
        self._entries[entry.name] = entry
        return entry

    def get(self, name: str) -> Entry:
        return self._entries[name]

    def replace_rows(self, name: str, rows: Sequence[CaseRow]) -> None:
        """Swap the rows of a registered data-driven case."""
        entry = self._entries[name]
        if not isinstance(entry, DataDrivenCase):
            raise TypeError(f"'{name}' is a scenario, not a data-driven case")
        self._entries[name] = entry.with_rows(rows)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

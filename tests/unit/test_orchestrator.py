"""Tests for the suite orchestrator."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, patch

from pageflow.cases import DataDrivenCase
from pageflow.fixtures import FixtureProvider
from pageflow.models.case import CaseRow
from pageflow.orchestrator import SuiteOrchestrator
from pageflow.registry import ScenarioRegistry
from pageflow.steps import Scenario, Step, UnitContext
from pageflow.testing.simulated import simulated_provider


async def test_empty_registry_returns_no_results(provider: FixtureProvider) -> None:
    """Nothing registered, nothing run."""
    assert await SuiteOrchestrator(provider=provider).run(ScenarioRegistry()) == []


async def test_results_follow_registration_and_row_order(
    provider: FixtureProvider,
) -> None:
    """Scenario results use the scenario name as id, case rows use row ids."""
    registry = ScenarioRegistry()
    registry.add(Scenario(name="Plain", steps=[Step(name="ok", action=AsyncMock())]))
    registry.add(
        DataDrivenCase(
            template=Scenario(name="Rows", steps=[Step(name="ok", action=AsyncMock())]),
            rows=[CaseRow(id="r1"), CaseRow(id="r2")],
        )
    )

    results = await SuiteOrchestrator(provider=provider).run(registry)

    assert [(r.scenario, r.case_id) for r in results] == [
        ("Plain", "Plain"),
        ("Rows", "r1"),
        ("Rows", "r2"),
    ]
    assert all(r.status == "passed" for r in results)


async def test_units_run_concurrently(tmp_path: Path) -> None:
    """Independent units overlap in time."""
    running = 0
    peak = 0

    async def track(unit: UnitContext) -> None:
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.05)
        running -= 1

    registry = ScenarioRegistry()
    for name in ("a", "b", "c"):
        registry.add(Scenario(name=name, steps=[Step(name="track", action=track)]))

    async with simulated_provider(tmp_path) as provider:
        results = await SuiteOrchestrator(provider=provider).run(registry)

    assert len(results) == 3
    assert peak == 3


async def test_concurrency_limit_spans_all_entries(tmp_path: Path) -> None:
    """Scenarios and case rows share one max_concurrency budget."""
    running = 0
    peak = 0

    async def track(unit: UnitContext) -> None:
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.05)
        running -= 1

    registry = ScenarioRegistry()
    for name in ("a", "b"):
        registry.add(Scenario(name=name, steps=[Step(name="track", action=track)]))
    registry.add(
        DataDrivenCase(
            template=Scenario(name="Rows", steps=[Step(name="track", action=track)]),
            rows=[CaseRow(id="r1"), CaseRow(id="r2")],
        )
    )

    async with simulated_provider(tmp_path, max_concurrency=2) as provider:
        results = await SuiteOrchestrator(provider=provider).run(registry)

    assert len(results) == 4
    assert all(r.status == "passed" for r in results)
    assert peak == 2


async def test_crashed_entry_becomes_failed_result(provider: FixtureProvider) -> None:
    """An unexpected error in one entry does not stop the others."""
    registry = ScenarioRegistry()
    registry.add(Scenario(name="Crashes", steps=[]))
    registry.add(Scenario(name="Fine", steps=[Step(name="ok", action=AsyncMock())]))

    original = SuiteOrchestrator._run_entry

    async def run_entry(
        self: SuiteOrchestrator, entry: object, semaphore: asyncio.Semaphore
    ) -> object:
        if getattr(entry, "name", None) == "Crashes":
            raise RuntimeError("driver exploded")
        return await original(self, entry, semaphore)  # type: ignore[arg-type]

    with patch.object(SuiteOrchestrator, "_run_entry", run_entry):
        results = await SuiteOrchestrator(provider=provider).run(registry)

    crashed, fine = results
    assert crashed.case_id == "Crashes"
    assert crashed.status == "failed"
    assert crashed.step_results[0].name == "setup"
    assert crashed.step_results[0].error is not None
    assert crashed.step_results[0].error.message == "driver exploded"
    assert fine.status == "passed"

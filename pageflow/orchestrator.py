"""Runs every registered scenario and case against one driver."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pageflow.cases import DataDrivenCase, DataDrivenCaseRunner, run_unit
from pageflow.fixtures import FixtureProvider
from pageflow.models.result import CaseResult, ErrorInfo, StepResult
from pageflow.registry import Entry, ScenarioRegistry

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SuiteOrchestrator:
    """Schedules independent units concurrently and collects their results.

    At most ``settings.max_concurrency`` units run at once across all entries.
    """

    provider: FixtureProvider

    async def run(self, registry: ScenarioRegistry) -> Sequence[CaseResult]:
        """Run all registry entries.

        Returns:
            Case results in registration order, rows in row order

        """
        if not len(registry):
            log.info("No scenarios registered")
            return []

        entries = list(registry)
        log.info("Running %d registered entr(ies)...", len(entries))
        semaphore = asyncio.Semaphore(self.provider.settings.max_concurrency)
        results = await asyncio.gather(
            *(self._run_entry(entry, semaphore) for entry in entries),
            return_exceptions=True,
        )
        log.info("Run completed")

        return self._process_results(entries, results)

    async def _run_entry(
        self, entry: Entry, semaphore: asyncio.Semaphore
    ) -> Sequence[CaseResult]:
        if isinstance(entry, DataDrivenCase):
            runner = DataDrivenCaseRunner(provider=self.provider, semaphore=semaphore)
            return await runner.run(entry)
        async with semaphore:
            return [await run_unit(self.provider, entry, unit_id=entry.name)]

    def _process_results(
        self,
        entries: Sequence[Entry],
        results: Sequence[Sequence[CaseResult] | BaseException],
    ) -> Sequence[CaseResult]:
        final_results: list[CaseResult] = []

        for entry, result in zip(entries, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                log.error("Entry '%s' crashed: %s", entry.name, result, exc_info=result)
                final_results.append(
                    CaseResult(
                        case_id=entry.name,
                        scenario=entry.name,
                        step_results=[
                            StepResult(
                                name="setup",
                                status="failed",
                                error=ErrorInfo.from_exception(result),
                            )
                        ],
                    )
                )
                continue
            final_results.extend(result)

        return final_results

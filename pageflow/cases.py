"""Scenario units and data-driven case expansion."""

import asyncio
import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, replace

from pageflow.errors import DuplicateCaseIdError
from pageflow.fixtures import FixtureProvider
from pageflow.models.case import CaseRow
from pageflow.models.result import CaseResult, ErrorInfo, StepResult
from pageflow.steps import Scenario, StepRunner, UnitContext

log = logging.getLogger(__name__)

TEARDOWN_STEP = "teardown"


@dataclass(frozen=True, kw_only=True)
class DataDrivenCase:
    """A scenario template expanded over ordered input rows.

    Each row's declared ``id`` is its case identifier, so reordering rows
    never changes which result belongs to which id.
    """

    template: Scenario
    rows: Sequence[CaseRow]

    def __post_init__(self) -> None:
        duplicates = sorted(
            row_id for row_id, n in Counter(r.id for r in self.rows).items() if n > 1
        )
        if duplicates:
            raise DuplicateCaseIdError(
                f"Case '{self.template.name}' has duplicate row ids: {duplicates}"
            )

    @property
    def name(self) -> str:
        return self.template.name

    def with_rows(self, rows: Sequence[CaseRow]) -> "DataDrivenCase":
        """Same template over a different row collection."""
        return replace(self, rows=tuple(rows))


async def run_unit(
    provider: FixtureProvider,
    scenario: Scenario,
    *,
    unit_id: str,
    row: CaseRow | None = None,
) -> CaseResult:
    """Run one test execution unit in a fresh fixture scope.

    Errors stay inside the unit: step failures end the step sequence and a
    failing teardown is reported as a failed ``teardown`` step.
    """
    inputs = row.format_context() if row is not None else {}
    results: Sequence[StepResult] = ()
    unit: UnitContext | None = None

    async def setup(unit: UnitContext) -> None:
        for hook in scenario.before:
            await hook(unit.scope)
        for key in scenario.fixtures:
            await unit.get(key)

    try:
        async with provider.scope(unit_id, base_url=scenario.base_url) as scope:
            unit = UnitContext(
                unit_id=unit_id, scenario=scenario.name, scope=scope, inputs=inputs
            )
            runner = StepRunner(unit, step_timeout=provider.settings.step_timeout)
            results = await runner.run(scenario.steps, setup=setup)
    except Exception as e:
        log.error("[%s] teardown failed: %s", unit_id, e, exc_info=e)
        results = (
            *results,
            StepResult(
                name=TEARDOWN_STEP, status="failed", error=ErrorInfo.from_exception(e)
            ),
        )

    return CaseResult(
        case_id=unit_id,
        scenario=scenario.name,
        row_inputs=dict(row.inputs) if row is not None else {},
        step_results=results,
        attachments=unit.attachments if unit is not None else (),
        annotations=unit.annotations if unit is not None else (),
    )


@dataclass(frozen=True, kw_only=True)
class DataDrivenCaseRunner:
    """Runs a data-driven case: one isolated unit per row, one result per row."""

    provider: FixtureProvider
    max_concurrency: int = 1
    semaphore: asyncio.Semaphore | None = None

    async def run(self, case: DataDrivenCase) -> Sequence[CaseResult]:
        """Run every row and return results in row order.

        Rows may run concurrently (up to ``max_concurrency``, or as many as
        a shared ``semaphore`` admits); a failure in one row never affects
        another.
        """
        if not case.rows:
            log.info("Case '%s' has no rows", case.name)
            return []

        log.info("Running case '%s' over %d row(s)", case.name, len(case.rows))
        semaphore = self.semaphore
        if semaphore is None:
            semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_row(row: CaseRow) -> CaseResult:
            async with semaphore:
                return await run_unit(
                    self.provider, case.template, unit_id=row.id, row=row
                )

        results = await asyncio.gather(
            *(run_row(row) for row in case.rows), return_exceptions=True
        )
        return [
            self._process_result(case, row, result)
            for row, result in zip(case.rows, results, strict=True)
        ]

    def _process_result(
        self,
        case: DataDrivenCase,
        row: CaseRow,
        result: CaseResult | BaseException,
    ) -> CaseResult:
        if isinstance(result, CaseResult):
            log.info("Case completed: id=%s status=%s", result.case_id, result.status)
            return result

        if not isinstance(result, Exception):
            raise result

        log.error("Row %s of '%s' crashed: %s", row.id, case.name, result, exc_info=result)
        return CaseResult(
            case_id=row.id,
            scenario=case.name,
            row_inputs=dict(row.inputs),
            step_results=[
                StepResult(
                    name="setup",
                    status="failed",
                    error=ErrorInfo.from_exception(result),
                )
            ],
        )

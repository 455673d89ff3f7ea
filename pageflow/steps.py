"""Ordered, fail-fast execution of named steps within one unit."""

import asyncio
import hashlib
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pageflow.fixtures import Fixture, FixtureScope
from pageflow.models.result import Annotation, Attachment, ErrorInfo, StepResult

log = logging.getLogger(__name__)

SETUP_STEP = "setup"

type StepAction = Callable[["UnitContext"], Awaitable[None]]
type BeforeHook = Callable[[FixtureScope], Awaitable[None]]


class RunState(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    FAILED = "failed"
    COMPLETED = "completed"


@dataclass(frozen=True, kw_only=True)
class Step:
    """One named action or assertion.

    The name may reference row inputs, e.g. ``"Enter '{username}'"``.
    """

    name: str
    action: StepAction


@dataclass(frozen=True, kw_only=True)
class Scenario:
    """A registrable scenario: name, ordered steps and fixture requirements."""

    name: str
    steps: Sequence[Step]
    fixtures: Sequence[Fixture[Any]] = ()
    before: Sequence[BeforeHook] = ()
    base_url: str | None = None


class _KeepMissing(dict[str, Any]):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def failure_screenshot_name(scenario: str, unit_id: str) -> str:
    """Screenshot name for a failed unit.

    The digest keeps units apart whose ids only differ in characters that
    file names cannot hold, and equal row ids of different cases.
    """
    digest = hashlib.sha256(f"{scenario}\0{unit_id}".encode()).hexdigest()[:8]
    return f"{unit_id}-{digest}-failed"


def render_name(template: str, values: Mapping[str, Any]) -> str:
    """Fill ``{placeholders}`` from values, leaving unknown ones untouched."""
    if not values:
        return template
    return template.format_map(_KeepMissing(values))


class UnitContext:
    """What the steps of one unit see: fixtures, row inputs and the report."""

    def __init__(
        self,
        *,
        unit_id: str,
        scenario: str,
        scope: FixtureScope,
        inputs: Mapping[str, Any] | None = None,
    ) -> None:
        self.unit_id = unit_id
        self.scenario = scenario
        self.scope = scope
        self.inputs: Mapping[str, Any] = dict(inputs or {})
        self._attachments: list[Attachment] = []
        self._annotations: list[Annotation] = []

    async def get[T](self, key: Fixture[T]) -> T:
        """Typed accessor for a fixture of this unit's scope."""
        return await self.scope.provide(key)

    def attach(self, name: str, body: str, content_type: str = "text/plain") -> None:
        self._attachments.append(
            Attachment(name=name, content_type=content_type, body=body)
        )

    def annotate(self, type: str, description: str) -> None:
        self._annotations.append(Annotation(type=type, description=description))

    @property
    def attachments(self) -> Sequence[Attachment]:
        return tuple(self._attachments)

    @property
    def annotations(self) -> Sequence[Annotation]:
        return tuple(self._annotations)


class StepRunner:
    """Runs the steps of one unit strictly in order, stopping at the first failure.

    States: PENDING -> RUNNING -> FAILED | COMPLETED. A failing step gets a
    screenshot of the active page named after the unit; no later step runs.
    """

    def __init__(self, unit: UnitContext, *, step_timeout: float | None = None) -> None:
        self.unit = unit
        self.step_timeout = step_timeout
        self._state = RunState.PENDING
        self._current: str | None = None
        self._results: list[StepResult] = []

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def current_step(self) -> str | None:
        return self._current

    @property
    def results(self) -> Sequence[StepResult]:
        return tuple(self._results)

    async def run(
        self,
        steps: Sequence[Step],
        *,
        setup: StepAction | None = None,
    ) -> Sequence[StepResult]:
        """Execute steps in declared order.

        Args:
            steps: Steps to run
            setup: Optional preparation (hooks, fixtures); recorded as a
                ``setup`` step only when it fails

        Returns:
            One result per executed step, in execution order

        """
        if self._state is not RunState.PENDING:
            raise RuntimeError(f"StepRunner for {self.unit.unit_id} already ran")
        self._state = RunState.RUNNING

        if setup is not None and not await self._execute(
            SETUP_STEP, setup, record_success=False
        ):
            return self.results

        for step in steps:
            name = render_name(step.name, self.unit.inputs)
            if not await self._execute(name, step.action):
                return self.results

        self._current = None
        self._state = RunState.COMPLETED
        return self.results

    async def _execute(
        self, name: str, action: StepAction, *, record_success: bool = True
    ) -> bool:
        self._current = name
        log.info("[%s] %s", self.unit.unit_id, name)
        try:
            async with asyncio.timeout(self.step_timeout):
                await action(self.unit)
        except TimeoutError as e:
            error = ErrorInfo(
                type="TimeoutError",
                message=str(e) or f"Step timed out after {self.step_timeout}s",
            )
            await self._fail(name, error)
            return False
        except Exception as e:
            log.debug("[%s] step '%s' raised", self.unit.unit_id, name, exc_info=e)
            await self._fail(name, ErrorInfo.from_exception(e))
            return False

        if record_success:
            self._results.append(StepResult(name=name, status="passed"))
        return True

    async def _fail(self, name: str, error: ErrorInfo) -> None:
        log.warning("[%s] step '%s' failed: %s", self.unit.unit_id, name, error.message)
        screenshot_path = await self._capture_failure()
        self._results.append(
            StepResult(
                name=name,
                status="failed",
                error=error,
                screenshot_path=screenshot_path,
            )
        )
        self._state = RunState.FAILED

    async def _capture_failure(self) -> str | None:
        page = self.unit.scope.active_page
        if page is None:
            log.info("[%s] no open page; skipping failure screenshot", self.unit.unit_id)
            return None
        return await page.take_screenshot(
            failure_screenshot_name(self.unit.scenario, self.unit.unit_id)
        )

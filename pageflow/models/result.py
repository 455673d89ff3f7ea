"""Models for step and case execution results."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

type StepStatus = Literal["passed", "failed"]


@dataclass(frozen=True, kw_only=True)
class ErrorInfo:
    """Details of the error that failed a step."""

    type: str
    message: str
    expected: str | None = None
    observed: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        """Build error info, keeping expected/observed when the error has them."""
        expected = getattr(exc, "expected", None)
        observed = getattr(exc, "observed", None)
        return cls(
            type=type(exc).__name__,
            message=str(exc) or type(exc).__name__,
            expected=None if expected is None else str(expected),
            observed=None if observed is None else str(observed),
        )


@dataclass(frozen=True, kw_only=True)
class StepResult:
    """Outcome of one executed step."""

    name: str
    status: StepStatus
    error: ErrorInfo | None = None
    screenshot_path: str | None = None


@dataclass(frozen=True, kw_only=True)
class Attachment:
    """Named payload attached to a case report."""

    name: str
    content_type: str
    body: str


@dataclass(frozen=True, kw_only=True)
class Annotation:
    """Free-form key/description pair attached to a case report."""

    type: str
    description: str


@dataclass(frozen=True, kw_only=True)
class CaseResult:
    """Result of one test execution unit (a scenario or one data-driven row).

    Owned by the run that produced it; never shared across rows.
    """

    __test__ = False

    case_id: str
    scenario: str
    row_inputs: Mapping[str, Any] = field(default_factory=dict)
    step_results: Sequence[StepResult] = ()
    attachments: Sequence[Attachment] = ()
    annotations: Sequence[Annotation] = ()

    @property
    def status(self) -> StepStatus:
        """Failed when any step failed, passed otherwise."""
        if any(step.status == "failed" for step in self.step_results):
            return "failed"
        return "passed"

    @property
    def failed_step(self) -> StepResult | None:
        """First failing step, if any."""
        return next(
            (step for step in self.step_results if step.status == "failed"), None
        )

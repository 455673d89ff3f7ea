"""Tests for CLI module."""

import json
import logging
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from pageflow.cli import (
    build_registry,
    format_output,
    log_results_summary,
    main,
    redact_inputs,
    run,
)
from pageflow.config import RunSettings
from pageflow.drivers.simulated import simulated_manifest
from pageflow.errors import SuiteNotFoundError
from pageflow.models.result import (
    Annotation,
    Attachment,
    CaseResult,
    ErrorInfo,
    StepResult,
)
from pageflow.registry import ScenarioRegistry
from pageflow.steps import Scenario, Step
from pageflow.suites import practice_login
from pageflow.testing.factories import CaseResultFactory
from pageflow.testing.simulated import fast_settings


def failed_result() -> CaseResult:
    return CaseResult(
        case_id="TC_001-keyboard",
        scenario="TC_001 Remember-me interaction paths",
        row_inputs={"username": "valid_citizen_01"},
        step_results=[
            StepResult(name="1. Open login page", status="passed"),
            StepResult(
                name="4. Verify session cookie",
                status="failed",
                error=ErrorInfo(
                    type="PageAssertionError",
                    message="Session cookie should be Secure",
                    expected="True",
                    observed="False",
                ),
                screenshot_path="test-results/screenshots/TC_001-keyboard-failed.png",
            ),
        ],
    )


def test_log_results_summary_success(caplog: pytest.LogCaptureFixture) -> None:
    """Logs passed results with checkmark symbol."""
    result = CaseResultFactory.build(case_id="TC001", scenario="Login Functionality")

    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), [result])

    assert "Case Results Summary:" in caplog.text
    assert "✅ Login Functionality [TC001]: passed (1 step(s))" in caplog.text


def test_log_results_summary_failure(caplog: pytest.LogCaptureFixture) -> None:
    """Logs the failing step, its error and screenshot."""
    with caplog.at_level(logging.INFO):
        log_results_summary(logging.getLogger(), [failed_result()])

    assert "❌ TC_001 Remember-me interaction paths [TC_001-keyboard]: failed" in caplog.text
    assert "Failed step: 4. Verify session cookie" in caplog.text
    assert "Error: PageAssertionError: Session cookie should be Secure" in caplog.text
    assert "Screenshot: test-results/screenshots/TC_001-keyboard-failed.png" in caplog.text


def test_redact_inputs_masks_secrets() -> None:
    """Password-like keys are masked, others kept."""
    assert redact_inputs({"username": "practice", "Password": "x", "api_secret": "y"}) == {
        "username": "practice",
        "Password": "***",
        "api_secret": "***",
    }


def test_format_output_empty() -> None:
    """Returns empty totals when no results."""
    assert format_output([]) == {"total": 0, "passed": 0, "failed": 0, "results": []}


def test_format_output_mixed_results() -> None:
    """Formats totals and per-step details."""
    passed = CaseResult(
        case_id="TC001",
        scenario="Login Functionality",
        row_inputs={"username": "practice", "password": "SuperSecretPassword!"},
        step_results=[StepResult(name="1. Navigate to the login page", status="passed")],
        annotations=[Annotation(type="Test Case ID", description="TC001")],
        attachments=[Attachment(name="Test Report for TC001", content_type="text/plain", body="ok")],
    )

    output = format_output([passed, failed_result()])

    assert output["total"] == 2
    assert output["passed"] == 1
    assert output["failed"] == 1
    first, second = output["results"]
    assert first["row_inputs"] == {"username": "practice", "password": "***"}
    assert first["annotations"] == [{"type": "Test Case ID", "description": "TC001"}]
    assert first["attachments"][0]["name"] == "Test Report for TC001"
    assert second["steps"][1]["error"] == {
        "type": "PageAssertionError",
        "message": "Session cookie should be Secure",
        "expected": "True",
        "observed": "False",
    }
    assert second["steps"][0]["error"] is None


class TestBuildRegistry:
    """Tests for build_registry function."""

    async def test_registers_requested_suites(self) -> None:
        """Each suite key's register function is called in order."""
        registered: list[str] = []

        def register(name: str) -> Mock:
            return Mock(side_effect=lambda registry: registered.append(name))

        with patch(
            "pageflow.cli.load_suite", side_effect=lambda key: register(key)
        ) as mock_load:
            await build_registry(["citizen-auth", "practice-login"])

        assert registered == ["citizen-auth", "practice-login"]
        assert mock_load.call_count == 2

    async def test_unknown_suite_propagates(self) -> None:
        """Unknown suite keys raise SuiteNotFoundError."""
        with (
            patch("pageflow.cli.load_suite", side_effect=SuiteNotFoundError("nope")),
            pytest.raises(SuiteNotFoundError),
        ):
            await build_registry(["nope"])

    async def test_cases_file_replaces_rows(self, tmp_path: Path) -> None:
        """Rows of a registered case come from the cases file."""
        cases_file = tmp_path / "cases.yaml"
        cases_file.write_text(
            """
version: "1.0"
cases:
  Login Functionality:
    - id: TC002
      description: other row
      inputs:
        username: someone
        password: secret
        expected_url: https://practice.expandtesting.com/secure
"""
        )

        with patch("pageflow.cli.load_suite", return_value=practice_login.register):
            registry = await build_registry(["practice-login"], cases_file)

        case = registry.get("Login Functionality")
        assert [row.id for row in case.rows] == ["TC002"]  # type: ignore[union-attr]

    async def test_cases_file_with_unknown_case(self, tmp_path: Path) -> None:
        """Raises ValueError when the file names an unregistered case."""
        cases_file = tmp_path / "cases.yaml"
        cases_file.write_text('version: "1.0"\ncases:\n  Missing:\n    - id: X\n')

        with (
            patch("pageflow.cli.load_suite", return_value=practice_login.register),
            pytest.raises(ValueError, match="unknown case 'Missing'"),
        ):
            await build_registry(["practice-login"], cases_file)


class TestRun:
    """Tests for run function."""

    @pytest.fixture
    def settings(self, tmp_path: Path) -> RunSettings:
        return fast_settings(tmp_path / "screenshots")

    async def test_returns_zero_when_nothing_registered(
        self, settings: RunSettings, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Returns 0 and prints empty results when suites register nothing."""
        with (
            patch("pageflow.cli.load_driver_manifest", return_value=simulated_manifest),
            patch("pageflow.cli.load_suite", return_value=lambda registry: None),
        ):
            exit_code = await run(
                driver_key="simulated",
                driver_config_json="{}",
                suite_keys=["empty"],
                settings=settings,
            )

        assert exit_code == 0
        assert '"total": 0' in capsys.readouterr().out

    async def test_returns_zero_when_all_cases_pass(
        self, settings: RunSettings, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Runs the practice suite on the simulated browser."""
        with (
            patch("pageflow.cli.load_driver_manifest", return_value=simulated_manifest),
            patch("pageflow.cli.load_suite", return_value=practice_login.register),
        ):
            exit_code = await run(
                driver_key="simulated",
                driver_config_json="{}",
                suite_keys=["practice-login"],
                settings=settings,
            )

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["passed"] == 1
        assert output["results"][0]["case_id"] == "TC001"
        assert output["results"][0]["row_inputs"]["password"] == "***"

    async def test_returns_one_when_a_case_fails(
        self, settings: RunSettings, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Returns 1 when any case fails."""

        async def boom(unit: object) -> None:
            raise AssertionError("nope")

        def register(registry: ScenarioRegistry) -> None:
            registry.add(Scenario(name="Broken", steps=[Step(name="boom", action=boom)]))

        with (
            patch("pageflow.cli.load_driver_manifest", return_value=simulated_manifest),
            patch("pageflow.cli.load_suite", return_value=register),
        ):
            exit_code = await run(
                driver_key="simulated",
                driver_config_json='{"latency": 0}',
                suite_keys=["broken"],
                settings=settings,
            )

        assert exit_code == 1
        output = json.loads(capsys.readouterr().out)
        assert output["failed"] == 1
        assert output["results"][0]["steps"][0]["error"]["message"] == "nope"


class TestMain:
    """Tests for command line parsing."""

    def test_driver_is_required(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Exits with a usage error instead of picking a driver."""
        monkeypatch.setattr("sys.argv", ["pageflow", "--suite", "citizen-auth"])

        with (
            patch("pageflow.cli.run") as run_mock,
            pytest.raises(SystemExit) as exc_info,
        ):
            main()

        assert exc_info.value.code == 2
        assert "--driver" in capsys.readouterr().err
        run_mock.assert_not_called()

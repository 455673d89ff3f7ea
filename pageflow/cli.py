"""CLI entry point for running page flow suites."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pageflow.case_loader import load_case_rows
from pageflow.config import RunSettings
from pageflow.fixtures import FixtureProvider
from pageflow.models.result import CaseResult
from pageflow.orchestrator import SuiteOrchestrator
from pageflow.plugins import load_driver_manifest, load_suite
from pageflow.registry import ScenarioRegistry

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
}

REDACTED = "***"


def log_results_summary(log: logging.Logger, case_results: Sequence[CaseResult]) -> None:
    """Log a formatted summary of case results with failure details."""
    log.info("=" * 80)
    log.info("Case Results Summary:")
    log.info("=" * 80)

    for result in case_results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s [%s]: %s (%d step(s))",
            symbol,
            result.scenario,
            result.case_id,
            result.status,
            len(result.step_results),
        )
        if (failed := result.failed_step) is not None:
            log.info("  Failed step: %s", failed.name)
            if failed.error is not None:
                log.info("  Error: %s: %s", failed.error.type, failed.error.message)
            if failed.screenshot_path:
                log.info("  Screenshot: %s", failed.screenshot_path)


def redact_inputs(inputs: Mapping[str, Any]) -> dict[str, Any]:
    """Mask secret-looking row inputs before they are reported."""
    return {
        key: REDACTED if "password" in key.lower() or "secret" in key.lower() else value
        for key, value in inputs.items()
    }


def format_output(case_results: Sequence[CaseResult]) -> dict[str, Any]:
    """Format case results for JSON output."""
    results: list[dict[str, Any]] = []
    for result in case_results:
        results.append(
            {
                "case_id": result.case_id,
                "scenario": result.scenario,
                "status": result.status,
                "row_inputs": redact_inputs(result.row_inputs),
                "steps": [
                    {
                        "name": step.name,
                        "status": step.status,
                        "error": None
                        if step.error is None
                        else {
                            "type": step.error.type,
                            "message": step.error.message,
                            "expected": step.error.expected,
                            "observed": step.error.observed,
                        },
                        "screenshot_path": step.screenshot_path,
                    }
                    for step in result.step_results
                ],
                "annotations": [
                    {"type": a.type, "description": a.description}
                    for a in result.annotations
                ],
                "attachments": [
                    {"name": a.name, "content_type": a.content_type, "body": a.body}
                    for a in result.attachments
                ],
            }
        )

    return {
        "total": len(results),
        "passed": sum(1 for r in results if r["status"] == "passed"),
        "failed": sum(1 for r in results if r["status"] == "failed"),
        "results": results,
    }


async def build_registry(
    suite_keys: Sequence[str], cases_file: Path | None = None
) -> ScenarioRegistry:
    """Register the requested suites, then apply row overrides from a cases file."""
    registry = ScenarioRegistry()
    for key in suite_keys:
        load_suite(key)(registry)

    if cases_file is not None:
        case_rows = await load_case_rows(cases_file)
        for name, rows in case_rows.cases.items():
            if name not in registry:
                raise ValueError(f"Cases file references unknown case '{name}'")
            registry.replace_rows(name, rows)

    return registry


async def run(
    driver_key: str,
    driver_config_json: str,
    suite_keys: Sequence[str],
    settings: RunSettings,
    cases_file: Path | None = None,
) -> int:
    """Run suites and return exit code."""
    log = logging.getLogger("pageflow")

    log.info("Loading driver: %s", driver_key)
    manifest = load_driver_manifest(driver_key)

    config_dict = json.loads(driver_config_json)
    config = manifest.config_cls(**config_dict)

    log.info("Registering suites: %s", ", ".join(suite_keys))
    registry = await build_registry(suite_keys, cases_file)

    if not len(registry):
        log.info("No scenarios registered")
        print(json.dumps({"total": 0, "results": []}))
        return 0

    async with manifest.driver_factory(config) as driver:
        provider = FixtureProvider(driver=driver, settings=settings)
        orchestrator = SuiteOrchestrator(provider=provider)
        case_results = await orchestrator.run(registry)

    log_results_summary(log, case_results)

    output = format_output(case_results)
    print(json.dumps(output, indent=2))

    return 1 if any(result.status == "failed" for result in case_results) else 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run page object authentication suites against a browser driver"
    )
    parser.add_argument(
        "--driver",
        required=True,
        help="Driver key (playwright, simulated)",
    )
    parser.add_argument(
        "--driver-config",
        default="{}",
        help="JSON configuration for the driver",
    )
    parser.add_argument(
        "--suite",
        action="append",
        dest="suites",
        required=True,
        help="Suite key to run (citizen-auth, practice-login); repeatable",
    )
    parser.add_argument(
        "--cases-file",
        type=Path,
        default=None,
        help="YAML file replacing the rows of data-driven cases",
    )
    parser.add_argument(
        "--screenshot-dir",
        type=Path,
        default=None,
        help="Directory for screenshots (default: PAGEFLOW_SCREENSHOT_DIR or test-results/screenshots)",
    )
    parser.add_argument(
        "--step-timeout",
        type=float,
        default=None,
        help="Seconds a single step may run",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    overrides: dict[str, Any] = {}
    if args.screenshot_dir is not None:
        overrides["screenshot_dir"] = args.screenshot_dir
    if args.step_timeout is not None:
        overrides["step_timeout"] = args.step_timeout
    settings = RunSettings(**overrides)

    exit_code = asyncio.run(
        run(
            driver_key=args.driver,
            driver_config_json=args.driver_config,
            suite_keys=args.suites,
            settings=settings,
            cases_file=args.cases_file,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

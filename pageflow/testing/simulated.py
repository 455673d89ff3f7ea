"""Helpers wiring the simulated browser into fixture providers for tests."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from pageflow.config import RunSettings
from pageflow.drivers.simulated import SimulatedBrowser, SimulatedConfig
from pageflow.fixtures import FixtureProvider, TeardownHook


def fast_settings(screenshot_dir: Path, **overrides: Any) -> RunSettings:
    """Run settings with short timeouts, suited to the in-memory browser."""
    values: dict[str, Any] = {
        "screenshot_dir": screenshot_dir,
        "step_timeout": 5.0,
        "assertion_timeout": 0.05,
        "poll_interval": 0.01,
    }
    values.update(overrides)
    return RunSettings(**values)


@asynccontextmanager
async def simulated_provider(
    screenshot_dir: Path,
    *,
    config: SimulatedConfig | None = None,
    teardown_hooks: tuple[TeardownHook, ...] = (),
    **settings: Any,
) -> AsyncGenerator[FixtureProvider, None]:
    """Fixture provider backed by a fresh simulated browser."""
    async with SimulatedBrowser.from_config(config or SimulatedConfig()) as browser:
        yield FixtureProvider(
            driver=browser,
            settings=fast_settings(screenshot_dir, **settings),
            teardown_hooks=teardown_hooks,
        )

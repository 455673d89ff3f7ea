"""Shared fixtures for unit tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from pageflow.drivers.simulated import SimulatedBrowser, SimulatedConfig
from pageflow.fixtures import FixtureProvider
from pageflow.testing.simulated import fast_settings


@pytest.fixture
def screenshot_dir(tmp_path: Path) -> Path:
    """Directory screenshots are written to."""
    return tmp_path / "screenshots"


@pytest.fixture
async def browser() -> AsyncGenerator[SimulatedBrowser, None]:
    """Simulated browser with default demo sites."""
    async with SimulatedBrowser.from_config(SimulatedConfig()) as browser:
        yield browser


@pytest.fixture
def provider(browser: SimulatedBrowser, screenshot_dir: Path) -> FixtureProvider:
    """Fixture provider over the simulated browser with short timeouts."""
    return FixtureProvider(driver=browser, settings=fast_settings(screenshot_dir))

"""Playwright driver manifest."""

from pageflow.drivers.manifest import DriverManifest
from pageflow.drivers.playwright.config import PlaywrightConfig
from pageflow.drivers.playwright.driver import PlaywrightBrowser

playwright_manifest = DriverManifest(
    config_cls=PlaywrightConfig,
    driver_factory=PlaywrightBrowser.from_config,
)

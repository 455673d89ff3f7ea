"""Playwright driver module."""

from pageflow.drivers.playwright.config import PlaywrightConfig
from pageflow.drivers.playwright.driver import PlaywrightBrowser
from pageflow.drivers.playwright.manifest import playwright_manifest

__all__ = ["PlaywrightBrowser", "PlaywrightConfig", "playwright_manifest"]

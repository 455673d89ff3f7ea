"""Configuration for the Playwright driver."""

from typing import Literal

from pydantic import BaseModel, Field


class PlaywrightConfig(BaseModel):
    """Configuration for the Playwright driver."""

    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    timeout_ms: float = Field(default=10_000, gt=0)
    ignore_https_errors: bool = False
    viewport_width: int = Field(default=1280, ge=1)
    viewport_height: int = Field(default=720, ge=1)

"""Process-wide, read-only configuration.

Credentials and endpoints are loaded once and shared by every test execution
unit; nothing in a run mutates them.
"""

from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pageflow.models.base import Model


class Credentials(Model):
    """Username and password pair for one login."""

    username: str = Field(..., min_length=1)
    password: SecretStr


class EndpointConfig(Model):
    """Named target URLs of a site under test."""

    base_url: str = Field(..., description="Login page URL")
    dashboard_url: str | None = Field(
        default=None, description="Landing page after a successful login"
    )

    @field_validator("base_url", "dashboard_url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Only absolute http(s) URLs are accepted."""
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v


class RunSettings(BaseSettings):
    """Execution settings, overridable with PAGEFLOW_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAGEFLOW_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    screenshot_dir: Path = Field(
        default=Path("test-results/screenshots"),
        description="Directory screenshots are written to",
    )
    step_timeout: float | None = Field(
        default=30.0, gt=0, description="Seconds a single step may run"
    )
    assertion_timeout: float = Field(
        default=5.0, ge=0, description="Seconds page assertions keep polling"
    )
    poll_interval: float = Field(
        default=0.1, gt=0, description="Seconds between assertion polls"
    )
    max_concurrency: int = Field(
        default=4,
        ge=1,
        description="Units executed concurrently across the whole run",
    )

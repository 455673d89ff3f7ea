"""Configuration for the simulated browser."""

from collections.abc import Mapping

from pydantic import BaseModel, Field, SecretStr


class SimulatedConfig(BaseModel):
    """Configuration for the simulated browser."""

    citizen_accounts: Mapping[str, SecretStr] = Field(
        default_factory=lambda: {"valid_citizen_01": SecretStr("SecurePass123!")}
    )
    practice_accounts: Mapping[str, SecretStr] = Field(
        default_factory=lambda: {"practice": SecretStr("SuperSecretPassword!")}
    )
    session_cookie_secure: bool = True
    session_cookie_http_only: bool = True
    # Seconds added to every driver call; lets tests observe interleaving
    latency: float = Field(default=0.0, ge=0)
    screenshots_enabled: bool = True

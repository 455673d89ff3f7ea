"""Base model for configuration and case row data."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model rejecting unknown fields, so typos in cases files fail loudly."""

    model_config = ConfigDict(frozen=True, extra="forbid")

"""Models for data-driven case rows loaded from code or YAML files."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import Field

from pageflow.models.base import Model


class CaseRow(Model):
    """One input row of a data-driven case."""

    id: str = Field(..., min_length=1, description="Stable case identifier")
    description: str = Field(default="", description="Human-readable row summary")
    inputs: Mapping[str, Any] = Field(
        default_factory=dict, description="Values the scenario steps read"
    )

    def format_context(self) -> Mapping[str, Any]:
        """Values available to step and case name templates."""
        return {**self.inputs, "id": self.id, "description": self.description}


class CaseRows(Model):
    """Complete set of rows loaded from a cases file."""

    version: str = Field(..., description="Cases file schema version")
    cases: Mapping[str, Sequence[CaseRow]] = Field(
        default_factory=dict, description="Rows keyed by scenario name"
    )

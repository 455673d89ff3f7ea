"""Tests for the cases file loader."""

from pathlib import Path

import pytest

from pageflow.case_loader import load_case_rows


class TestLoadCaseRows:
    """Tests for load_case_rows function."""

    async def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads and parses a valid cases file."""
        path = tmp_path / "cases.yaml"
        path.write_text(
            """
version: "1.0"
cases:
  Login Functionality:
    - id: TC001
      description: valid login
      inputs:
        username: practice
        expected_url: https://practice.expandtesting.com/secure
    - id: TC002
"""
        )

        case_rows = await load_case_rows(path)

        assert case_rows.version == "1.0"
        rows = case_rows.cases["Login Functionality"]
        assert [row.id for row in rows] == ["TC001", "TC002"]
        assert rows[0].inputs["username"] == "practice"
        assert rows[1].inputs == {}
        assert rows[1].description == ""

    async def test_missing_file(self, tmp_path: Path) -> None:
        """Raises FileNotFoundError when the file does not exist."""
        with pytest.raises(FileNotFoundError, match="Cases file not found"):
            await load_case_rows(tmp_path / "missing.yaml")

    async def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ValueError for malformed YAML."""
        path = tmp_path / "cases.yaml"
        path.write_text("version: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            await load_case_rows(path)

    async def test_empty_file(self, tmp_path: Path) -> None:
        """Raises ValueError for an empty file."""
        path = tmp_path / "cases.yaml"
        path.write_text("")

        with pytest.raises(ValueError, match="Empty cases file"):
            await load_case_rows(path)

    async def test_invalid_schema(self, tmp_path: Path) -> None:
        """Raises ValueError when rows fail validation."""
        path = tmp_path / "cases.yaml"
        path.write_text('version: "1.0"\ncases:\n  Login:\n    - id: ""\n')

        with pytest.raises(ValueError, match="Invalid cases file schema"):
            await load_case_rows(path)

    async def test_unknown_row_field(self, tmp_path: Path) -> None:
        """Misspelled row keys are rejected instead of ignored."""
        path = tmp_path / "cases.yaml"
        path.write_text('version: "1.0"\ncases:\n  Login:\n    - id: TC001\n      input: {}\n')

        with pytest.raises(ValueError, match="Invalid cases file schema"):
            await load_case_rows(path)

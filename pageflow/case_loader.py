"""Load data-driven case rows from YAML files."""

import asyncio
from pathlib import Path

import yaml
from pydantic import ValidationError

from pageflow.models.case import CaseRows


async def load_case_rows(path: Path) -> CaseRows:
    """Load and validate a cases file.

    Args:
        path: Path to a YAML file with ``version`` and ``cases`` keys

    Returns:
        Parsed rows keyed by scenario name

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty, malformed or fails validation

    """
    if not path.is_file():
        raise FileNotFoundError(f"Cases file not found: {path}")

    content = await asyncio.to_thread(path.read_text)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty cases file: {path}")

    try:
        return CaseRows.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid cases file schema in {path}: {e}") from e

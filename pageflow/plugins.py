"""Loading of drivers and suites from entry points."""

from collections.abc import Callable
from importlib.metadata import entry_points
from typing import TYPE_CHECKING, Any

from pageflow.drivers.manifest import DriverManifest
from pageflow.errors import DriverNotFoundError, PageflowError, SuiteNotFoundError

if TYPE_CHECKING:
    from pageflow.registry import ScenarioRegistry

DRIVER_ENTRY_POINT_GROUP = "pageflow.drivers"
SUITE_ENTRY_POINT_GROUP = "pageflow.suites"

type SuiteRegistrar = Callable[["ScenarioRegistry"], None]


def _load_entry_point(group: str, key: str, error_cls: type[PageflowError]) -> Any:
    entries = entry_points(group=group)

    for entry in entries:
        if entry.name == key:
            return entry.load()

    available = [e.name for e in entries]
    raise error_cls(f"'{key}' not found in {group}. Available: {available}")


def load_driver_manifest(key: str) -> DriverManifest[Any]:
    """Load a driver manifest by key.

    Args:
        key: The driver key as registered in pyproject.toml
             (e.g., "playwright", "simulated")

    Returns:
        The driver manifest instance

    Raises:
        DriverNotFoundError: If no driver with the given key is found

    """
    manifest: DriverManifest[Any] = _load_entry_point(
        DRIVER_ENTRY_POINT_GROUP, key, DriverNotFoundError
    )
    return manifest


def load_suite(key: str) -> SuiteRegistrar:
    """Load a suite's ``register`` function by key.

    Raises:
        SuiteNotFoundError: If no suite with the given key is found

    """
    register: SuiteRegistrar = _load_entry_point(
        SUITE_ENTRY_POINT_GROUP, key, SuiteNotFoundError
    )
    return register

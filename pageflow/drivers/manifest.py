"""Driver manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from pageflow.drivers.base import BrowserDriver


@dataclass(frozen=True, kw_only=True)
class DriverManifest[ConfigT: BaseModel]:
    """Manifest describing a driver plugin.

    The manifest contains references to the configuration class and the
    driver factory function for lazy loading of drivers based on their key.
    """

    config_cls: type[ConfigT]
    driver_factory: Callable[[ConfigT], AbstractAsyncContextManager[BrowserDriver]]

"""Simulated browser manifest."""

from pageflow.drivers.manifest import DriverManifest
from pageflow.drivers.simulated.config import SimulatedConfig
from pageflow.drivers.simulated.driver import SimulatedBrowser

simulated_manifest = DriverManifest(
    config_cls=SimulatedConfig,
    driver_factory=SimulatedBrowser.from_config,
)

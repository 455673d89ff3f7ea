"""Simulated browser driver module."""

from pageflow.drivers.simulated.config import SimulatedConfig
from pageflow.drivers.simulated.driver import SimulatedBrowser
from pageflow.drivers.simulated.manifest import simulated_manifest

__all__ = ["SimulatedBrowser", "SimulatedConfig", "simulated_manifest"]

"""Rules engine, clock, notation and game recorder for a sensor-driven chess board."""

__version__ = "0.1.0"
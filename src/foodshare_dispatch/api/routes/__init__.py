"""Route group exports."""

from . import deliveries, geocoding, health, routes

__all__ = ["deliveries", "geocoding", "health", "routes"]

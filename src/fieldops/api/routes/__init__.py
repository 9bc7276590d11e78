"""Route group exports."""

from . import batch, health, proximity, routes, selections

__all__ = ["batch", "health", "proximity", "routes", "selections"]

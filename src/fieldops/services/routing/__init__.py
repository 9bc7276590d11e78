"""Route ordering, statistics and map links."""

from .maps import BrowserMapLauncher, MapStop, generate_map_url, open_map_application
from .models import RouteResult, RouteSegment, RouteStats
from .optimizer import calculate_route_stats, optimize_route, route_summary, validate_for_routing

__all__ = [
    "BrowserMapLauncher",
    "MapStop",
    "RouteResult",
    "RouteSegment",
    "RouteStats",
    "calculate_route_stats",
    "generate_map_url",
    "open_map_application",
    "optimize_route",
    "route_summary",
    "validate_for_routing",
]

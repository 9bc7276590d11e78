"""Links into external map applications for an ordered route."""

from __future__ import annotations

import logging
import re
import webbrowser
from dataclasses import dataclass
from typing import Literal, Optional, Protocol, Sequence

import httpx

from ...models.domain import Coordinate
from .models import RouteResult

logger = logging.getLogger(__name__)

MapProvider = Literal["google", "apple"]

GOOGLE_DIRECTIONS_URL = "https://www.google.com/maps/dir"
APPLE_MAPS_URL = "https://maps.apple.com/"

_IOS_AGENT = re.compile(r"iphone|ipad|ipod")


@dataclass(slots=True, frozen=True)
class MapStop:
    coordinate: Coordinate
    address: Optional[str] = None

    @property
    def latlng(self) -> str:
        return f"{self.coordinate.lat},{self.coordinate.lng}"


@dataclass(slots=True, frozen=True)
class MapAvailability:
    google_maps: bool
    apple_maps: bool
    default_provider: MapProvider


class MapLauncher(Protocol):
    def launch(self, stops: Sequence[MapStop], provider: MapProvider) -> bool:
        """Open ``stops`` (origin first) in the provider's app; True when it was launched."""
        ...


def detect_map_provider(user_agent: str | None) -> MapProvider:
    if user_agent and _IOS_AGENT.search(user_agent.lower()):
        return "apple"
    return "google"


def check_map_availability(user_agent: str | None) -> MapAvailability:
    is_ios = detect_map_provider(user_agent) == "apple"
    return MapAvailability(
        google_maps=True,
        apple_maps=is_ios,
        default_provider="apple" if is_ios else "google",
    )


def build_directions_url(stops: Sequence[MapStop], provider: MapProvider = "google") -> str:
    """Build a directions URL; ``stops[0]`` is the origin, the rest are visited in order."""
    if len(stops) < 2:
        return ""
    origin, destinations = stops[0], list(stops[1:])

    if provider == "apple":
        # Apple Maps takes a single destination; the address searches better than raw coordinates.
        first = destinations[0]
        url = httpx.URL(APPLE_MAPS_URL, params={"daddr": first.address or first.latlng, "saddr": origin.latlng})
        return str(url)

    final = destinations[-1]
    url = httpx.URL(f"{GOOGLE_DIRECTIONS_URL}/{origin.latlng}/{final.latlng}")
    waypoints = "|".join(stop.latlng for stop in destinations[:-1])
    if waypoints:
        url = url.copy_merge_params({"waypoints": waypoints})
    return str(url)


def route_stops(result: RouteResult, start: Coordinate) -> list[MapStop]:
    stops = [MapStop(coordinate=start)]
    stops.extend(
        MapStop(coordinate=order.coordinate, address=order.address)
        for order in result.ordered
        if order.coordinate is not None
    )
    return stops


def generate_map_url(result: RouteResult, start: Coordinate, provider: MapProvider = "google") -> str:
    return build_directions_url(route_stops(result, start), provider)


class BrowserMapLauncher:
    """Open the directions URL with the system web browser."""

    def launch(self, stops: Sequence[MapStop], provider: MapProvider) -> bool:
        url = build_directions_url(stops, provider)
        if not url:
            return False
        return webbrowser.open(url, new=2)


def open_map_application(
    result: RouteResult,
    start: Coordinate,
    launcher: MapLauncher,
    preferred_provider: MapProvider | None = None,
    user_agent: str | None = None,
) -> bool:
    availability = check_map_availability(user_agent)
    provider = preferred_provider or availability.default_provider
    if provider == "apple" and not availability.apple_maps:
        provider = "google"

    stops = route_stops(result, start)
    if len(stops) < 2:
        logger.error("No valid work orders with coordinates for route planning")
        return False

    try:
        launched = launcher.launch(stops, provider)
    except Exception as exc:
        logger.error(f"Failed to open map application: {exc}")
        return False
    if not launched:
        logger.warning(f"Map launcher declined to open {provider} maps")
    return launched

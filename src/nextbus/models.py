"""Data models for the NextBus public XML feed.

Every attribute is stored exactly as the feed sent it. Numeric-looking values
stay text; use the explicit accessors when a parsed value is needed.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Tuple


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _position(lat: str, lon: str) -> Tuple[float, float]:
    return float(lat), float(lon)


@dataclass(frozen=True)
class Agency:
    """A transit operator served by the feed."""
    tag: str = ""
    title: str = ""
    region_title: str = ""


@dataclass(frozen=True)
class Route:
    """Summary entry from a route list."""
    tag: str = ""
    title: str = ""


@dataclass(frozen=True)
class Stop:
    """A physical stop on a route."""
    tag: str = ""
    title: str = ""
    lat: str = ""
    lon: str = ""
    stop_id: str = ""  # Route-independent identifier

    def position(self) -> Tuple[float, float]:
        """Return (lat, lon) as floats. Raises ValueError on bad text."""
        return _position(self.lat, self.lon)


@dataclass(frozen=True)
class StopMarker:
    """Reference to a route stop by tag, as listed under a direction."""
    tag: str = ""


@dataclass(frozen=True)
class Direction:
    """One travel direction of a route, e.g. inbound or outbound."""
    tag: str = ""
    title: str = ""
    name: str = ""
    use_for_ui: str = ""
    stop_markers: Tuple[StopMarker, ...] = ()

    def is_ui_visible(self) -> bool:
        """Interpret ``useForUI``. Raises ValueError unless it is true/false."""
        value = self.use_for_ui.strip().lower()
        if value not in ("true", "false"):
            raise ValueError(f"useForUI is not a boolean: {self.use_for_ui!r}")
        return value == "true"


@dataclass(frozen=True)
class Point:
    """A single lat/lon vertex of a route path."""
    lat: str = ""
    lon: str = ""

    def position(self) -> Tuple[float, float]:
        """Return (lat, lon) as floats. Raises ValueError on bad text."""
        return _position(self.lat, self.lon)


@dataclass(frozen=True)
class Path:
    """Polyline segment of a route's geometry."""
    points: Tuple[Point, ...] = ()


@dataclass(frozen=True)
class RouteConfig:
    """Full metadata for one route: stops, directions and geometry."""
    tag: str = ""
    title: str = ""
    color: str = ""
    opposite_color: str = ""
    lat_min: str = ""
    lat_max: str = ""
    lon_min: str = ""
    lon_max: str = ""
    stops: Tuple[Stop, ...] = ()
    directions: Tuple[Direction, ...] = ()
    paths: Tuple[Path, ...] = ()  # Empty when requested with terse


@dataclass(frozen=True)
class Prediction:
    """One vehicle arrival estimate."""
    epoch_time: str = ""  # Milliseconds since the Unix epoch
    seconds: str = ""
    minutes: str = ""
    is_departure: str = ""
    affected_by_layover: str = ""
    dir_tag: str = ""
    vehicle: str = ""
    vehicles_in_consist: str = ""
    block: str = ""
    trip_tag: str = ""

    def arrival_time(self) -> datetime:
        """
        Convert ``epoch_time`` to a UTC datetime.

        Raises:
            ValueError: If epoch_time is not an integer.
        """
        return _EPOCH + timedelta(milliseconds=int(self.epoch_time))

    def seconds_until(self) -> int:
        """Return ``seconds`` as an int. Raises ValueError on bad text."""
        return int(self.seconds)


@dataclass(frozen=True)
class PredictionDirection:
    """Predictions for a route and stop, grouped by direction."""
    title: str = ""
    predictions: Tuple[Prediction, ...] = ()


@dataclass(frozen=True)
class Message:
    """Advisory text published by the agency."""
    text: str = ""
    priority: str = ""


@dataclass(frozen=True)
class PredictionData:
    """Predictions for one route and stop pair."""
    agency_title: str = ""
    route_title: str = ""
    route_tag: str = ""
    stop_title: str = ""
    stop_tag: str = ""
    directions: Tuple[PredictionDirection, ...] = ()
    messages: Tuple[Message, ...] = ()


@dataclass(frozen=True)
class VehicleLocation:
    """Last known position of a single vehicle."""
    id: str = ""
    route_tag: str = ""
    dir_tag: str = ""
    lat: str = ""
    lon: str = ""
    secs_since_report: str = ""
    predictable: str = ""
    heading: str = ""
    speed_km_hr: str = ""
    leading_vehicle_id: str = ""

    def position(self) -> Tuple[float, float]:
        """Return (lat, lon) as floats. Raises ValueError on bad text."""
        return _position(self.lat, self.lon)


@dataclass(frozen=True)
class LocationResponse:
    """Snapshot of vehicle locations for an agency."""
    vehicles: Tuple[VehicleLocation, ...] = ()
    last_time: str = ""  # Pass back via vehicle_location_time() to poll forward

    def last_time_ms(self) -> int:
        """Return ``last_time`` as an int. Raises ValueError on bad text."""
        return int(self.last_time)

"""nextbus - Client for the NextBus public XML transit feed."""

__version__ = "0.1.0"

from .models import (
    Agency,
    Route,
    RouteConfig,
    Stop,
    StopMarker,
    Direction,
    Path,
    Point,
    PredictionData,
    PredictionDirection,
    Prediction,
    Message,
    VehicleLocation,
    LocationResponse,
)
from .errors import NextBusError, TransportError, ReadError, DecodeError
from .options import (
    route_config_tag,
    route_config_terse,
    route_config_verbose,
    prediction_stop,
    prediction_short_titles,
    vehicle_location_route,
    vehicle_location_time,
)
from .client import NextBusClient, DEFAULT_BASE_URL

__all__ = [
    "NextBusClient",
    "DEFAULT_BASE_URL",
    "Agency",
    "Route",
    "RouteConfig",
    "Stop",
    "StopMarker",
    "Direction",
    "Path",
    "Point",
    "PredictionData",
    "PredictionDirection",
    "Prediction",
    "Message",
    "VehicleLocation",
    "LocationResponse",
    "NextBusError",
    "TransportError",
    "ReadError",
    "DecodeError",
    "route_config_tag",
    "route_config_terse",
    "route_config_verbose",
    "prediction_stop",
    "prediction_short_titles",
    "vehicle_location_route",
    "vehicle_location_time",
]

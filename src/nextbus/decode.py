"""XML envelope decoding for NextBus feed responses."""

import logging
import xml.etree.ElementTree as ET
from typing import List

from .errors import DecodeError
from .models import (
    Agency,
    Direction,
    LocationResponse,
    Message,
    Path,
    Point,
    Prediction,
    PredictionData,
    PredictionDirection,
    Route,
    RouteConfig,
    Stop,
    StopMarker,
    VehicleLocation,
)

logger = logging.getLogger(__name__)

ENVELOPE_TAG = "body"


def parse_envelope(command: str, body: bytes) -> ET.Element:
    """
    Parse a response body and return its root ``<body>`` element.

    Args:
        command: Feed command the body answers (used in error messages).
        body: Raw response bytes.

    Returns:
        The root element.

    Raises:
        DecodeError: If the body is not XML or the root is not ``<body>``.
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise DecodeError(command, f"could not parse {command} XML: {e}") from e

    if root.tag != ENVELOPE_TAG:
        raise DecodeError(
            command,
            f"could not parse {command} XML: expected <{ENVELOPE_TAG}> root, got <{root.tag}>",
        )

    # The feed reports soft failures (unknown agency, bad stop) in-band
    for error in root.findall("Error"):
        message = (error.text or "").strip()
        logger.warning(
            f"Feed reported an error for {command} "
            f"(shouldRetry={error.get('shouldRetry', '')}): {message}"
        )

    return root


def _agency(el: ET.Element) -> Agency:
    return Agency(
        tag=el.get("tag", ""),
        title=el.get("title", ""),
        region_title=el.get("regionTitle", ""),
    )


def _route(el: ET.Element) -> Route:
    return Route(tag=el.get("tag", ""), title=el.get("title", ""))


def _stop(el: ET.Element) -> Stop:
    return Stop(
        tag=el.get("tag", ""),
        title=el.get("title", ""),
        lat=el.get("lat", ""),
        lon=el.get("lon", ""),
        stop_id=el.get("stopId", ""),
    )


def _direction(el: ET.Element) -> Direction:
    return Direction(
        tag=el.get("tag", ""),
        title=el.get("title", ""),
        name=el.get("name", ""),
        use_for_ui=el.get("useForUI", ""),
        stop_markers=tuple(StopMarker(tag=s.get("tag", "")) for s in el.findall("stop")),
    )


def _path(el: ET.Element) -> Path:
    return Path(
        points=tuple(
            Point(lat=p.get("lat", ""), lon=p.get("lon", "")) for p in el.findall("point")
        )
    )


def _route_config(el: ET.Element) -> RouteConfig:
    return RouteConfig(
        tag=el.get("tag", ""),
        title=el.get("title", ""),
        color=el.get("color", ""),
        opposite_color=el.get("oppositeColor", ""),
        lat_min=el.get("latMin", ""),
        lat_max=el.get("latMax", ""),
        lon_min=el.get("lonMin", ""),
        lon_max=el.get("lonMax", ""),
        stops=tuple(_stop(s) for s in el.findall("stop")),
        directions=tuple(_direction(d) for d in el.findall("direction")),
        paths=tuple(_path(p) for p in el.findall("path")),
    )


def _prediction(el: ET.Element) -> Prediction:
    return Prediction(
        epoch_time=el.get("epochTime", ""),
        seconds=el.get("seconds", ""),
        minutes=el.get("minutes", ""),
        is_departure=el.get("isDeparture", ""),
        affected_by_layover=el.get("affectedByLayover", ""),
        dir_tag=el.get("dirTag", ""),
        vehicle=el.get("vehicle", ""),
        vehicles_in_consist=el.get("vehiclesInConsist", ""),
        block=el.get("block", ""),
        trip_tag=el.get("tripTag", ""),
    )


def _prediction_data(el: ET.Element) -> PredictionData:
    return PredictionData(
        agency_title=el.get("agencyTitle", ""),
        route_title=el.get("routeTitle", ""),
        route_tag=el.get("routeTag", ""),
        stop_title=el.get("stopTitle", ""),
        stop_tag=el.get("stopTag", ""),
        directions=tuple(
            PredictionDirection(
                title=d.get("title", ""),
                predictions=tuple(_prediction(p) for p in d.findall("prediction")),
            )
            for d in el.findall("direction")
        ),
        messages=tuple(
            Message(text=m.get("text", ""), priority=m.get("priority", ""))
            for m in el.findall("message")
        ),
    )


def _vehicle(el: ET.Element) -> VehicleLocation:
    return VehicleLocation(
        id=el.get("id", ""),
        route_tag=el.get("routeTag", ""),
        dir_tag=el.get("dirTag", ""),
        lat=el.get("lat", ""),
        lon=el.get("lon", ""),
        secs_since_report=el.get("secsSinceReport", ""),
        predictable=el.get("predictable", ""),
        heading=el.get("heading", ""),
        speed_km_hr=el.get("speedKmHr", ""),
        leading_vehicle_id=el.get("leadingVehicleId", ""),
    )


def decode_agency_list(command: str, body: bytes) -> List[Agency]:
    root = parse_envelope(command, body)
    return [_agency(el) for el in root.findall("agency")]


def decode_route_list(command: str, body: bytes) -> List[Route]:
    root = parse_envelope(command, body)
    return [_route(el) for el in root.findall("route")]


def decode_route_config(command: str, body: bytes) -> List[RouteConfig]:
    root = parse_envelope(command, body)
    return [_route_config(el) for el in root.findall("route")]


def decode_predictions(command: str, body: bytes) -> List[PredictionData]:
    """Decode a ``predictions`` or ``predictionsForMultiStops`` envelope."""
    root = parse_envelope(command, body)
    return [_prediction_data(el) for el in root.findall("predictions")]


def decode_vehicle_locations(command: str, body: bytes) -> LocationResponse:
    """
    Decode a ``vehicleLocations`` envelope.

    The whole envelope is returned because ``lastTime`` is needed to poll
    for newer reports. A missing ``<lastTime>`` decodes to an empty string.
    """
    root = parse_envelope(command, body)
    last_time = root.find("lastTime")
    return LocationResponse(
        vehicles=tuple(_vehicle(el) for el in root.findall("vehicle")),
        last_time=last_time.get("time", "") if last_time is not None else "",
    )

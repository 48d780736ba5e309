"""Optional query parameters for route config, multi-stop and vehicle requests."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Type
from urllib.parse import quote_plus

# (key, value); a value of None sends the key as a bare flag
Param = Tuple[str, Optional[str]]


@dataclass(frozen=True)
class RouteFilter:
    """Restrict a request to a single route."""
    tag: str

    def param(self) -> Param:
        return ("r", self.tag)


@dataclass(frozen=True)
class Terse:
    """Leave path geometry out of a route config response."""

    def param(self) -> Param:
        return ("terse", None)


@dataclass(frozen=True)
class Verbose:
    """Include directions that are normally hidden from UIs."""

    def param(self) -> Param:
        return ("verbose", None)


@dataclass(frozen=True)
class StopFilter:
    """Ask for predictions at one route and stop pair."""
    route_tag: str
    stop_tag: str

    def param(self) -> Param:
        return ("stops", f"{self.route_tag}|{self.stop_tag}")


@dataclass(frozen=True)
class ShortTitles:
    """Ask for short route and stop titles in predictions."""

    def param(self) -> Param:
        return ("useShortTitles", "true")


@dataclass(frozen=True)
class SinceTime:
    """Only return vehicles that reported after the given epoch milliseconds."""
    time: str

    def param(self) -> Param:
        return ("t", self.time)


ROUTE_CONFIG_OPTIONS: Tuple[Type, ...] = (RouteFilter, Terse, Verbose)
PREDICTION_OPTIONS: Tuple[Type, ...] = (StopFilter, ShortTitles)
VEHICLE_LOCATION_OPTIONS: Tuple[Type, ...] = (RouteFilter, SinceTime)


def route_config_tag(tag: str) -> RouteFilter:
    return RouteFilter(tag)


def route_config_terse() -> Terse:
    return Terse()


def route_config_verbose() -> Verbose:
    return Verbose()


def prediction_stop(route_tag: str, stop_tag: str) -> StopFilter:
    return StopFilter(route_tag, stop_tag)


def prediction_short_titles() -> ShortTitles:
    return ShortTitles()


def vehicle_location_route(route_tag: str) -> RouteFilter:
    return RouteFilter(route_tag)


def vehicle_location_time(t: str) -> SinceTime:
    return SinceTime(t)


def check_options(command: str, options: Iterable, allowed: Tuple[Type, ...]) -> List:
    """
    Make sure every option is one the command understands.

    Args:
        command: Feed command the options are for (used in the error message).
        options: Option values supplied by the caller.
        allowed: Option classes the command accepts.

    Returns:
        The options as a list, in the order supplied.

    Raises:
        TypeError: If an option is not one of the allowed kinds.
    """
    checked = []
    for option in options:
        if not isinstance(option, allowed):
            names = ", ".join(cls.__name__ for cls in allowed)
            raise TypeError(
                f"{command} does not accept {option!r}; expected one of: {names}"
            )
        checked.append(option)
    return checked


def encode_param(param: Param) -> str:
    """Percent-encode one parameter into a query fragment."""
    key, value = param
    if value is None:
        return quote_plus(key)
    return f"{quote_plus(key)}={quote_plus(value)}"

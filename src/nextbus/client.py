"""NextBus public XML feed client."""

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

import requests

from . import decode
from .errors import ReadError, TransportError
from .models import Agency, LocationResponse, PredictionData, Route, RouteConfig
from .options import (
    PREDICTION_OPTIONS,
    ROUTE_CONFIG_OPTIONS,
    VEHICLE_LOCATION_OPTIONS,
    Param,
    SinceTime,
    check_options,
    encode_param,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://webservices.nextbus.com/service/publicXMLFeed"

# Feed commands
AGENCY_LIST = "agencyList"
ROUTE_LIST = "routeList"
ROUTE_CONFIG = "routeConfig"
PREDICTIONS = "predictions"
PREDICTIONS_FOR_MULTI_STOPS = "predictionsForMultiStops"
VEHICLE_LOCATIONS = "vehicleLocations"

# Since-time sent when the caller gives none: every vehicle reporting today
DEFAULT_SINCE_TIME = "0"

T = TypeVar("T")


class NextBusClient:
    """
    Fetches and decodes NextBus feed commands.

    Each call issues exactly one GET and returns freshly decoded records.
    Nothing is cached or retried, so one client can be shared between threads
    as long as the session can.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the client.

        Args:
            session: Transport with a ``requests.Session``-style ``get``. If None,
                the client creates one and closes it in close().
            base_url: Feed endpoint, without a query string.
            timeout: Passed through to every ``get`` call. None leaves timeouts
                to the session.
        """
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._base_url = base_url
        self._timeout = timeout

    def close(self) -> None:
        """Close the session if the client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "NextBusClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def get_agency_list(self) -> List[Agency]:
        """Fetch every agency the feed serves."""
        return self._request(AGENCY_LIST, [], decode.decode_agency_list)

    def get_route_list(self, agency_tag: str) -> List[Route]:
        """
        Fetch the routes of an agency.

        An unknown agency is not an error: the feed answers with an empty
        envelope and an empty list is returned.
        """
        return self._request(ROUTE_LIST, [("a", agency_tag)], decode.decode_route_list)

    def get_route_config(self, agency_tag: str, *options) -> List[RouteConfig]:
        """
        Fetch stops, directions and paths for the routes of an agency.

        Args:
            agency_tag: Agency tag (e.g. "sf-muni").
            *options: route_config_tag(), route_config_terse() and
                route_config_verbose(), in any combination.

        Returns:
            List of RouteConfig objects in feed order.

        Raises:
            TypeError: If an option belongs to another command.
        """
        checked = check_options(ROUTE_CONFIG, options, ROUTE_CONFIG_OPTIONS)
        params = [("a", agency_tag)] + [option.param() for option in checked]
        return self._request(ROUTE_CONFIG, params, decode.decode_route_config)

    def get_stop_predictions(self, agency_tag: str, stop_id: str) -> List[PredictionData]:
        """
        Fetch predictions for every route serving a stop.

        Args:
            agency_tag: Agency tag.
            stop_id: Route-independent stop id (``Stop.stop_id``), not a stop tag.
        """
        params = [("a", agency_tag), ("stopId", stop_id)]
        return self._request(PREDICTIONS, params, decode.decode_predictions)

    def get_predictions(
        self, agency_tag: str, route_tag: str, stop_tag: str
    ) -> List[PredictionData]:
        """Fetch predictions for one route at one stop."""
        params = [("a", agency_tag), ("r", route_tag), ("s", stop_tag)]
        return self._request(PREDICTIONS, params, decode.decode_predictions)

    def get_predictions_for_multi_stops(self, agency_tag: str, *options) -> List[PredictionData]:
        """
        Fetch predictions for several route and stop pairs in one request.

        Args:
            agency_tag: Agency tag.
            *options: One prediction_stop() per pair, plus optionally
                prediction_short_titles().

        Returns:
            One PredictionData per pair, in feed order.
        """
        checked = check_options(PREDICTIONS_FOR_MULTI_STOPS, options, PREDICTION_OPTIONS)
        params = [("a", agency_tag)] + [option.param() for option in checked]
        return self._request(PREDICTIONS_FOR_MULTI_STOPS, params, decode.decode_predictions)

    def get_vehicle_locations(self, agency_tag: str, *options) -> LocationResponse:
        """
        Fetch vehicle positions for an agency.

        Args:
            agency_tag: Agency tag.
            *options: vehicle_location_route() and vehicle_location_time(). If
                several times are given the last one is used; with none,
                every vehicle reporting since service start is returned.

        Returns:
            LocationResponse with the vehicles and the ``lastTime`` to pass
            back on the next poll.
        """
        checked = check_options(VEHICLE_LOCATIONS, options, VEHICLE_LOCATION_OPTIONS)
        params: List[Param] = [("a", agency_tag)]
        since_time = SinceTime(DEFAULT_SINCE_TIME)
        for option in checked:
            if isinstance(option, SinceTime):
                since_time = option
            else:
                params.append(option.param())
        params.append(since_time.param())
        return self._request(VEHICLE_LOCATIONS, params, decode.decode_vehicle_locations)

    def build_url(self, command: str, params: Sequence[Param]) -> str:
        """Build the request URL for a command and its parameters, in order."""
        fragments = [encode_param(("command", command))]
        fragments.extend(encode_param(param) for param in params)
        return f"{self._base_url}?{'&'.join(fragments)}"

    def _request(
        self,
        command: str,
        params: Sequence[Param],
        decoder: Callable[[str, bytes], T],
    ) -> T:
        body = self._fetch(command, self.build_url(command, params))
        result = decoder(command, body)
        if isinstance(result, list):
            logger.debug(f"Decoded {len(result)} records from {command}")
        return result

    def _fetch(self, command: str, url: str) -> bytes:
        """
        Issue the GET and read the whole body.

        Args:
            command: Feed command, for error context.
            url: Full request URL.

        Returns:
            Raw response bytes.

        Raises:
            TransportError: If the request fails.
            ReadError: If the body cannot be read.
        """
        logger.debug(f"Fetching {url}")
        try:
            response = self._session.get(url, stream=True, timeout=self._timeout)
        except (requests.exceptions.RequestException, OSError) as e:
            logger.error(f"Failed to fetch {command}: {e}")
            raise TransportError(command, f"could not fetch {command} from nextbus: {e}") from e

        with response:
            if not 200 <= response.status_code < 300:
                logger.warning(f"{command} returned HTTP {response.status_code}")
            try:
                body = response.content
            except (requests.exceptions.RequestException, OSError) as e:
                logger.error(f"Failed to read {command} response: {e}")
                raise ReadError(command, f"could not read {command} response body: {e}") from e

        # requests leaves content as None when there was no body stream at all
        if body is None:
            logger.error(f"No response body for {command}")
            raise ReadError(command, f"could not read {command} response body: no body")
        return body

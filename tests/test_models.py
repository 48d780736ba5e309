"""Tests for feed records, request options and envelope decoding."""

import dataclasses
import unittest
from datetime import datetime, timezone
import sys
from pathlib import Path

# Add src to path so we can import nextbus
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nextbus.decode import decode_agency_list, decode_route_config, parse_envelope
from nextbus.errors import DecodeError, NextBusError
from nextbus.models import (
    Agency,
    Direction,
    LocationResponse,
    Point,
    Prediction,
    Stop,
    VehicleLocation,
)
from nextbus.options import (
    PREDICTION_OPTIONS,
    ROUTE_CONFIG_OPTIONS,
    VEHICLE_LOCATION_OPTIONS,
    check_options,
    encode_param,
    prediction_short_titles,
    prediction_stop,
    route_config_tag,
    route_config_terse,
    route_config_verbose,
    vehicle_location_route,
    vehicle_location_time,
)


class TestParsedAccessors(unittest.TestCase):
    """Test the explicit conversions layered over raw text fields."""

    def test_positions(self):
        """Test coordinate conversion for stops, points and vehicles."""
        self.assertEqual(Stop(lat="37.7622", lon="-122.4663").position(), (37.7622, -122.4663))
        self.assertEqual(Point("12.5", "-3").position(), (12.5, -3.0))
        vehicle = VehicleLocation(id="1111", lat="37.77513", lon="-122.41946")
        self.assertEqual(vehicle.position(), (37.77513, -122.41946))

    def test_position_keeps_raw_text(self):
        """Test that parsing leaves the raw text untouched."""
        stop = Stop(lat="37.7620", lon="-122.4660")
        stop.position()
        self.assertEqual(stop.lat, "37.7620")

    def test_bad_position_raises(self):
        """Test error handling for an empty coordinate."""
        with self.assertRaises(ValueError):
            Stop(lat="", lon="-122.4").position()

    def test_direction_visibility(self):
        """Test interpretation of useForUI."""
        self.assertTrue(Direction(use_for_ui="true").is_ui_visible())
        self.assertFalse(Direction(use_for_ui="False").is_ui_visible())
        with self.assertRaises(ValueError):
            Direction(use_for_ui="").is_ui_visible()

    def test_prediction_times(self):
        """Test conversion of prediction epoch time and seconds."""
        prediction = Prediction(epoch_time="1487277081162", seconds="181")
        self.assertEqual(
            prediction.arrival_time(),
            datetime(2017, 2, 16, 20, 31, 21, 162000, tzinfo=timezone.utc),
        )
        self.assertEqual(prediction.seconds_until(), 181)

        with self.assertRaises(ValueError):
            Prediction(epoch_time="soon").arrival_time()

    def test_last_time(self):
        """Test conversion of the last report time."""
        self.assertEqual(LocationResponse(last_time="1234567890123").last_time_ms(), 1234567890123)
        with self.assertRaises(ValueError):
            LocationResponse().last_time_ms()

    def test_records_are_immutable(self):
        """Test that records cannot be modified."""
        agency = Agency(tag="alpha")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            agency.tag = "beta"


class TestOptions(unittest.TestCase):
    """Test request option fragments."""

    def test_fragments(self):
        """Test the query fragment of each option."""
        self.assertEqual(encode_param(route_config_tag("N").param()), "r=N")
        self.assertEqual(encode_param(route_config_terse().param()), "terse")
        self.assertEqual(encode_param(route_config_verbose().param()), "verbose")
        self.assertEqual(encode_param(prediction_short_titles().param()), "useShortTitles=true")
        self.assertEqual(encode_param(vehicle_location_route("38R").param()), "r=38R")
        self.assertEqual(encode_param(vehicle_location_time("1234").param()), "t=1234")

    def test_stop_pair_encoded_as_unit(self):
        """Test that a stop pair is encoded after joining."""
        self.assertEqual(encode_param(prediction_stop("1", "1123").param()), "stops=1%7C1123")
        self.assertEqual(
            encode_param(prediction_stop("F Market", "5&6").param()),
            "stops=F+Market%7C5%266",
        )

    def test_check_options_keeps_order(self):
        """Test that accepted options keep their order."""
        options = [route_config_terse(), route_config_tag("1"), route_config_tag("2")]
        self.assertEqual(check_options("routeConfig", options, ROUTE_CONFIG_OPTIONS), options)

    def test_check_options_rejects_other_kinds(self):
        """Test that options for other commands are refused."""
        with self.assertRaises(TypeError):
            check_options("routeConfig", [vehicle_location_time("0")], ROUTE_CONFIG_OPTIONS)
        with self.assertRaises(TypeError):
            check_options("predictionsForMultiStops", [route_config_tag("1")], PREDICTION_OPTIONS)
        with self.assertRaises(TypeError):
            check_options("vehicleLocations", ["t=0"], VEHICLE_LOCATION_OPTIONS)

    def test_route_filter_shared_between_commands(self):
        """Test that the route filter serves both commands."""
        self.assertEqual(route_config_tag("N"), vehicle_location_route("N"))
        check_options("vehicleLocations", [route_config_tag("N")], VEHICLE_LOCATION_OPTIONS)


class TestDecode(unittest.TestCase):
    """Test envelope decoding independent of the transport."""

    def test_order_preserved(self):
        """Test that repeated elements keep document order."""
        tags = [str(n) for n in range(25, 0, -1)]
        body = "<body>" + "".join(f'<agency tag="{t}"/>' for t in tags) + "</body>"
        found = decode_agency_list("agencyList", body.encode("utf-8"))
        self.assertEqual([a.tag for a in found], tags)

    def test_missing_attributes_are_empty(self):
        """Test that missing attributes decode to empty strings."""
        found = decode_agency_list("agencyList", b'<body><agency tag="x"/></body>')
        self.assertEqual(found, [Agency(tag="x", title="", region_title="")])

    def test_unknown_elements_ignored(self):
        """Test that unknown elements are skipped."""
        body = b'<body copyright="c"><keyForNextTime value="1"/><agency tag="x"/></body>'
        self.assertEqual(len(decode_agency_list("agencyList", body)), 1)

    def test_stop_markers_not_checked_against_stops(self):
        """Test that stop markers are kept even without a matching stop."""
        body = b"""<body><route tag="1">
            <stop tag="a"/>
            <direction tag="d"><stop tag="missing"/><stop tag="a"/></direction>
        </route></body>"""
        route = decode_route_config("routeConfig", body)[0]
        self.assertEqual([m.tag for m in route.directions[0].stop_markers], ["missing", "a"])
        self.assertEqual(len(route.stops), 1)

    def test_empty_body_is_decode_error(self):
        """Test that an empty body is a decode error."""
        with self.assertRaises(DecodeError) as ctx:
            parse_envelope("agencyList", b"")
        self.assertIsInstance(ctx.exception, NextBusError)
        self.assertEqual(ctx.exception.command, "agencyList")

    def test_wrong_root(self):
        """Test that a non-body root element is rejected."""
        with self.assertRaises(DecodeError) as ctx:
            parse_envelope("routeConfig", b"<route/>")
        self.assertIn("<body>", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()

"""Example usage of NextBusClient."""

import logging
import sys
from pathlib import Path

# Add src to path so we can import nextbus
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nextbus import NextBusClient, NextBusError, route_config_tag, route_config_terse

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def print_route(client: NextBusClient, agency_tag: str, route_tag: str):
    """
    Show the stops of a route and the next arrivals at its first stop.

    Args:
        client: Open NextBusClient.
        agency_tag: Agency tag (e.g. "sf-muni")
        route_tag: Route tag (e.g. "N")
    """
    configs = client.get_route_config(agency_tag, route_config_tag(route_tag), route_config_terse())
    if not configs:
        print(f"No route {route_tag} for agency {agency_tag}")
        return

    route = configs[0]
    print(f"\n{route.title} ({len(route.stops)} stops)")
    print("-" * 70)
    for direction in route.directions:
        print(f"{direction.title}: {len(direction.stop_markers)} stops")

    if not route.stops:
        return

    stop = route.stops[0]
    print(f"\nNext arrivals at {stop.title}:")
    for data in client.get_predictions(agency_tag, route.tag, stop.tag):
        for direction in data.directions:
            for prediction in direction.predictions:
                print(f"  {direction.title}: {prediction.minutes} min (vehicle {prediction.vehicle})")
        for message in data.messages:
            print(f"  [{message.priority}] {message.text}")


def print_vehicles(client: NextBusClient, agency_tag: str):
    """Print every reporting vehicle for an agency."""
    locations = client.get_vehicle_locations(agency_tag)
    print(f"\n{len(locations.vehicles)} vehicles (last report {locations.last_time})")
    for vehicle in locations.vehicles:
        print(f"  {vehicle.id} on {vehicle.route_tag}: {vehicle.lat}, {vehicle.lon}")


if __name__ == "__main__":
    with NextBusClient(timeout=10) as client:
        try:
            if len(sys.argv) == 1:
                for agency in client.get_agency_list():
                    print(f"{agency.tag:20} {agency.title} ({agency.region_title})")
            elif len(sys.argv) == 2:
                print_vehicles(client, sys.argv[1])
            else:
                print_route(client, sys.argv[1], sys.argv[2])
        except NextBusError as e:
            logger.error(f"{e.command} failed: {e}", exc_info=True)
            sys.exit(1)

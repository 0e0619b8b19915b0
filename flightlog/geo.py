"""Great-circle geometry on a spherical Earth.

Used by the flight summary (path length) and the telemetry simulator
(advancing a position along a heading).
"""

import math

from flightlog.constants import EARTH_RADIUS_METERS

_FULL_CIRCLE_DEGREES = 360.0


def haversine_distance(
    latitude_1: float,
    longitude_1: float,
    latitude_2: float,
    longitude_2: float,
) -> float:
    """Return the great-circle distance between two points in meters.

    Args:
        latitude_1: Latitude of the first point in degrees.
        longitude_1: Longitude of the first point in degrees.
        latitude_2: Latitude of the second point in degrees.
        longitude_2: Longitude of the second point in degrees.

    Returns:
        Distance in meters.
    """
    delta_latitude = math.radians(latitude_2 - latitude_1)
    delta_longitude = math.radians(longitude_2 - longitude_1)

    a = (
        math.sin(delta_latitude / 2) ** 2
        + math.cos(math.radians(latitude_1))
        * math.cos(math.radians(latitude_2))
        * math.sin(delta_longitude / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def destination_point(
    latitude: float,
    longitude: float,
    distance_meters: float,
    bearing_degrees: float,
) -> tuple[float, float]:
    """Return the point reached by travelling a distance along a bearing.

    Args:
        latitude: Start latitude in degrees.
        longitude: Start longitude in degrees.
        distance_meters: Distance to travel.
        bearing_degrees: Direction of travel, clockwise from north.

    Returns:
        (latitude, longitude) of the destination in degrees.
    """
    angular_distance = distance_meters / EARTH_RADIUS_METERS
    phi_1 = math.radians(latitude)
    lambda_1 = math.radians(longitude)
    theta = math.radians(bearing_degrees)

    phi_2 = math.asin(
        math.sin(phi_1) * math.cos(angular_distance)
        + math.cos(phi_1) * math.sin(angular_distance) * math.cos(theta)
    )
    lambda_2 = lambda_1 + math.atan2(
        math.sin(theta) * math.sin(angular_distance) * math.cos(phi_1),
        math.cos(angular_distance) - math.sin(phi_1) * math.sin(phi_2),
    )

    destination_longitude = (math.degrees(lambda_2) + 540.0) % _FULL_CIRCLE_DEGREES - 180.0
    return math.degrees(phi_2), destination_longitude

import math

from .models import Coordinates

EARTH_RADIUS_METERS = 6371000


def haversine_distance(point1: Coordinates, point2: Coordinates) -> float:
    """
    Calculate the great circle distance between two points
    on the earth (specified in decimal degrees) in meters.
    """
    phi1, phi2 = math.radians(point1.latitude), math.radians(point2.latitude)
    dphi = math.radians(point2.latitude - point1.latitude)
    dlambda = math.radians(point2.longitude - point1.longitude)

    a = math.sin(dphi / 2)**2 + \
        math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c

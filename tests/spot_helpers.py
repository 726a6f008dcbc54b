"""テスト用の座標ヘルパー"""

import math

from locability.features.geo.domain.models import Coordinate
from locability.features.geo.services.distance import EARTH_RADIUS_METERS

# シンタグマ広場
SYNTAGMA = Coordinate(37.9755, 23.7348)


def offset(origin: Coordinate, north_meters: float = 0.0, east_meters: float = 0.0) -> Coordinate:
    """原点から北・東にメートル単位でずらした座標"""
    meters_per_degree = math.pi * EARTH_RADIUS_METERS / 180.0
    d_lat = north_meters / meters_per_degree
    d_lon = east_meters / (meters_per_degree * math.cos(math.radians(origin.latitude)))
    return Coordinate(origin.latitude + d_lat, origin.longitude + d_lon)

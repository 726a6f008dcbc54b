"""大円距離の計算"""

import math

from ..domain.models import Coordinate

# 地球の平均半径（メートル）
EARTH_RADIUS_METERS = 6_371_008.8


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """
    2点間の大円距離をハバーサイン公式で計算

    Args:
        a: 始点
        b: 終点

    Returns:
        float: 距離（メートル）
    """
    if a == b:
        return 0.0

    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # 丸め誤差で h が 1 をわずかに超えることがある
    h = min(1.0, h)

    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(h))

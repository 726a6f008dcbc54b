"""位置情報のドメインモデル"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinate:
    """WGS-84の座標（度）"""

    latitude: float  # 緯度
    longitude: float  # 経度

    def __repr__(self) -> str:
        return f"Coordinate(lat={self.latitude}, lng={self.longitude})"

    def is_valid(self) -> bool:
        """緯度・経度が値域内かどうか"""
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0

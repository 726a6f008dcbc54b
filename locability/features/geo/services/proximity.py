"""近傍検索"""

from typing import Iterable, Optional

from ....shared.logging.config import get_logger
from ...spots.domain.enums import AccessibilityFilter
from ...spots.domain.models import AccessibilitySpot, NearbySpot
from ..domain.models import Coordinate
from .distance import distance_meters

logger = get_logger(__name__)


def near(
    center: Coordinate,
    radius_meters: float,
    spots: Iterable[AccessibilitySpot],
) -> list[NearbySpot]:
    """
    中心から半径内のスポットを近い順に返す

    距離が等しいスポットは入力順を保つ（安定ソート）。
    入力のスポットは変更しない。

    Args:
        center: 検索中心
        radius_meters: 半径（メートル、境界を含む）
        spots: 候補スポット

    Returns:
        list[NearbySpot]: 距離付きのスポット（該当なしの場合は空リスト）
    """
    results = []
    for spot in spots:
        distance = distance_meters(center, spot.coordinate)
        if distance <= radius_meters:
            results.append(NearbySpot(spot=spot, distance_meters=distance))

    results.sort(key=lambda nearby: nearby.distance_meters)

    logger.debug(f"Proximity query {center} r={radius_meters}m: {len(results)} spots")

    return results


def filter_spots(
    spots: Iterable[AccessibilitySpot],
    spot_filter: Optional[AccessibilityFilter] = None,
) -> list[AccessibilitySpot]:
    """
    フィルターバーの条件でスポットを絞り込む

    Args:
        spots: 対象スポット
        spot_filter: フィルター（Noneの場合はすべて）

    Returns:
        list[AccessibilitySpot]: 条件に一致するスポット
    """
    if spot_filter is None or spot_filter == AccessibilityFilter.ALL:
        return list(spots)

    return [spot for spot in spots if spot.matches_filter(spot_filter)]

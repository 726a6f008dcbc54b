"""エリアのアクセシビリティスコア計算"""

import math
from typing import Iterable, Optional

from ....shared.logging.config import get_logger
from ...geo.domain.models import Coordinate
from ...geo.services.proximity import near
from ...spots.domain.enums import SpotStatus
from ...spots.domain.models import AccessibilitySpot
from ...spots.store.spot_store import SpotStore
from ..domain.models import ScoreBreakdown

logger = get_logger(__name__)

# 配点
POINTS_PER_SPOT = 5
MAX_QUANTITY_SCORE = 40
MAX_QUALITY_SCORE = 30
POINTS_PER_TYPE = 5
MAX_SCORE = 100


def score_breakdown(spots: Iterable[AccessibilitySpot]) -> ScoreBreakdown:
    """
    スコアの内訳を計算

    - 数量: 1件5点、最大40点（8件以上で頭打ち）
    - 品質: 稼働中の割合 × 30点（この段階では丸めない）
    - 多様性: 種別数 × 5点（6種別で30点）
    - 合計を一度だけ切り捨て、100点で上限を掛ける

    Args:
        spots: 近傍のスポット

    Returns:
        ScoreBreakdown: スコアの内訳
    """
    spots = list(spots)
    total_spots = len(spots)

    if total_spots == 0:
        return ScoreBreakdown(
            total_spots=0,
            working_spots=0,
            unique_types=0,
            quantity_score=0,
            quality_score=0.0,
            variety_score=0,
            score=0,
        )

    working_spots = sum(1 for spot in spots if spot.status == SpotStatus.WORKING)
    unique_types = len({spot.type for spot in spots})

    quantity_score = min(total_spots * POINTS_PER_SPOT, MAX_QUANTITY_SCORE)
    quality_score = working_spots / total_spots * MAX_QUALITY_SCORE
    variety_score = unique_types * POINTS_PER_TYPE

    total = math.floor(quantity_score + quality_score + variety_score)

    return ScoreBreakdown(
        total_spots=total_spots,
        working_spots=working_spots,
        unique_types=unique_types,
        quantity_score=quantity_score,
        quality_score=quality_score,
        variety_score=variety_score,
        score=min(total, MAX_SCORE),
    )


def calculate_score(spots: Iterable[AccessibilitySpot]) -> int:
    """
    0〜100のエリアスコアを計算

    Args:
        spots: 近傍のスポット

    Returns:
        int: スコア（スポットがない場合は0）
    """
    return score_breakdown(spots).score


class AreaScoreService:
    """ストアのスナップショットに対して近傍検索とスコア計算を行うサービス"""

    def __init__(self, store: SpotStore, default_radius_meters: float = 500.0) -> None:
        """
        Args:
            store: スポットストア
            default_radius_meters: 半径省略時のスコア計算半径（メートル）
        """
        self.store = store
        self.default_radius_meters = default_radius_meters

    def breakdown(
        self, center: Coordinate, radius_meters: Optional[float] = None
    ) -> ScoreBreakdown:
        """
        中心周辺のスコア内訳を計算

        Args:
            center: 中心座標
            radius_meters: 半径（Noneの場合はデフォルト半径）

        Returns:
            ScoreBreakdown: スコアの内訳
        """
        radius = self.default_radius_meters if radius_meters is None else radius_meters
        nearby = near(center, radius, self.store.all())
        result = score_breakdown(nearby_spot.spot for nearby_spot in nearby)

        logger.info(
            f"Area score at {center} r={radius}m: {result.score} "
            f"({result.total_spots} spots, {result.band.value})"
        )

        return result

    def area_score(self, center: Coordinate, radius_meters: Optional[float] = None) -> int:
        """
        中心周辺のエリアスコアを計算

        Args:
            center: 中心座標
            radius_meters: 半径（Noneの場合はデフォルト半径）

        Returns:
            int: 0〜100のスコア
        """
        return self.breakdown(center, radius_meters).score

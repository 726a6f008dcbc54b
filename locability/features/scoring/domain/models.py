"""エリアスコアのドメインモデル"""
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ScoreBand(str, Enum):
    """スコアの段階（スコアカードの表示区分）"""

    EXCELLENT = "Excellent accessibility"  # 80〜100
    MODERATE = "Moderate accessibility"  # 50〜79
    LIMITED = "Limited accessibility"  # 1〜49
    NO_DATA = "No data available"  # 0

    @classmethod
    def from_score(cls, score: int) -> "ScoreBand":
        """スコアから段階を取得"""
        if score >= 80:
            return cls.EXCELLENT
        if score >= 50:
            return cls.MODERATE
        if score >= 1:
            return cls.LIMITED
        return cls.NO_DATA


@dataclass(frozen=True)
class ScoreBreakdown:
    """スコアの内訳"""

    total_spots: int
    working_spots: int
    unique_types: int
    quantity_score: int  # 最大40点
    quality_score: float  # 最大30点（丸めない）
    variety_score: int  # 最大30点
    score: int

    @property
    def band(self) -> ScoreBand:
        return ScoreBand.from_score(self.score)

    def to_dict(self) -> dict[str, Any]:
        """APIレスポンス用の辞書に変換"""
        return {
            "score": self.score,
            "band": self.band.value,
            "total_spots": self.total_spots,
            "working_spots": self.working_spots,
            "unique_types": self.unique_types,
            "quantity_score": self.quantity_score,
            "quality_score": round(self.quality_score, 2),
            "variety_score": self.variety_score,
        }

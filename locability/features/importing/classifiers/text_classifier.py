"""自由記述テキストからスポット種別を推定する分類器（投稿フォーム用）"""

from dataclasses import dataclass
from typing import Optional

from ....shared.logging.config import get_logger
from ....shared.utils.text import tokenize
from ...spots.domain.enums import SpotType

logger = get_logger(__name__)

# 種別ごとの参照語彙
REFERENCE_DESCRIPTIONS: dict[SpotType, list[str]] = {
    SpotType.RAMP: ["ramp", "slope", "incline", "wheelchair ramp", "accessible ramp"],
    SpotType.ELEVATOR: ["elevator", "lift", "vertical transport", "elevator access"],
    SpotType.ACCESSIBLE_ENTRANCE: [
        "entrance",
        "accessible door",
        "automatic door",
        "entrance ramp",
    ],
    SpotType.STEP_FREE_ROUTE: ["path", "walkway", "route", "step-free path", "sidewalk"],
    SpotType.ACCESSIBLE_PARKING: [
        "parking",
        "accessible parking",
        "disabled parking",
        "parking space",
    ],
    SpotType.ACCESSIBLE_TOILET: ["toilet", "restroom", "bathroom", "accessible toilet", "wc"],
}

MATCH_WEIGHT = 2.0
MIN_CONFIDENCE = 0.3


@dataclass(frozen=True)
class Classification:
    """分類結果"""

    spot_type: Optional[SpotType]
    confidence: float


class TextClassifier:
    """参照語彙とのキーワード一致で種別を推定する"""

    def __init__(
        self,
        references: Optional[dict[SpotType, list[str]]] = None,
        min_confidence: float = MIN_CONFIDENCE,
    ) -> None:
        self.references = references or REFERENCE_DESCRIPTIONS
        self.min_confidence = min_confidence
        self._reference_tokens = {
            spot_type: [tokenize(phrase) for phrase in phrases]
            for spot_type, phrases in self.references.items()
        }

    def classify(self, text: str) -> Classification:
        """
        テキストから種別を推定

        Args:
            text: 自由記述（音声入力の書き起こしなど）

        Returns:
            Classification: 推定結果（確信度が閾値以下の場合は種別None・確信度0）
        """
        input_tokens = tokenize(text)
        if not input_tokens:
            return Classification(spot_type=None, confidence=0.0)

        scores: dict[SpotType, float] = {}
        for spot_type, phrases in self._reference_tokens.items():
            type_score = 0.0
            for phrase_tokens in phrases:
                for token in input_tokens:
                    if token in phrase_tokens:
                        type_score += MATCH_WEIGHT
            scores[spot_type] = type_score

        total = sum(scores.values())
        if total <= 0:
            return Classification(spot_type=None, confidence=0.0)

        # 同点の場合は参照語彙の定義順で先のものを採用
        best_type = max(scores, key=lambda spot_type: scores[spot_type])
        confidence = scores[best_type] / total

        logger.debug(f"Text classified as {best_type.value} (confidence={confidence:.2f})")

        if confidence > self.min_confidence:
            return Classification(spot_type=best_type, confidence=confidence)

        return Classification(spot_type=None, confidence=0.0)

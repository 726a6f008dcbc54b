"""OSMタグからスポット種別を判定する分類器"""

from dataclasses import dataclass
from typing import Callable, Optional

from ....shared.utils.text import normalize_tag_value, normalize_text
from ...spots.domain.enums import SpotType

TagPredicate = Callable[[dict[str, str]], bool]


def tag_equals(key: str, value: str) -> TagPredicate:
    """タグ key の値が value と一致するか"""

    def predicate(tags: dict[str, str]) -> bool:
        return normalize_tag_value(tags.get(key)) == value

    return predicate


def all_of(*predicates: TagPredicate) -> TagPredicate:
    def predicate(tags: dict[str, str]) -> bool:
        return all(p(tags) for p in predicates)

    return predicate


def any_of(*predicates: TagPredicate) -> TagPredicate:
    def predicate(tags: dict[str, str]) -> bool:
        return any(p(tags) for p in predicates)

    return predicate


@dataclass(frozen=True)
class TagRule:
    """判定ルール（条件、種別、name タグがない場合のタイトル）"""

    predicate: TagPredicate
    spot_type: SpotType
    default_title: str


WHEELCHAIR_YES = tag_equals("wheelchair", "yes")

# 上から順に評価し、最初に一致したルールを採用する
TAG_RULES: list[TagRule] = [
    TagRule(tag_equals("highway", "elevator"), SpotType.ELEVATOR, "Elevator"),
    TagRule(
        any_of(tag_equals("ramp:wheelchair", "yes"), tag_equals("ramp", "yes")),
        SpotType.RAMP,
        "Wheelchair Ramp",
    ),
    TagRule(
        all_of(tag_equals("entrance", "yes"), WHEELCHAIR_YES),
        SpotType.ACCESSIBLE_ENTRANCE,
        "Accessible Entrance",
    ),
    TagRule(
        all_of(tag_equals("amenity", "parking"), WHEELCHAIR_YES),
        SpotType.ACCESSIBLE_PARKING,
        "Accessible Parking",
    ),
    TagRule(
        all_of(tag_equals("amenity", "toilets"), WHEELCHAIR_YES),
        SpotType.ACCESSIBLE_TOILET,
        "Accessible Toilet",
    ),
    TagRule(tag_equals("tactile_paving", "yes"), SpotType.STEP_FREE_ROUTE, "Step-free Route"),
]

DEFAULT_SPOT_TYPE = SpotType.ACCESSIBLE_ENTRANCE
DEFAULT_TITLE = "Accessible Feature"


class TagClassifier:
    """順序付きルール表でタグを種別に変換する分類器"""

    def __init__(self, rules: Optional[list[TagRule]] = None) -> None:
        """
        Args:
            rules: 判定ルール（Noneの場合は TAG_RULES）
        """
        self.rules = list(TAG_RULES if rules is None else rules)

    def classify(self, tags: dict[str, str]) -> tuple[SpotType, str]:
        """
        タグから種別とタイトルを判定

        Args:
            tags: OSMタグ

        Returns:
            tuple[SpotType, str]: 種別とタイトル（name タグ優先）
        """
        name = normalize_text(tags.get("name"))

        for rule in self.rules:
            if rule.predicate(tags):
                return rule.spot_type, name or rule.default_title

        return DEFAULT_SPOT_TYPE, name or DEFAULT_TITLE

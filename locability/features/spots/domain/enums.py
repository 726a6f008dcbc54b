"""アクセシビリティスポットのEnum定義"""
from enum import Enum

from ....shared.exceptions.errors import ParsingError


class SpotType(str, Enum):
    """アクセシビリティ設備の種別（値は永続化時のラベル）"""

    RAMP = "Ramp"
    ELEVATOR = "Elevator"
    ACCESSIBLE_ENTRANCE = "Accessible Entrance"
    STEP_FREE_ROUTE = "Step-Free Route"
    ACCESSIBLE_PARKING = "Accessible Parking"
    ACCESSIBLE_TOILET = "Accessible Toilet"

    @classmethod
    def from_label(cls, label: str) -> "SpotType":
        """
        ラベルから種別を取得

        Raises:
            ParsingError: 未知のラベルの場合
        """
        for spot_type in cls:
            if spot_type.value == label:
                return spot_type
        raise ParsingError(f"Unknown spot type: {label!r}")


class SpotStatus(str, Enum):
    """設備の稼働状況"""

    WORKING = "Working"
    NOT_WORKING = "Not Working"
    UNDER_MAINTENANCE = "Under Maintenance"

    @classmethod
    def from_label(cls, label: str) -> "SpotStatus":
        """
        ラベルから稼働状況を取得

        Raises:
            ParsingError: 未知のラベルの場合
        """
        for status in cls:
            if status.value == label:
                return status
        raise ParsingError(f"Unknown spot status: {label!r}")


class AccessibilityFilter(str, Enum):
    """地図のフィルターバー"""

    ALL = "All"
    WHEELCHAIR = "Wheelchair"
    STROLLER = "Stroller"
    RAMP = "Ramps"
    ELEVATOR = "Elevators"

    @property
    def spot_types(self) -> frozenset[SpotType]:
        """このフィルターで表示する種別"""
        return FILTER_SPOT_TYPES[self]


FILTER_SPOT_TYPES: dict[AccessibilityFilter, frozenset[SpotType]] = {
    AccessibilityFilter.ALL: frozenset(SpotType),
    AccessibilityFilter.WHEELCHAIR: frozenset(
        {SpotType.RAMP, SpotType.ELEVATOR, SpotType.ACCESSIBLE_ENTRANCE}
    ),
    AccessibilityFilter.STROLLER: frozenset({SpotType.RAMP, SpotType.STEP_FREE_ROUTE}),
    AccessibilityFilter.RAMP: frozenset({SpotType.RAMP}),
    AccessibilityFilter.ELEVATOR: frozenset({SpotType.ELEVATOR}),
}
